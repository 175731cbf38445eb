from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, NoReturn, Optional, Tuple, Type

from adapters.models import FunctionInfo, TableInfo, TriggerInfo
from adapters.sql_renderer import SQLDialect
from utils.env_loader import env_value


logger = logging.getLogger(__name__)


class AdapterError(RuntimeError):
    pass


class NotConnectedError(AdapterError):
    def __init__(self, message: str = "You must connect to a database first!"):
        super().__init__(message)


class UnsupportedOperationError(AdapterError):
    pass


class UnknownKindError(AdapterError, ValueError):
    pass


class ConfigurationError(AdapterError, ValueError):
    pass


class BackendError(AdapterError):
    """A failure reported by the database driver, message kept verbatim."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class DatabaseAdapter(ABC):
    """One backend kind behind the shared capability set.

    The adapter is either Unconnected (``_handle is None``) or Connected. Only
    ``connect`` creates a handle; every capability method goes through ``handle``,
    which raises ``NotConnectedError`` while Unconnected.
    """

    engine: str = "unknown"
    supports_sql: bool = True
    driver_errors: Tuple[Type[BaseException], ...] = ()

    def __init__(self, source_config: Optional[Dict[str, Any]] = None):
        self.source_config = dict(source_config or {})
        self._handle: Any = None

    @property
    def is_connected(self) -> bool:
        return self._handle is not None

    @property
    def handle(self) -> Any:
        if self._handle is None:
            raise NotConnectedError()
        return self._handle

    def connect(self) -> None:
        if self._handle is not None:
            logger.warning("Releasing open %s handle before reconnecting", self.engine)
            self.disconnect()
        self._handle = self._open()

    def disconnect(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            self._close(handle)

    def _param(self, *keys: str) -> Any:
        for key in keys:
            value = self.source_config.get(key)
            if value not in (None, ""):
                return value
        return None

    @abstractmethod
    def _open(self) -> Any:
        raise NotImplementedError

    def _close(self, handle: Any) -> None:
        return None

    def _unsupported(self, message: str) -> NoReturn:
        # NotConnectedError is checked before UnsupportedOperationError.
        _ = self.handle
        raise UnsupportedOperationError(message)

    @abstractmethod
    def list_tables(self) -> List[TableInfo]:
        raise NotImplementedError

    @abstractmethod
    def list_triggers(self) -> List[TriggerInfo]:
        raise NotImplementedError

    @abstractmethod
    def list_functions(self) -> List[FunctionInfo]:
        raise NotImplementedError

    @abstractmethod
    def run_query(self, query: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def export_schema(self, table_name: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def export_data(self, table_name: str) -> str:
        raise NotImplementedError


class RelationalAdapter(DatabaseAdapter):
    """Shared parameter resolution and data export for the SQL backends."""

    default_port: int = 0
    dialect: SQLDialect

    def _db_params(self) -> Dict[str, Any]:
        host = self._param("host") or env_value("DB_HOST")
        database = self._param("database", "dbname") or env_value("DB_NAME")
        user = self._param("user") or env_value("DB_USER")
        password = self._param("password") or env_value("DB_PASSWORD")
        port_raw = self._param("port") or env_value("DB_PORT", str(self.default_port))
        if not host:
            raise ConfigurationError("DB_HOST is required")
        if not database:
            raise ConfigurationError("DB_NAME is required")
        if not user:
            raise ConfigurationError("DB_USER is required")
        if not password:
            raise ConfigurationError("DB_PASSWORD is required")
        try:
            port = int(port_raw)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"DB_PORT must be an integer, got: {port_raw!r}") from exc
        return {
            "host": host,
            "port": port,
            "database": database,
            "user": user,
            "password": password,
        }

    @abstractmethod
    def _fetch_all(self, query: Any, params: Optional[Any] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def _select_all(self, table_name: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def run_query(self, query: str) -> List[Dict[str, Any]]:
        return self._fetch_all(query)

    def export_data(self, table_name: str) -> str:
        rows = self._select_all(table_name)
        if not rows:
            return ""
        return self.dialect.render_inserts(table_name, rows)
