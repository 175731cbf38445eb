from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from adapters.base import AdapterError, BackendError, DatabaseAdapter, NotConnectedError
from adapters.factory import get_adapter
from adapters.models import ConnectionConfig, FunctionInfo, TableInfo, TriggerInfo
from explorer.guardrails import validate_sql


logger = logging.getLogger(__name__)


class DatabaseService:
    """Single-handle façade over the adapter selected for ``config.kind``.

    Unconnected until ``connect`` succeeds. Every operation except ``connect`` and
    ``disconnect`` raises ``NotConnectedError`` while Unconnected. Driver failures
    surface as ``BackendError`` carrying the driver message unchanged.
    """

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self._backend: Optional[DatabaseAdapter] = None

    def __enter__(self) -> "DatabaseService":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.disconnect()
        return False

    @property
    def kind(self) -> str:
        return self.config.kind

    @property
    def is_connected(self) -> bool:
        return self._backend is not None and self._backend.is_connected

    @property
    def supports_sql(self) -> bool:
        return self._require_backend().supports_sql

    def _require_backend(self) -> DatabaseAdapter:
        if self._backend is None or not self._backend.is_connected:
            raise NotConnectedError()
        return self._backend

    @contextmanager
    def _driver_errors(self, operation: str, backend: DatabaseAdapter) -> Iterator[None]:
        try:
            yield
        except AdapterError as exc:
            logger.warning("%s on %s failed: %s", operation, backend.engine, exc)
            raise
        except backend.driver_errors as exc:
            logger.warning("%s on %s failed: %s", operation, backend.engine, exc)
            raise BackendError(str(exc), operation=operation) from exc

    def connect(self) -> None:
        if self._backend is not None:
            logger.warning("Closing the current %s connection before reconnecting", self._backend.engine)
            self.disconnect()

        backend = get_adapter(db_engine=self.config.kind, source_config=self.config.parameters)
        with self._driver_errors("connect", backend):
            backend.connect()
        self._backend = backend
        logger.info("Connected to %s", backend.engine)

    def disconnect(self) -> None:
        backend, self._backend = self._backend, None
        if backend is None:
            logger.debug("disconnect called without an open connection")
            return
        with self._driver_errors("disconnect", backend):
            backend.disconnect()
        logger.info("Disconnected from %s", backend.engine)

    def get_tables(self) -> List[TableInfo]:
        backend = self._require_backend()
        logger.debug("Listing tables on %s", backend.engine)
        with self._driver_errors("get_tables", backend):
            return backend.list_tables()

    def get_triggers(self) -> List[TriggerInfo]:
        backend = self._require_backend()
        logger.debug("Listing triggers on %s", backend.engine)
        with self._driver_errors("get_triggers", backend):
            return backend.list_triggers()

    def get_functions(self) -> List[FunctionInfo]:
        backend = self._require_backend()
        logger.debug("Listing functions on %s", backend.engine)
        with self._driver_errors("get_functions", backend):
            return backend.list_functions()

    def execute_query(self, query: str) -> List[Dict[str, Any]]:
        backend = self._require_backend()
        if self.config.read_only and backend.supports_sql:
            query = validate_sql(query)
        logger.debug("Executing query on %s", backend.engine)
        with self._driver_errors("execute_query", backend):
            return backend.run_query(query)

    def export_table_schema(self, table_name: str) -> str:
        backend = self._require_backend()
        logger.debug("Exporting schema of %s on %s", table_name, backend.engine)
        with self._driver_errors("export_table_schema", backend):
            return backend.export_schema(table_name)

    def export_table_data(self, table_name: str) -> str:
        backend = self._require_backend()
        logger.debug("Exporting data of %s on %s", table_name, backend.engine)
        with self._driver_errors("export_table_data", backend):
            return backend.export_data(table_name)
