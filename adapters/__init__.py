"""Database adapter layer: one implementation per backend kind behind a shared capability set."""

from adapters.base import (
    AdapterError,
    BackendError,
    ConfigurationError,
    DatabaseAdapter,
    NotConnectedError,
    UnknownKindError,
    UnsupportedOperationError,
)
from adapters.factory import get_adapter
from adapters.models import ColumnInfo, ConnectionConfig, DatabaseKind, FunctionInfo, TableInfo, TriggerInfo

__all__ = [
    "AdapterError",
    "BackendError",
    "ColumnInfo",
    "ConfigurationError",
    "ConnectionConfig",
    "DatabaseAdapter",
    "DatabaseKind",
    "FunctionInfo",
    "NotConnectedError",
    "TableInfo",
    "TriggerInfo",
    "UnknownKindError",
    "UnsupportedOperationError",
    "get_adapter",
]
