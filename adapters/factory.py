from __future__ import annotations

from typing import Any, Dict, Optional

from adapters.base import DatabaseAdapter, UnknownKindError
from adapters.firestore import FirestoreAdapter
from adapters.models import DatabaseKind, normalize_kind
from adapters.mysql import MySQLAdapter
from adapters.postgres import PostgresAdapter
from utils.env_loader import env_value


def get_adapter(db_engine: Optional[str] = None, source_config: Optional[Dict[str, Any]] = None) -> DatabaseAdapter:
    engine = normalize_kind(db_engine or env_value("DB_ENGINE", DatabaseKind.POSTGRES.value))
    if engine == DatabaseKind.POSTGRES.value:
        return PostgresAdapter(source_config=source_config)
    if engine == DatabaseKind.MYSQL.value:
        return MySQLAdapter(source_config=source_config)
    if engine == DatabaseKind.FIRESTORE.value:
        return FirestoreAdapter(source_config=source_config)
    raise UnknownKindError(f"Unsupported db_engine: {engine}")
