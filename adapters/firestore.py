from __future__ import annotations

import logging
from typing import Any, Dict, List

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from adapters.base import ConfigurationError, DatabaseAdapter
from adapters.models import FunctionInfo, TableInfo, TriggerInfo
from utils.env_loader import env_value


logger = logging.getLogger(__name__)


def _build_client(key_filename: str, project_id: str) -> firestore.Client:
    # Construction is lazy: credentials are read here, no RPC is made.
    return firestore.Client.from_service_account_json(key_filename, project=project_id)


class FirestoreAdapter(DatabaseAdapter):
    """Collections stand in for tables; the SQL-only capabilities are unsupported."""

    engine = "firestore"
    supports_sql = False
    driver_errors = (
        google_exceptions.GoogleAPIError,
        auth_exceptions.GoogleAuthError,
        OSError,
        ValueError,
    )

    def _client_params(self) -> Dict[str, str]:
        project_id = self._param("projectId", "project_id") or env_value("FIRESTORE_PROJECT_ID")
        key_filename = self._param("keyFilename", "key_filename") or env_value("GOOGLE_APPLICATION_CREDENTIALS")
        if not project_id:
            raise ConfigurationError("FIRESTORE_PROJECT_ID is required")
        if not key_filename:
            raise ConfigurationError("GOOGLE_APPLICATION_CREDENTIALS is required")
        return {"project_id": str(project_id), "key_filename": str(key_filename)}

    def _open(self) -> firestore.Client:
        params = self._client_params()
        logger.debug("Building firestore client for project %s", params["project_id"])
        return _build_client(params["key_filename"], params["project_id"])

    def list_tables(self) -> List[TableInfo]:
        return [TableInfo(name=collection.id, columns=[]) for collection in self.handle.collections()]

    def list_triggers(self) -> List[TriggerInfo]:
        _ = self.handle
        return []

    def list_functions(self) -> List[FunctionInfo]:
        _ = self.handle
        return []

    def run_query(self, query: str) -> List[Dict[str, Any]]:
        self._unsupported("SQL queries are not supported for Firestore")

    def export_schema(self, table_name: str) -> str:
        self._unsupported("SQL schema export is not supported for Firestore")

    def export_data(self, table_name: str) -> str:
        self._unsupported("SQL data export is not supported for Firestore")
