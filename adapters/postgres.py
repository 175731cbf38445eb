from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from adapters.base import RelationalAdapter
from adapters.models import ColumnInfo, FunctionInfo, TableInfo, TriggerInfo
from adapters.sql_renderer import get_sql_dialect


logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "public"

TABLES_SQL = """
    SELECT
        table_name,
        json_agg(
            json_build_object(
                'name', column_name,
                'type', data_type,
                'nullable', is_nullable = 'YES'
            )
            ORDER BY ordinal_position
        ) AS columns
    FROM information_schema.columns
    WHERE table_schema = %s
    GROUP BY table_name
"""

TRIGGERS_SQL = """
    SELECT
        trigger_name AS name,
        event_object_table AS "table",
        event_manipulation AS event,
        action_timing AS timing,
        action_statement AS statement
    FROM information_schema.triggers
    WHERE trigger_schema = %s
"""

# pg_get_functiondef() raises for aggregates, so they are left out.
FUNCTIONS_SQL = """
    SELECT
        p.proname AS name,
        l.lanname AS language,
        pg_get_function_result(p.oid) AS "returnType",
        pg_get_function_arguments(p.oid) AS arguments,
        pg_get_functiondef(p.oid) AS definition
    FROM pg_proc p
    JOIN pg_namespace n ON p.pronamespace = n.oid
    JOIN pg_language l ON p.prolang = l.oid
    WHERE n.nspname = %s
      AND p.prokind <> 'a'
"""

CREATE_TABLE_SQL = """
    SELECT
        'CREATE TABLE ' || quote_ident(%(table)s) || ' (' ||
        string_agg(
            quote_ident(column_name) || ' ' ||
            data_type ||
            CASE
                WHEN character_maximum_length IS NOT NULL
                THEN '(' || character_maximum_length || ')'
                ELSE ''
            END ||
            CASE
                WHEN is_nullable = 'NO'
                THEN ' NOT NULL'
                ELSE ''
            END,
            ', '
            ORDER BY ordinal_position
        ) || ');' AS create_table_sql
    FROM information_schema.columns
    WHERE table_name = %(table)s
      AND table_schema = %(schema)s
    GROUP BY table_name
"""


def parse_columns(payload: Any) -> List[ColumnInfo]:
    """Normalize the json_agg column payload; psycopg usually decodes it already."""
    if payload is None:
        return []
    if isinstance(payload, (bytes, bytearray)):
        payload = bytes(payload).decode("utf-8")
    if isinstance(payload, str):
        payload = json.loads(payload)
    return [
        ColumnInfo(name=item["name"], type=item["type"], nullable=bool(item["nullable"]))
        for item in payload
    ]


class PostgresAdapter(RelationalAdapter):
    engine = "postgres"
    default_port = 5432
    driver_errors = (psycopg.Error,)
    dialect = get_sql_dialect("postgres")

    @property
    def schema_name(self) -> str:
        return self._param("schema") or DEFAULT_SCHEMA

    def _open(self) -> psycopg.Connection:
        params = self._db_params()
        logger.debug("Opening postgres connection to %s:%s/%s", params["host"], params["port"], params["database"])
        return psycopg.connect(
            host=params["host"],
            port=params["port"],
            dbname=params["database"],
            user=params["user"],
            password=params["password"],
            autocommit=True,
            row_factory=dict_row,
        )

    def _close(self, handle: psycopg.Connection) -> None:
        handle.close()

    def _fetch_all(self, query: Any, params: Optional[Any] = None) -> List[Dict[str, Any]]:
        with self.handle.cursor() as cur:
            cur.execute(query, params)
            if cur.description is None:
                return []
            return [dict(row) for row in cur.fetchall()]

    def _select_all(self, table_name: str) -> List[Dict[str, Any]]:
        query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(self.schema_name, table_name))
        return self._fetch_all(query)

    def list_tables(self) -> List[TableInfo]:
        rows = self._fetch_all(TABLES_SQL, (self.schema_name,))
        return [TableInfo(name=row["table_name"], columns=parse_columns(row["columns"])) for row in rows]

    def list_triggers(self) -> List[TriggerInfo]:
        rows = self._fetch_all(TRIGGERS_SQL, (self.schema_name,))
        return [TriggerInfo.model_validate(row) for row in rows]

    def list_functions(self) -> List[FunctionInfo]:
        rows = self._fetch_all(FUNCTIONS_SQL, (self.schema_name,))
        return [FunctionInfo.model_validate(row) for row in rows]

    def export_schema(self, table_name: str) -> str:
        rows = self._fetch_all(CREATE_TABLE_SQL, {"table": table_name, "schema": self.schema_name})
        if not rows:
            return ""
        return rows[0].get("create_table_sql") or ""
