from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import pymysql
import pymysql.cursors

from adapters.base import RelationalAdapter
from adapters.models import ColumnInfo, FunctionInfo, TableInfo, TriggerInfo
from adapters.sql_renderer import get_sql_dialect


logger = logging.getLogger(__name__)

# GROUP_CONCAT truncates at 1024 bytes by default.
GROUP_CONCAT_MAX_LEN = 16 * 1024 * 1024

TABLES_SQL = """
    SELECT
        TABLE_NAME AS table_name,
        GROUP_CONCAT(
            JSON_OBJECT(
                'name', COLUMN_NAME,
                'type', DATA_TYPE,
                'nullable', IS_NULLABLE = 'YES'
            )
            ORDER BY ORDINAL_POSITION
            SEPARATOR ','
        ) AS column_fragments
    FROM information_schema.columns
    WHERE table_schema = DATABASE()
    GROUP BY TABLE_NAME
"""

TRIGGERS_SQL = """
    SELECT
        TRIGGER_NAME AS name,
        EVENT_OBJECT_TABLE AS `table`,
        EVENT_MANIPULATION AS event,
        ACTION_TIMING AS timing,
        ACTION_STATEMENT AS statement
    FROM information_schema.TRIGGERS
    WHERE TRIGGER_SCHEMA = DATABASE()
"""

# The return value shows up in PARAMETERS with a NULL name; CONCAT drops it.
FUNCTIONS_SQL = """
    SELECT
        r.ROUTINE_NAME AS name,
        r.ROUTINE_BODY AS language,
        r.DTD_IDENTIFIER AS returnType,
        COALESCE(
            GROUP_CONCAT(
                CONCAT(p.PARAMETER_NAME, ' ', p.DATA_TYPE)
                ORDER BY p.ORDINAL_POSITION
                SEPARATOR ', '
            ),
            ''
        ) AS arguments,
        r.ROUTINE_DEFINITION AS definition
    FROM information_schema.ROUTINES r
    LEFT JOIN information_schema.PARAMETERS p
        ON p.SPECIFIC_SCHEMA = r.ROUTINE_SCHEMA
       AND p.SPECIFIC_NAME = r.SPECIFIC_NAME
    WHERE r.ROUTINE_SCHEMA = DATABASE()
      AND r.ROUTINE_TYPE = 'FUNCTION'
    GROUP BY r.SPECIFIC_NAME, r.ROUTINE_NAME, r.ROUTINE_BODY, r.DTD_IDENTIFIER, r.ROUTINE_DEFINITION
"""


def parse_column_fragments(raw: Any) -> List[ColumnInfo]:
    """Turn GROUP_CONCAT'ed JSON_OBJECT fragments into column descriptors.

    MySQL hands back ``{...},{...}`` as text with ``nullable`` as 0/1, so the
    fragments are bracketed into a JSON array and the flag coerced to bool.
    """
    if raw is None:
        return []
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8")
    text = str(raw).strip()
    if not text:
        return []
    return [
        ColumnInfo(name=item["name"], type=item["type"], nullable=bool(item["nullable"]))
        for item in json.loads(f"[{text}]")
    ]


class MySQLAdapter(RelationalAdapter):
    engine = "mysql"
    default_port = 3306
    driver_errors = (pymysql.Error,)
    dialect = get_sql_dialect("mysql")

    def _open(self) -> pymysql.connections.Connection:
        params = self._db_params()
        logger.debug("Opening mysql connection to %s:%s/%s", params["host"], params["port"], params["database"])
        return pymysql.connect(
            host=params["host"],
            port=params["port"],
            user=params["user"],
            password=params["password"],
            database=params["database"],
            charset="utf8mb4",
            autocommit=True,
            cursorclass=pymysql.cursors.DictCursor,
        )

    def _close(self, handle: pymysql.connections.Connection) -> None:
        handle.close()

    def _fetch_all(self, query: Any, params: Optional[Any] = None) -> List[Dict[str, Any]]:
        with self.handle.cursor() as cur:
            cur.execute(query, params)
            return [dict(row) for row in cur.fetchall() or ()]

    def _select_all(self, table_name: str) -> List[Dict[str, Any]]:
        return self._fetch_all(f"SELECT * FROM {self.dialect.quote_identifier(table_name)}")

    def list_tables(self) -> List[TableInfo]:
        self._fetch_all(f"SET SESSION group_concat_max_len = {GROUP_CONCAT_MAX_LEN}")
        rows = self._fetch_all(TABLES_SQL)
        return [
            TableInfo(name=row["table_name"], columns=parse_column_fragments(row["column_fragments"]))
            for row in rows
        ]

    def list_triggers(self) -> List[TriggerInfo]:
        rows = self._fetch_all(TRIGGERS_SQL)
        return [TriggerInfo.model_validate(row) for row in rows]

    def list_functions(self) -> List[FunctionInfo]:
        self._fetch_all(f"SET SESSION group_concat_max_len = {GROUP_CONCAT_MAX_LEN}")
        rows = self._fetch_all(FUNCTIONS_SQL)
        return [FunctionInfo.model_validate(row) for row in rows]

    def export_schema(self, table_name: str) -> str:
        rows = self._fetch_all(f"SHOW CREATE TABLE {self.dialect.quote_identifier(table_name)}")
        if not rows:
            return ""
        row = rows[0]
        return row.get("Create Table") or row.get("Create View") or ""
