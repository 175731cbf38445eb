from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Sequence


_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class SQLDialect:
    engine: str
    identifier_quote: str
    escape_backslashes: bool = False

    def quote_identifier(self, name: str) -> str:
        q = self.identifier_quote
        return f"{q}{name.replace(q, q * 2)}{q}"

    def render_identifier(self, name: str) -> str:
        if _PLAIN_IDENTIFIER.match(name):
            return name
        return self.quote_identifier(name)

    def render_string(self, text: str) -> str:
        if self.escape_backslashes:
            text = text.replace("\\", "\\\\")
        return "'" + text.replace("'", "''") + "'"

    def render_bytes(self, data: bytes) -> str:
        if self.engine == "mysql":
            return f"X'{data.hex()}'"
        return f"'\\x{data.hex()}'::bytea"

    def render_literal(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, float) and not math.isfinite(value):
            if math.isnan(value):
                return "'NaN'"
            return "'Infinity'" if value > 0 else "'-Infinity'"
        if isinstance(value, Decimal) and not value.is_finite():
            return self.render_string(str(value))
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self.render_bytes(bytes(value))
        if isinstance(value, str):
            return self.render_string(value)
        if isinstance(value, (dict, list)):
            return self.render_string(json.dumps(value, default=str))
        return self.render_string(str(value))

    def render_insert(self, table_name: str, columns: Sequence[str], row: Mapping[str, Any]) -> str:
        column_list = ", ".join(self.render_identifier(col) for col in columns)
        values = ", ".join(self.render_literal(row.get(col)) for col in columns)
        return f"INSERT INTO {self.render_identifier(table_name)} ({column_list}) VALUES ({values});"

    def render_inserts(self, table_name: str, rows: Sequence[Mapping[str, Any]]) -> str:
        """One INSERT per row, columns taken from the first row, joined by newlines."""
        if not rows:
            return ""
        columns = list(rows[0].keys())
        if not columns:
            return ""
        return "\n".join(self.render_insert(table_name, columns, row) for row in rows)


def get_sql_dialect(db_engine: str) -> SQLDialect:
    engine = (db_engine or "postgres").strip().lower()
    if engine in {"postgres", "postgresql"}:
        return SQLDialect(engine="postgres", identifier_quote='"')
    if engine == "mysql":
        return SQLDialect(engine="mysql", identifier_quote="`", escape_backslashes=True)
    return SQLDialect(engine=engine, identifier_quote='"')
