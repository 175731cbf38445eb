from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.env_loader import env_flag, env_value


class DatabaseKind(str, Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"
    FIRESTORE = "firestore"


KIND_ALIASES = {
    "postgres": DatabaseKind.POSTGRES.value,
    "postgresql": DatabaseKind.POSTGRES.value,
    "pg": DatabaseKind.POSTGRES.value,
    "mysql": DatabaseKind.MYSQL.value,
    "firestore": DatabaseKind.FIRESTORE.value,
}


def normalize_kind(kind: Any) -> str:
    raw = kind.value if isinstance(kind, Enum) else str(kind or "")
    lowered = raw.strip().lower()
    return KIND_ALIASES.get(lowered, lowered)


class ConnectionConfig(BaseModel):
    """Which backend to reach and how; consumed once by `DatabaseService.connect`."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., min_length=1, description="postgres, mysql or firestore")
    parameters: Dict[str, Any] = Field(default_factory=dict)
    read_only: bool = Field(default=False, description="Reject non-SELECT statements in execute_query")

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> str:
        return normalize_kind(value)

    @classmethod
    def from_env(cls, kind: Optional[str] = None, **parameters: Any) -> "ConnectionConfig":
        selected = kind or env_value("DB_ENGINE", DatabaseKind.POSTGRES.value)
        return cls(kind=selected, parameters=parameters, read_only=env_flag("DB_READ_ONLY"))


class _TextRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        # Catalog views return NULL for missing definitions; drivers may hand back bytes.
        if value is None:
            return ""
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")
        return value


class ColumnInfo(BaseModel):
    name: str
    type: str
    nullable: bool


class TableInfo(BaseModel):
    name: str
    columns: List[ColumnInfo] = Field(default_factory=list)


class TriggerInfo(_TextRecord):
    name: str
    table: str
    event: str
    timing: str
    statement: str


class FunctionInfo(_TextRecord):
    name: str
    language: str
    return_type: str = Field(alias="returnType")
    arguments: str
    definition: str
