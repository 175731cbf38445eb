"""Uniform introspection, query and export operations over the configured database."""

from explorer.guardrails import UnsafeSQLError, validate_sql
from explorer.service import DatabaseService

__all__ = ["DatabaseService", "UnsafeSQLError", "validate_sql"]
