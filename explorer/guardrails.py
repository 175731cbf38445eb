import re


class UnsafeSQLError(ValueError):
    pass


_DENYLIST = (
    "insert",
    "update",
    "delete",
    "merge",
    "drop",
    "alter",
    "create",
    "truncate",
    "grant",
    "revoke",
    "copy",
    "call",
    "do",
    "vacuum",
    "comment",
    "lock",
)

_READ_PREFIXES = ("select ", "with ", "show ", "explain ", "describe ")


def _normalize_sql(sql: str) -> str:
    return re.sub(r"\s+", " ", sql.strip()).lower()


def validate_sql(sql: str) -> str:
    """Accept a single read-only statement and return it without the trailing semicolon."""
    candidate = sql.strip()
    if not candidate:
        raise UnsafeSQLError("SQL is empty")

    semicolons = candidate.count(";")
    if semicolons > 1:
        raise UnsafeSQLError("Multiple SQL statements are not allowed")
    if semicolons == 1 and not candidate.endswith(";"):
        raise UnsafeSQLError("Semicolon is only allowed at the end of SQL")

    normalized = _normalize_sql(candidate.rstrip(";")) + " "
    if not normalized.startswith(_READ_PREFIXES):
        raise UnsafeSQLError("Only read-only queries are allowed in read-only mode")

    for keyword in _DENYLIST:
        if re.search(rf"\b{keyword}\b", normalized):
            raise UnsafeSQLError(f"Blocked SQL keyword detected: {keyword}")

    return candidate.rstrip(";")
