"""SQL identifier validation to prevent injection in dynamic queries."""

import re
from collections.abc import Iterable

# Match SQLite-safe identifiers: start with letter or underscore, then alphanumeric + underscore
_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def validate_identifier(name: str) -> str:
    """Validate a SQL identifier (table or column name).

    Returns the name if valid, raises ValueError if not.
    """
    if not isinstance(name, str) or not _IDENTIFIER_RE.fullmatch(name):
        msg = f"Invalid SQL identifier: {name!r}"
        raise ValueError(msg)
    return name


def validate_table(table: str, allowed_tables: Iterable[str] = ()) -> str:
    """Validate a table name and, when an allow-list is given, require membership."""
    validate_identifier(table)
    allowed = list(allowed_tables or ())
    if allowed and table not in allowed:
        msg = f"Table not allowed: {table}"
        raise ValueError(msg)
    return table


def validate_column_names(cols: Iterable[str] | None) -> list[str]:
    """Validate every column name; an empty or missing list yields []."""
    if not cols:
        return []
    columns = list(cols)
    for col in columns:
        validate_identifier(col)
    return columns
