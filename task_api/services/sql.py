"""Table-level statement builders.

Table and column names are validated identifiers interpolated into SQL text;
values are always bound parameters. `where_clause` strings must use `?`
placeholders and come from trusted code, never from request input.
"""

import sqlite3
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from task_api.services.db import execute, query_all, query_one
from task_api.services.validation import validate_column_names, validate_table


def _where(where_clause: str) -> str:
    return f" WHERE {where_clause}" if where_clause else ""


def select_all_from(
    conn: sqlite3.Connection,
    table: str,
    where_clause: str = "",
    params: Sequence[Any] = (),
    allowed_tables: Iterable[str] = (),
    order_by: str = "",
) -> list[dict[str, Any]]:
    """Select every matching row from a table."""
    validate_table(table, allowed_tables)
    order = f" ORDER BY {order_by}" if order_by else ""
    return query_all(conn, f"SELECT * FROM {table}{_where(where_clause)}{order}", params)


def select_one_from(
    conn: sqlite3.Connection,
    table: str,
    where_clause: str = "",
    params: Sequence[Any] = (),
    allowed_tables: Iterable[str] = (),
) -> dict[str, Any] | None:
    """Select a single row from a table, or None when nothing matches."""
    validate_table(table, allowed_tables)
    return query_one(conn, f"SELECT * FROM {table}{_where(where_clause)}", params)


def insert_into(
    conn: sqlite3.Connection,
    table: str,
    columns: Sequence[str],
    values: Sequence[Any],
    allowed_tables: Iterable[str] = (),
) -> sqlite3.Cursor:
    """Insert one row; the returned cursor carries `lastrowid`."""
    validate_table(table, allowed_tables)
    validate_column_names(columns)
    if len(columns) != len(values):
        msg = "Columns and values length mismatch"
        raise ValueError(msg)
    col_list = ", ".join(columns)
    placeholders = ", ".join("?" for _ in columns)
    return execute(conn, f"INSERT INTO {table} ({col_list}) VALUES ({placeholders})", values)


def update_table(
    conn: sqlite3.Connection,
    table: str,
    updates: Mapping[str, Any],
    where_clause: str,
    where_params: Sequence[Any] = (),
    allowed_tables: Iterable[str] = (),
) -> sqlite3.Cursor:
    """Update the given columns on rows matching a required WHERE clause."""
    validate_table(table, allowed_tables)
    if not where_clause:
        msg = "Missing WHERE clause for update"
        raise ValueError(msg)
    cols = list(updates)
    if not cols:
        msg = "Nothing to update"
        raise ValueError(msg)
    validate_column_names(cols)
    assignments = ", ".join(f"{c} = ?" for c in cols)
    params = [updates[c] for c in cols] + list(where_params)
    return execute(conn, f"UPDATE {table} SET {assignments}{_where(where_clause)}", params)


def delete_from(
    conn: sqlite3.Connection,
    table: str,
    where_clause: str,
    params: Sequence[Any] = (),
    allowed_tables: Iterable[str] = (),
) -> sqlite3.Cursor:
    """Delete rows matching a required WHERE clause."""
    validate_table(table, allowed_tables)
    if not where_clause:
        msg = "Missing WHERE clause for delete"
        raise ValueError(msg)
    return execute(conn, f"DELETE FROM {table}{_where(where_clause)}", params)
