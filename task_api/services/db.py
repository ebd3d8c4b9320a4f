"""Database connection and query services."""

import logging
import sqlite3
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, TypeVar

from task_api import config as _config

log = logging.getLogger(__name__)

T = TypeVar("T")

# Module-level connection singleton
_connection: sqlite3.Connection | None = None

# Lock to serialize database access across FastAPI's thread pool;
# every request shares the one connection.
_db_lock = threading.Lock()


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    """Get or create the singleton database connection with the schema applied."""
    global _connection
    if _connection is not None:
        return _connection

    path = db_path or _config.DB_PATH

    log.info("Connecting to database: %s", path)

    if path != ":memory:" and not Path(path).parent.exists():
        msg = f"Database directory not found: {Path(path).parent}"
        raise FileNotFoundError(msg)

    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    init_schema(conn)

    _connection = conn
    return conn


def init_schema(conn: sqlite3.Connection, schema_path: str | None = None) -> None:
    """Apply the idempotent CREATE TABLE IF NOT EXISTS schema."""
    path = schema_path or _config.SCHEMA_PATH
    conn.executescript(Path(path).read_text(encoding="utf-8"))
    log.info("Applied schema from: %s", path)


def close_connection() -> None:
    """Close the singleton connection."""
    global _connection
    if _connection is not None:
        _connection.close()
        _connection = None


def reset_connection() -> None:
    """Reset singleton for testing."""
    global _connection
    _connection = None


def run_locked(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Call `fn` with the shared database lock held.

    Blocking; async handlers run it through `run_in_threadpool`.
    """
    with _db_lock:
        return fn(*args, **kwargs)


def query_all(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
    """Execute a query and return every row as a plain dict."""
    rows = conn.execute(sql, tuple(params)).fetchall()
    return [dict(row) for row in rows]


def query_one(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
    """Execute a query and return the first row, or None."""
    row = conn.execute(sql, tuple(params)).fetchone()
    return dict(row) if row is not None else None


def execute(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
    """Execute a non-select statement, commit, and return the cursor."""
    try:
        cursor = conn.execute(sql, tuple(params))
    except Exception:
        conn.rollback()
        raise
    conn.commit()
    return cursor


def list_tables(conn: sqlite3.Connection) -> list[str]:
    """Names of user tables, excluding SQLite internals."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    ).fetchall()
    return [row[0] for row in rows]
