"""Test fixtures for task-api tests."""

import pathlib
import sqlite3
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from task_api.services.db import init_schema


def _create_test_db(tmp_path: pathlib.Path) -> str:
    """Create a test database with the schema and a little seed data."""
    db_path = str(tmp_path / "test.db")
    conn = sqlite3.connect(db_path)
    init_schema(conn)

    conn.executemany(
        "INSERT INTO Customers (CompanyName, ContactName) VALUES (?, ?)",
        [("Acme", "Wile E."), ("Globex", "Hank")],
    )
    conn.executemany(
        "INSERT INTO Tasks (title, description, assignee_id) VALUES (?, ?, ?)",
        [("Write docs", "README and API notes", 1), ("Fix login", None, 2)],
    )
    conn.executemany(
        "INSERT INTO Columns (name, key, position) VALUES (?, ?, ?)",
        [("Done", "done", 2), ("To Do", "todo", 0), ("In Progress", "doing", 1)],
    )
    conn.executemany(
        "INSERT INTO Comments (task_id, created_by, content) VALUES (?, ?, ?)",
        [(1, 1, "Started"), (1, 2, "Looks good"), (2, 1, "Cannot reproduce")],
    )
    conn.commit()

    conn.close()
    return db_path


@pytest.fixture
def test_db(tmp_path: pathlib.Path) -> str:
    """Create a test database and return its path."""
    return _create_test_db(tmp_path)


@pytest.fixture
def client(test_db: str) -> Generator[TestClient, None, None]:
    """Create a TestClient with the server configured to use the test database.

    The client is entered as a context manager so the lifespan binds the
    connection onto app.state.
    """
    from task_api import config
    from task_api.services import db

    original_db_path = config.DB_PATH
    config.DB_PATH = test_db
    db.close_connection()
    db.reset_connection()

    from task_api.main import app

    with TestClient(app) as test_client:
        yield test_client

    # Restore
    config.DB_PATH = original_db_path
    db.close_connection()
    db.reset_connection()


@pytest.fixture
def cors_config() -> Generator[None, None, None]:
    """Restore CORS settings after a test modifies them."""
    from task_api import config

    original = (list(config.ALLOWED_ORIGINS), config.ALLOW_CREDENTIALS)
    yield
    config.ALLOWED_ORIGINS, config.ALLOW_CREDENTIALS = original
