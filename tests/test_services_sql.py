"""Tests for the table-level statement builders."""

import sqlite3
from unittest.mock import MagicMock

import pytest

from task_api.services.db import init_schema
from task_api.services.sql import delete_from, insert_into, select_all_from, select_one_from, update_table


@pytest.fixture
def conn() -> sqlite3.Connection:
    """In-memory connection with the schema and two customers."""
    db = sqlite3.connect(":memory:")
    db.row_factory = sqlite3.Row
    init_schema(db)
    db.executemany(
        "INSERT INTO Customers (CompanyName, ContactName) VALUES (?, ?)",
        [("Acme", "Wile"), ("Globex", "Hank")],
    )
    db.commit()
    yield db
    db.close()


def test_select_all_from(conn: sqlite3.Connection) -> None:
    """select_all_from returns every row."""
    rows = select_all_from(conn, "Customers", order_by="CustomerID")
    assert [r["CompanyName"] for r in rows] == ["Acme", "Globex"]


def test_select_all_from_where(conn: sqlite3.Connection) -> None:
    """select_all_from applies a parameterized WHERE clause."""
    rows = select_all_from(conn, "Customers", "ContactName = ?", ("Hank",))
    assert len(rows) == 1
    assert rows[0]["CompanyName"] == "Globex"


def test_select_all_from_order_desc(conn: sqlite3.Connection) -> None:
    """select_all_from appends ORDER BY."""
    rows = select_all_from(conn, "Customers", order_by="CustomerID DESC")
    assert [r["CompanyName"] for r in rows] == ["Globex", "Acme"]


def test_select_one_from_missing(conn: sqlite3.Connection) -> None:
    """select_one_from returns None when no row matches."""
    assert select_one_from(conn, "Customers", "CustomerID = ?", (404,)) is None


def test_insert_into(conn: sqlite3.Connection) -> None:
    """insert_into binds values and exposes the new rowid."""
    cursor = insert_into(conn, "Customers", ["CompanyName", "ContactName"], ["Initech", "Bill"])
    row = select_one_from(conn, "Customers", "rowid = ?", (cursor.lastrowid,))
    assert row["CompanyName"] == "Initech"
    assert row["ContactName"] == "Bill"


def test_insert_into_length_mismatch(conn: sqlite3.Connection) -> None:
    """insert_into rejects mismatched columns and values."""
    with pytest.raises(ValueError, match="length mismatch"):
        insert_into(conn, "Customers", ["CompanyName", "ContactName"], ["Initech"])


def test_insert_into_bad_column(conn: sqlite3.Connection) -> None:
    """insert_into validates column names."""
    with pytest.raises(ValueError, match="Invalid SQL identifier"):
        insert_into(conn, "Customers", ["CompanyName) VALUES ('x'); --"], ["x"])


def test_update_table(conn: sqlite3.Connection) -> None:
    """update_table sets only the given columns on matching rows."""
    update_table(conn, "Customers", {"ContactName": "Road Runner"}, "CustomerID = ?", (1,))
    row = select_one_from(conn, "Customers", "CustomerID = ?", (1,))
    assert row["ContactName"] == "Road Runner"
    assert row["CompanyName"] == "Acme"
    other = select_one_from(conn, "Customers", "CustomerID = ?", (2,))
    assert other["ContactName"] == "Hank"


def test_update_table_requires_where(conn: sqlite3.Connection) -> None:
    """update_table refuses to update without a WHERE clause."""
    with pytest.raises(ValueError, match="Missing WHERE clause for update"):
        update_table(conn, "Customers", {"ContactName": "x"}, "")


def test_update_table_requires_updates(conn: sqlite3.Connection) -> None:
    """update_table refuses an empty update."""
    with pytest.raises(ValueError, match="Nothing to update"):
        update_table(conn, "Customers", {}, "CustomerID = ?", (1,))


def test_delete_from(conn: sqlite3.Connection) -> None:
    """delete_from removes matching rows only."""
    delete_from(conn, "Customers", "CustomerID = ?", (1,))
    rows = select_all_from(conn, "Customers")
    assert [r["CompanyName"] for r in rows] == ["Globex"]


def test_delete_from_requires_where(conn: sqlite3.Connection) -> None:
    """delete_from refuses to delete without a WHERE clause."""
    with pytest.raises(ValueError, match="Missing WHERE clause for delete"):
        delete_from(conn, "Customers", "")
    assert len(select_all_from(conn, "Customers")) == 2


def test_allow_list_enforced(conn: sqlite3.Connection) -> None:
    """Tables outside the allow-list are rejected."""
    with pytest.raises(ValueError, match="Table not allowed"):
        select_all_from(conn, "Customers", allowed_tables=["Tasks"])


@pytest.mark.parametrize(
    "call",
    [
        lambda db: select_all_from(db, "Customers; DROP TABLE Tasks"),
        lambda db: select_one_from(db, "1Customers", "CustomerID = ?", (1,)),
        lambda db: insert_into(db, "Cust omers", ["CompanyName"], ["x"]),
        lambda db: update_table(db, "Customers--", {"CompanyName": "x"}, "CustomerID = ?", (1,)),
        lambda db: delete_from(db, "main.Customers", "CustomerID = ?", (1,)),
    ],
)
def test_bad_table_fails_before_touching_database(call) -> None:
    """Every builder validates the table name before issuing SQL."""
    db = MagicMock()
    with pytest.raises(ValueError, match="Invalid SQL identifier"):
        call(db)
    db.execute.assert_not_called()
    db.commit.assert_not_called()
