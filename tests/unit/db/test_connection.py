"""Tests for the Database connection layer."""

from __future__ import annotations

import sqlite3

import pytest

from hrviews.db.connection import Database


def test_connect_creates_file(tmp_path):
    db_path = tmp_path / ".hrviews.db"
    conn = Database(db_path).connect()
    conn.close()
    assert db_path.exists()


def test_wal_journal_mode(tmp_path):
    conn = Database(tmp_path / ".hrviews.db").connect()
    mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
    conn.close()
    assert mode == "wal"


def test_row_factory_set(tmp_path):
    conn = Database(tmp_path / ".hrviews.db").connect()
    conn.execute("CREATE TABLE t (x INTEGER)")
    conn.execute("INSERT INTO t VALUES (42)")
    row = conn.execute("SELECT x FROM t").fetchone()
    conn.close()
    assert isinstance(row, sqlite3.Row)
    assert row["x"] == 42


def test_context_manager_closes(tmp_path):
    db = Database(tmp_path / ".hrviews.db")
    with db as conn:
        conn.execute("SELECT 1")
    assert db._conn is None


def test_read_only_leaves_journal_mode(tmp_path):
    db_path = tmp_path / "plain.db"
    plain = sqlite3.connect(db_path)
    plain.execute("CREATE TABLE t (x INTEGER)")
    plain.commit()
    plain.close()

    conn = Database(db_path).connect(read_only=True)
    mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
    conn.close()
    assert mode == "delete"


def test_read_only_rejects_writes(tmp_path):
    db_path = tmp_path / "plain.db"
    sqlite3.connect(db_path).close()
    conn = Database(db_path).connect(read_only=True)
    try:
        with pytest.raises(sqlite3.OperationalError):
            conn.execute("CREATE TABLE t (x INTEGER)")
    finally:
        conn.close()


def test_read_only_does_not_create_file(tmp_path):
    db_path = tmp_path / "missing.db"
    with pytest.raises(sqlite3.OperationalError):
        Database(db_path).connect(read_only=True)
    assert not db_path.exists()
