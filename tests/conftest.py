"""Shared pytest fixtures."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from hrviews.db.connection import Database
from hrviews.db.schema import initialize
from hrviews.store import Entry, MemoryDocumentStore, QueryResult


class FaultyStore(MemoryDocumentStore):
    """MemoryDocumentStore whose queries or posts fail for chosen types."""

    def __init__(self, fail_query: set[str], fail_post: set[str]) -> None:
        super().__init__()
        self.fail_query = fail_query
        self.fail_post = fail_post
        self.post_attempts: list[str] = []

    async def query(self, doc_type: str, where: dict[str, Any]) -> QueryResult:
        if doc_type in self.fail_query:
            raise ConnectionError(f"query {doc_type} refused")
        return await super().query(doc_type, where)

    async def post(self, entry: Entry) -> None:
        doc_type = entry.record.data["type"]
        self.post_attempts.append(doc_type)
        if doc_type in self.fail_post:
            raise ConnectionError(f"post {doc_type} refused")
        await super().post(entry)


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".hrviews.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def faulty_store() -> Callable[..., FaultyStore]:
    """Factory: faulty_store(fail_query={...}, fail_post={...})."""

    def _make(fail_query: set[str] | None = None, fail_post: set[str] | None = None) -> FaultyStore:
        return FaultyStore(fail_query or set(), fail_post or set())

    return _make
