"""Document store contract and the two bundled implementations.

The core depends only on ``DocumentStore``: an async ``query`` by type and
filter, and an async append-only ``post``. Neither call offers ordering or
atomicity guarantees relative to other calls.
"""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable

from hrviews.db.connection import Database
from hrviews.db.repository import DocumentRepository
from hrviews.db.schema import initialize


@dataclass
class Record:
    data: Any


@dataclass
class Entry:
    record: Record

    @classmethod
    def of(cls, data: dict[str, Any]) -> Entry:
        return cls(record=Record(data=data))


@dataclass
class QueryResult:
    items: list[Record] = field(default_factory=list)


@runtime_checkable
class DocumentStore(Protocol):
    async def query(self, doc_type: str, where: dict[str, Any]) -> QueryResult:
        """Return every document of *doc_type* matching *where*."""
        ...

    async def post(self, entry: Entry) -> None:
        """Append *entry* to the store."""
        ...


def _doc_type_of(entry: Entry) -> str:
    data = entry.record.data
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise ValueError("document data must be an object with a string 'type'")
    return data["type"]


def _matches(data: Any, where: dict[str, Any]) -> bool:
    if not where:
        return True
    if not isinstance(data, dict):
        return False
    return all(data.get(k) == v for k, v in where.items())


class MemoryDocumentStore:
    """In-process, list-backed store. Documents are copied on write and read."""

    def __init__(self) -> None:
        self._documents: list[tuple[str, Any]] = []

    async def query(self, doc_type: str, where: dict[str, Any]) -> QueryResult:
        return QueryResult(
            items=[
                Record(data=copy.deepcopy(data))
                for t, data in self._documents
                if t == doc_type and _matches(data, where)
            ]
        )

    async def post(self, entry: Entry) -> None:
        doc_type = _doc_type_of(entry)
        self._documents.append((doc_type, copy.deepcopy(entry.record.data)))

    def add_raw(self, doc_type: str, data: Any) -> None:
        """Insert *data* under *doc_type* without any shape checks."""
        self._documents.append((doc_type, copy.deepcopy(data)))

    def count(self, doc_type: str) -> int:
        return sum(1 for t, _ in self._documents if t == doc_type)


class SqliteDocumentStore:
    """Async adapter over a ``DocumentRepository``.

    SQLite calls are local and short, so they run inline on the event loop;
    the connection stays on the thread that opened it.
    """

    def __init__(self, repo: DocumentRepository) -> None:
        self._repo = repo

    @property
    def repository(self) -> DocumentRepository:
        return self._repo

    async def query(self, doc_type: str, where: dict[str, Any]) -> QueryResult:
        return QueryResult(
            items=[Record(data=data) for data in self._repo.find(doc_type, where)]
        )

    async def post(self, entry: Entry) -> None:
        self._repo.append(_doc_type_of(entry), entry.record.data)


@contextmanager
def open_sqlite_store(db_path: Path | str) -> Iterator[SqliteDocumentStore]:
    """Open (creating if needed) a SQLite-backed store; closes on exit."""
    conn = Database(db_path).connect()
    try:
        initialize(conn)
        yield SqliteDocumentStore(DocumentRepository(conn))
    finally:
        conn.close()
