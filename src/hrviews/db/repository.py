"""Repository for the append-only ``documents`` table.

Documents are stored as JSON text alongside their ``type`` tag. Filters are
top-level field equality, evaluated with ``json_extract``.
"""

from __future__ import annotations

import json
import re
import sqlite3
from typing import Any

# json_extract paths are built from filter keys; only plain identifiers allowed.
_KEY_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DocumentRepository:
    """Data access layer for stored documents.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see hrviews.db.schema.initialize).
        """
        self._conn = conn

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def append(self, doc_type: str, data: Any) -> int:
        """Insert a document and return its rowid. Never updates in place."""
        cur = self._conn.execute(
            "INSERT INTO documents (type, data) VALUES (?, ?)",
            (doc_type, json.dumps(data, ensure_ascii=False)),
        )
        self._conn.commit()
        return cur.lastrowid

    def find(self, doc_type: str, where: dict[str, Any] | None = None) -> list[Any]:
        """Return decoded documents of *doc_type* in insertion order.

        Args:
            doc_type: The ``type`` tag to select.
            where: Optional top-level field equality filter.

        Raises:
            ValueError: If a filter key is not a plain identifier.
        """
        sql = "SELECT data FROM documents WHERE type = ?"
        params: list[Any] = [doc_type]
        for key, value in (where or {}).items():
            if not _KEY_RE.match(key):
                raise ValueError(f"Invalid filter key: {key!r}")
            sql += " AND json_extract(data, ?) = ?"
            params.extend([f"$.{key}", value])
        sql += " ORDER BY rowid"
        rows = self._conn.execute(sql, params).fetchall()
        return [json.loads(r["data"]) for r in rows]

    def count_by_type(self) -> dict[str, int]:
        """Return ``{type: count}`` for every type present."""
        rows = self._conn.execute(
            "SELECT type, COUNT(*) AS n FROM documents GROUP BY type ORDER BY type"
        ).fetchall()
        return {r["type"]: r["n"] for r in rows}

    def count(self, doc_type: str) -> int:
        """Return the number of stored documents with *doc_type*."""
        return self._conn.execute(
            "SELECT COUNT(*) FROM documents WHERE type = ?", (doc_type,)
        ).fetchone()[0]
