"""hrviews SQLite document storage layer."""

from hrviews.db.connection import Database
from hrviews.db.migrations import MIGRATIONS, run_migrations
from hrviews.db.repository import DocumentRepository
from hrviews.db.schema import initialize

__all__ = [
    "Database",
    "DocumentRepository",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
]
