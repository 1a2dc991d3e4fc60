"""hrviews status — document counts per type in the store."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from hrviews.cli.common import console, resolve_db, settings
from hrviews.cli.errors import err_read_failed, warn_duplicate_views
from hrviews.db.connection import Database
from hrviews.db.repository import DocumentRepository
from hrviews.db.schema import schema_version
from hrviews.models import NORMALIZED_TYPES, VIEW_TYPES, DocType


def status_cmd(
    ctx: typer.Context,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Path to the store database (default: store.path)."),
    ] = None,
) -> None:
    """Show document counts and flag duplicated view rows."""
    db_path = resolve_db(ctx, db, must_exist=False)
    if not db_path.exists():
        console.print(
            Panel(
                "[yellow]No database found.[/]\n"
                "  Run:  hrviews seed",
                title="[bold]Store[/]",
                expand=False,
            )
        )
        return

    try:
        counts, version = _read_counts(db_path)
    except sqlite3.DatabaseError as exc:
        console.print(err_read_failed(escape(f"Cannot read '{db_path}': {exc}")))
        raise typer.Exit(1)

    cfg = settings(ctx)
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Type", style="bold")
    table.add_column("Documents", justify="right")
    for doc_type in (*NORMALIZED_TYPES, *VIEW_TYPES):
        table.add_row(doc_type.value, f"{counts.get(doc_type.value, 0):,}")

    console.print(
        Panel(
            table,
            title=f"[bold]Store[/] [dim]{escape(str(db_path))} (schema v{version}, "
            f"on write failure: {cfg.materialization.on_write_failure.value})[/]",
            expand=False,
        )
    )

    employees = counts.get(DocType.EMPLOYEE.value, 0)
    for view_type in VIEW_TYPES:
        rows = counts.get(view_type.value, 0)
        if rows > employees:
            console.print(warn_duplicate_views(view_type.value, rows, employees))


def _read_counts(db_path: Path) -> tuple[dict[str, int], int]:
    """Count documents per type without migrating or otherwise writing to *db_path*."""
    conn = Database(db_path).connect(read_only=True)
    try:
        version = schema_version(conn)
        if version == 0:
            return {}, 0
        return DocumentRepository(conn).count_by_type(), version
    finally:
        conn.close()
