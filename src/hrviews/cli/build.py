"""hrviews build — load reference data and materialize both views.

Views are appended on every build. A second build over the same database
duplicates every view row, so building into a store that already holds
view rows requires --force.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from hrviews.app import HRApp
from hrviews.cli.common import console, resolve_db, settings
from hrviews.cli.errors import err_build_failed, warn_views_exist
from hrviews.errors import InitializationFailure
from hrviews.materializer import MaterializationReport, WritePolicy
from hrviews.models import VIEW_TYPES, DocType
from hrviews.store import open_sqlite_store


def build_cmd(
    ctx: typer.Context,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Path to the store database (default: store.path)."),
    ] = None,
    policy: Annotated[
        Optional[WritePolicy],
        typer.Option("--policy", help="On view write failure: abort or commit."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Build even if view rows already exist."),
    ] = False,
) -> None:
    """Materialize the employee views from the normalized entities."""
    db_path = resolve_db(ctx, db)
    write_policy = policy or settings(ctx).materialization.on_write_failure

    with open_sqlite_store(db_path) as store:
        existing = sum(store.repository.count(t.value) for t in VIEW_TYPES)
        if existing and not force:
            console.print(warn_views_exist(existing))
            raise typer.Exit(1)

        app = HRApp(store, write_policy)
        try:
            report = asyncio.run(app.initialize())
        except InitializationFailure as exc:
            console.print(err_build_failed(escape(str(exc))))
            raise typer.Exit(1)

    _show_report(report)


def _show_report(report: MaterializationReport) -> None:
    table = Table(title="Materialization", show_header=False, box=None, padding=(0, 1))
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Employees", str(report.employees_total))
    table.add_row("Malformed (skipped)", str(report.employees_invalid))
    table.add_row("City rows", str(report.written(DocType.EMPLOYEE_WITH_CITY_VIEW)))
    table.add_row("Position rows", str(report.written(DocType.EMPLOYEE_WITH_POSITION_VIEW)))
    table.add_row("Missing city", str(len(report.missing_city)))
    table.add_row("Missing position/division", str(len(report.missing_position)))
    failed = report.batch.failed
    if failed:
        table.add_row("Failed writes", f"[red]{len(failed)}[/]")
    console.print(table)
    console.print("[green]✓[/] Views built.")
