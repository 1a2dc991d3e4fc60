"""hrviews cities / positions — print the materialized views."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from hrviews.cli.common import console, resolve_db
from hrviews.cli.errors import err_read_failed
from hrviews.errors import ViewReadFailure
from hrviews.reader import ViewReader
from hrviews.store import open_sqlite_store

_DbOption = Annotated[
    Optional[Path],
    typer.Option("--db", help="Path to the store database (default: store.path)."),
]
_JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print rows as a JSON array."),
]


def cities_cmd(ctx: typer.Context, db: _DbOption = None, as_json: _JsonOption = False) -> None:
    """List employees with their city."""
    db_path = resolve_db(ctx, db)
    with open_sqlite_store(db_path) as store:
        try:
            rows = asyncio.run(ViewReader(store).employees_with_city())
        except ViewReadFailure as exc:
            console.print(err_read_failed(escape(str(exc))))
            raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in rows], ensure_ascii=False))
        return

    table = Table(title=f"Employees with city ({len(rows)})")
    table.add_column("First name")
    table.add_column("City")
    for row in rows:
        table.add_row(escape(row.first_name), escape(row.city))
    console.print(table)


def positions_cmd(ctx: typer.Context, db: _DbOption = None, as_json: _JsonOption = False) -> None:
    """List employees with their position and division."""
    db_path = resolve_db(ctx, db)
    with open_sqlite_store(db_path) as store:
        try:
            rows = asyncio.run(ViewReader(store).employees_with_position())
        except ViewReadFailure as exc:
            console.print(err_read_failed(escape(str(exc))))
            raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in rows], ensure_ascii=False))
        return

    table = Table(title=f"Employees with position ({len(rows)})")
    table.add_column("First name")
    table.add_column("Position")
    table.add_column("Division")
    for row in rows:
        table.add_row(escape(row.first_name), escape(row.position), escape(row.division))
    console.print(table)
