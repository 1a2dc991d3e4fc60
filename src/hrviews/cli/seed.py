"""hrviews seed — load normalized entities into the store.

Usage:
  hrviews seed                      (bundled sample data)
  hrviews seed --file staff.yaml
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from rich.markup import escape

from hrviews.cli.common import console, resolve_db
from hrviews.cli.errors import err_seed_file
from hrviews.seed import SAMPLE_DATA, SeedError, load_seed_file, seed_store
from hrviews.store import open_sqlite_store


def seed_cmd(
    ctx: typer.Context,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="YAML file with cities/divisions/positions/employees."),
    ] = None,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Path to the store database (default: store.path)."),
    ] = None,
) -> None:
    """Append normalized entities to the store (sample data by default)."""
    db_path = resolve_db(ctx, db, must_exist=False)

    if file is None:
        data = SAMPLE_DATA
        label = "sample data"
    else:
        if not file.exists():
            console.print(err_seed_file(escape(f"Seed file not found: '{file}'")))
            raise typer.Exit(1)
        try:
            data = load_seed_file(file)
        except (SeedError, yaml.YAMLError) as exc:
            console.print(err_seed_file(escape(str(exc))))
            raise typer.Exit(1)
        label = str(file)

    with open_sqlite_store(db_path) as store:
        posted = asyncio.run(seed_store(store, data))

    console.print(
        f"[green]✓[/] Seeded {posted} documents from {escape(label)} into {escape(str(db_path))}"
    )
