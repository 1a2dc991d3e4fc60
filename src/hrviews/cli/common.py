"""Helpers shared by hrviews CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from hrviews.cli.errors import err_no_db
from hrviews.config import HRViewsConfig

console = Console()


def settings(ctx: typer.Context) -> HRViewsConfig:
    """Return the config loaded by the root callback."""
    cfg = ctx.obj
    if not isinstance(cfg, HRViewsConfig):
        cfg = HRViewsConfig()
    return cfg


def resolve_db(ctx: typer.Context, db: Path | None, *, must_exist: bool = True) -> Path:
    """Pick the --db flag over configured store.path; exit 1 if missing."""
    path = db if db is not None else Path(settings(ctx).store.path)
    if must_exist and not path.exists():
        console.print(err_no_db(escape(str(path))))
        raise typer.Exit(1)
    return path
