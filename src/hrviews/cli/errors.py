"""hrviews CLI error messages — what went wrong and what to do next.

Usage:
    from hrviews.cli.errors import err_no_db
    console.print(err_no_db(".hrviews.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_no_db(db_path: str = ".hrviews.db") -> str:
    """No store database at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{db_path}'.\n"
        "  Run:  hrviews seed --db <path>"
    )


def err_config(message: str) -> str:
    """hrviews.yaml or environment holds an invalid value."""
    return (
        f"[red]Error:[/] Invalid configuration: {message}\n"
        "  Fix hrviews.yaml (or the HRVIEWS_* environment variable) and retry."
    )


def err_seed_file(message: str) -> str:
    """Seed file could not be read or has the wrong shape."""
    return (
        f"[red]Error:[/] {message}\n"
        "  Expected top-level lists: cities, divisions, positions, employees."
    )


def err_build_failed(message: str) -> str:
    """Reference load or view materialization failed."""
    return (
        f"[red]Error:[/] {message}\n"
        "  View rows written before the failure remain in the store.\n"
        "  Inspect with:  hrviews status"
    )


def err_read_failed(message: str) -> str:
    """A view query failed."""
    return f"[red]Error:[/] {message}"


def warn_views_exist(view_rows: int) -> str:
    """Views were already built; building again appends duplicates."""
    return (
        f"[yellow]⚠[/] The store already holds {view_rows} view rows.\n"
        "  Building again appends a second copy of every row (views are never upserted).\n"
        "  Re-run with --force to build anyway, or start from a fresh database."
    )


def warn_duplicate_views(view_type: str, rows: int, employees: int) -> str:
    """More view rows than employees: views were built more than once."""
    return (
        f"[yellow]⚠[/] {view_type} has {rows} rows for {employees} employees.\n"
        "  Views were likely built more than once.\n"
        "  Rebuild into a fresh database to drop the duplicates."
    )
