"""hrviews CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer
from rich.markup import escape

from hrviews.cli.build import build_cmd
from hrviews.cli.common import console
from hrviews.cli.errors import err_config
from hrviews.cli.seed import seed_cmd
from hrviews.cli.status import status_cmd
from hrviews.cli.views import cities_cmd, positions_cmd
from hrviews.config import ConfigError, load_config
from hrviews.log import configure_logging


def _version() -> str:
    try:
        return importlib.metadata.version("hrviews")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hrviews {_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="hrviews",
    help=(
        "hrviews — materialized employee views over a document store.\n\n"
        "  hrviews seed       Load cities, divisions, positions and employees.\n"
        "  hrviews build      Join employees against reference data and write the views.\n"
        "  hrviews cities     Read the employee-with-city view.\n"
        "  hrviews positions  Read the employee-with-position view.\n"
        "  hrviews status     Show document counts and flag duplicated views."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log diagnostics at INFO level."),
    ] = False,
) -> None:
    """hrviews — materialized employee views over a document store."""
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(escape(str(exc))))
        raise typer.Exit(1)
    configure_logging("INFO" if verbose else cfg.logging.level)
    ctx.obj = cfg


app.command("seed")(seed_cmd)
app.command("build")(build_cmd)
app.command("cities")(cities_cmd)
app.command("positions")(positions_cmd)
app.command("status")(status_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed hrviews version."""
    typer.echo(f"hrviews {_version()}")


if __name__ == "__main__":
    app()
