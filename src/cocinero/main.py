"""cocinero CLI entry point

Usage:
    cocinero RECIPES                  # compile into ./cocinero_target
    cocinero RECIPES --target out     # compile into ./out
    cocinero RECIPES -v               # show progress
    cocinero --version
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from cocinero._version import __version__
from cocinero.compiler import build
from cocinero.config import DEFAULT_TARGET, CookConfig
from cocinero.errors import DisclaimerMissing, handle_error
from cocinero.log import setup_logging


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cocinero {__version__}")
        raise typer.Exit()


def _print_warning(warning: DisclaimerMissing) -> None:
    typer.echo(warning.message)


typer_app = typer.Typer(add_completion=False)


@typer_app.command()
def cli(
    recipes: Path = typer.Argument(
        ..., help="Directory holding one sub-directory per recipe."
    ),
    target: Path = typer.Option(
        Path(DEFAULT_TARGET),
        "--target",
        "-t",
        envvar="COCINERO_TARGET",
        help="Output directory. Wiped and rebuilt on every run.",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show progress."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Compile provisioning recipes into a shell deployment script.

    Writes TARGET/cook.sh plus one TARGET/<recipe>/_cook.sh per recipe that
    has steps, along with the files those scripts install.
    """
    setup_logging(verbose)

    config = CookConfig(default_target=str(target))

    try:
        result = build(recipes, config=config, on_warning=_print_warning)
    except Exception as exc:
        handle_error(exc)

    typer.echo(f"Cooked {len(result.recipes)} recipe(s) into {result.script}")


def app() -> None:
    """Entry point for the installed `cocinero` script."""
    typer_app()


if __name__ == "__main__":
    app()
