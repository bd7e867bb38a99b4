"""CLI entry point -- registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="varchange",
    help="varchange - Variability change analysis for KBuild-style product lines",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"varchange {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show the version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Classify commit diffs into variability and artifact changes."""


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .classify import classify as _classify  # noqa: F401, E402
