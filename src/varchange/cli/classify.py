"""Classify CLI command -- show which artifact category paths fall into."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from ..classification import ArtifactCategory, ClassificationRules
from ..exceptions import VarChangeError
from . import app
from ._common import console, resolve_config

_CATEGORY_STYLES = {
    ArtifactCategory.MODEL: "magenta",
    ArtifactCategory.SOURCE: "green",
    ArtifactCategory.BUILD: "yellow",
    ArtifactCategory.OTHER: "dim",
}


@app.command()
def classify(
    paths: List[str] = typer.Argument(..., help="Repository-relative file paths"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="TOML configuration file", dir_okay=False
    ),
    model_regex: Optional[str] = typer.Option(None, "--model-regex"),
    source_regex: Optional[str] = typer.Option(None, "--source-regex"),
    build_regex: Optional[str] = typer.Option(None, "--build-regex"),
    plain: bool = typer.Option(False, "--plain", help="Print 'path<TAB>category' lines"),
):
    """
    Show the artifact category of each path under the configured patterns.

    [bold cyan]Examples:[/bold cyan]

      varchange classify -c linux.toml drivers/net/Kconfig Documentation/foo.c
    """
    try:
        settings = resolve_config(
            config,
            model_files_regex=model_regex,
            source_files_regex=source_regex,
            build_files_regex=build_regex,
        )
        rules = ClassificationRules.from_config(settings)
    except VarChangeError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    if plain:
        for path in paths:
            print(f"{path}\t{rules.classify(path).name}")
        return

    table = Table(show_header=True)
    table.add_column("Path")
    table.add_column("Category")
    for path in paths:
        category = rules.classify(path)
        style = _CATEGORY_STYLES[category]
        table.add_row(path, f"[{style}]{category.name}[/{style}]")
    console.print(table)
