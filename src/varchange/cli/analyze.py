"""Analyze CLI command -- run the variability change analysis on a git repository."""

import threading
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..classification import ArtifactCategory
from ..commits import CommitQueue, GitExtractor, feed_queue
from ..core import RunOutcome, VariabilityChangeAnalyzer
from ..exceptions import VarChangeError
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config

_TOTALS_ROWS = (
    ("CML", ArtifactCategory.MODEL),
    ("CCL", ArtifactCategory.SOURCE),
    ("CBL", ArtifactCategory.BUILD),
)


@app.command()
def analyze(
    repo: Path = typer.Argument(
        Path("."),
        help="Path to the git repository to analyze",
        file_okay=False,
        dir_okay=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file",
        dir_okay=False,
    ),
    model_regex: Optional[str] = typer.Option(
        None, "--model-regex", help="Regex matching variability model files (e.g. Kconfig)"
    ),
    source_regex: Optional[str] = typer.Option(
        None, "--source-regex", help="Regex matching source code files"
    ),
    build_regex: Optional[str] = typer.Option(
        None, "--build-regex", help="Regex matching build files (e.g. Makefile, Kbuild)"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Result directory (deleted and re-created)",
        file_okay=False,
    ),
    target_spl: Optional[str] = typer.Option(
        None, "--target-spl", help="Visualize results for this SPL (linux, coreboot)"
    ),
    script: Optional[Path] = typer.Option(
        None, "--script", help="Main R visualization script", dir_okay=False
    ),
    max_commits: Optional[int] = typer.Option(
        None, "--max-commits", "-n", help="Analyze at most this many commits (0 = all)", min=0
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Threads scanning the files of a commit", min=1
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also log to this file"),
):
    """
    Count variability and artifact line changes for every commit of a repository.

    Writes [bold]VariabilityChangeAnalyzer_Results.tsv[/bold],
    [bold]VariabilityChangeAnalyzer_Summary.tsv[/bold] and, if needed,
    [bold]VariabilityChangeAnalyzer_Unanalyzed.txt[/bold] to the result directory.

    [bold cyan]Examples:[/bold cyan]

      varchange analyze linux --model-regex '.*/Kconfig.*' --source-regex '.*/.*\\.[hcS]' --build-regex '.*/(Makefile|Kbuild).*'

      varchange analyze coreboot -c coreboot.toml --target-spl coreboot --script ComVi.R
    """
    try:
        settings = resolve_config(
            config,
            model_files_regex=model_regex,
            source_files_regex=source_regex,
            build_files_regex=build_regex,
            output_dir=str(output) if output is not None else None,
            target_spl=target_spl,
            visualization_script=str(script) if script is not None else None,
            git_max_commits=max_commits,
            workers=workers,
            verbose=verbose,
            quiet=quiet,
        )
    except VarChangeError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(
        verbose=settings.verbosity == "verbose",
        quiet=settings.verbosity == "quiet",
        log_file=str(log_file) if log_file else None,
    )

    extractor = GitExtractor(str(repo), settings.git_max_commits)
    commit_queue = CommitQueue(settings.queue_size)
    try:
        extractor.ensure_repository()
        analyzer = VariabilityChangeAnalyzer(settings, commit_queue)
    except VarChangeError as e:
        console.print(f"[red]Setup failed:[/red] {e}")
        raise typer.Exit(1)

    extraction_errors: list[Exception] = []

    def produce() -> None:
        try:
            feed_queue(extractor.iter_commits(), commit_queue)
        except Exception as e:
            extraction_errors.append(e)

    producer = threading.Thread(target=produce, name="varchange-extractor", daemon=True)
    producer.start()

    if settings.verbosity == "quiet":
        outcome = analyzer.analyze()
    else:
        with console.status("[bold]Analyzing commits..."):
            outcome = analyzer.analyze()
    producer.join()

    if extraction_errors:
        console.print(f"[red]Commit extraction failed:[/red] {extraction_errors[0]}")
        raise typer.Exit(1)

    if settings.verbosity != "quiet":
        _print_outcome(outcome)

    if not outcome.succeeded:
        console.print("[red]Visualizing results failed[/red]")
        raise typer.Exit(1)


def _print_outcome(outcome: RunOutcome) -> None:
    """Summary table of the finished run."""
    summary = outcome.summary
    table = Table(title="Variability change summary", show_lines=False)
    table.add_column("Element", style="bold cyan")
    table.add_column("Commits", justify="right")
    table.add_column("Lines", justify="right")
    table.add_column("Variability lines", justify="right")

    table.add_row("CAv", str(summary.commits_available), "", "")
    table.add_row("CAn", str(summary.commits_analyzed), "", "")
    table.add_row(
        "CCAI", str(summary.artifact_only_commits), str(summary.artifact_only_lines), ""
    )
    table.add_row(
        "CCVI", str(summary.variability_only_commits), "", str(summary.variability_only_lines)
    )
    table.add_row(
        "CCAVI",
        str(summary.both_commits),
        str(summary.both_artifact_lines),
        str(summary.both_variability_lines),
    )
    for key, category in _TOTALS_ROWS:
        totals = summary.totals[category]
        table.add_row(key, "", str(totals.lines), str(totals.variability_lines))

    console.print()
    console.print(table)
    console.print(f"[dim]Results written to {outcome.result_file.parent}[/dim]")
    if summary.commits_unanalyzed:
        console.print(
            f"[yellow]{summary.commits_unanalyzed} commit(s) not analyzed[/yellow] "
            f"[dim](see {outcome.unanalyzed_file.name})[/dim]"
        )

