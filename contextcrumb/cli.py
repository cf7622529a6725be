"""CLI entry point for contextcrumb."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from contextcrumb.context import DEFAULT_BUDGET, ContextMode, build_smart_context
from contextcrumb.parallel import DEFAULT_MAX_FILE_SIZE

app = typer.Typer(
    name="contextcrumb",
    help="Print a token-budgeted map of the files most relevant to a feature.",
    no_args_is_help=False,
)


@app.command()
def main(
    root: Annotated[
        Path,
        typer.Argument(
            help="Repository root directory.",
            exists=True,
            file_okay=False,
            resolve_path=True,
        ),
    ] = Path("."),
    feature: Annotated[
        str | None,
        typer.Option("--feature", "-f", help="Feature to focus on (e.g. booking)."),
    ] = None,
    domains: Annotated[
        list[str] | None,
        typer.Option("--domain", "-d", help="Related domain; repeatable."),
    ] = None,
    budget: Annotated[
        int,
        typer.Option("--budget", "-b", min=0, help="Token budget for the output."),
    ] = DEFAULT_BUDGET,
    mode: Annotated[
        ContextMode,
        typer.Option("--mode", "-m", help="How many files and signatures to show."),
    ] = ContextMode.FULL,
    include: Annotated[
        list[str] | None,
        typer.Option(
            "--include", help="Subdirectory to scan; repeatable. Default: all."
        ),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude", help="Directory name to skip; repeatable. Replaces defaults."
        ),
    ] = None,
    show_scores: Annotated[
        bool,
        typer.Option("--show-scores", help="Include PageRank scores in the output."),
    ] = False,
    max_file_size: Annotated[
        int,
        typer.Option(
            "--max-file-size",
            min=1,
            help="Skip files larger than this many bytes (default: 1MB).",
        ),
    ] = DEFAULT_MAX_FILE_SIZE,
    fast: Annotated[
        bool,
        typer.Option("--fast", help="Parse files in parallel worker processes."),
    ] = False,
) -> None:
    """Rank the repository's files and print the map to stdout."""
    output = build_smart_context(
        root,
        domains or [],
        budget=budget,
        feature=feature,
        mode=mode,
        include=include,
        exclude=exclude,
        show_scores=show_scores,
        fast=fast,
        max_file_size=max_file_size,
    )
    if not output:
        typer.echo(
            "No parseable files found, or nothing fits in the budget.", err=True
        )
        raise typer.Exit(1)
    typer.echo(output)
