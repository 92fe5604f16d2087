"""Command line entry point."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from .commands import (
    CommandError,
    analyze_command,
    config_command,
    info_command,
    sample_command,
    show_command,
)
from ...domain.exceptions import SchedulingInterrupted


app = typer.Typer(
    name="textanalyzer",
    help="Run concurrent text analyses over a document and report the results.",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    console = "console"
    json = "json"
    text = "text"


@app.command()
def analyze(
    path: Path = typer.Argument(..., help="Document to analyze"),
    pattern: Optional[List[str]] = typer.Option(
        None, "--pattern", "-p", help="NAME=REGEX pattern to extract (repeatable)"
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Worker threads"),
    grace_period: Optional[float] = typer.Option(
        None, "--grace-period", min=0.0, help="Seconds to wait for running analyses at shutdown"
    ),
    output_format: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help="Output format"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save the report to this file"),
    sentences: bool = typer.Option(False, "--sentences", help="Also count sentences"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Analyze a document."""
    try:
        analyze_command(
            path=path,
            patterns=pattern,
            workers=workers,
            grace_period=grace_period,
            output_format=output_format.value if output_format else None,
            output_file=output,
            sentences=sentences,
            config_path=config,
            verbose=verbose,
            console=console,
        )
    except CommandError:
        raise typer.Exit(code=1)
    except SchedulingInterrupted:
        raise typer.Exit(code=130)


@app.command()
def show(
    report_file: Path = typer.Argument(..., help="JSON report to display"),
    plain: bool = typer.Option(False, "--plain", help="Plain text instead of a table"),
):
    """Display a saved JSON report."""
    try:
        show_command(report_file, plain, console)
    except CommandError:
        raise typer.Exit(code=1)


@app.command()
def sample(
    path: Path = typer.Argument(Path("sample.txt"), help="Where to write the sample document"),
):
    """Write a sample document to analyze."""
    try:
        sample_command(path, console)
    except CommandError:
        raise typer.Exit(code=1)


@app.command()
def info(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Show engine and analysis settings."""
    try:
        info_command(config, console)
    except CommandError:
        raise typer.Exit(code=1)


@app.command(name="config")
def config_cmd(
    init: bool = typer.Option(False, "--init", help="Create a default configuration file"),
    path: Optional[str] = typer.Option(None, "--path", help="Configuration file path"),
    show_config: bool = typer.Option(False, "--show", help="Show the effective configuration"),
):
    """Inspect or create configuration."""
    try:
        config_command(init, path, show_config, console)
    except CommandError:
        raise typer.Exit(code=1)


def main():
    app()


if __name__ == "__main__":
    main()
