"""CLI command implementations."""

from pathlib import Path
from typing import Dict, List, Optional
from datetime import datetime
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ... import __version__
from ...domain.exceptions import (
    ConfigurationError,
    ReportPersistenceError,
    SchedulingInterrupted,
)
from ...domain.models.report import Report
from ...infrastructure.di.container import DIContainer
from ...infrastructure.config.config_loader import ConfigLoader
from ...infrastructure.parallel import default_pool_width
from ...infrastructure.reporting import JSONReportWriter, render_report_text
from ...application.commands.analyze_document import AnalyzeDocumentCommand
from ..formatters.console_formatter import ConsoleReportFormatter


SAMPLE_TEXT = (
    "Hello World! This is a sample text file for the Text Analysis Tool.\n"
    "It contains some emails like test@example.com and admin@site.org.\n"
    "It also has some URLs like https://www.google.com and http://python.org in it.\n"
    "Python is great. Python is powerful. Multithreading in Python is fun.\n"
)


class CommandError(Exception):
    """A command failed in a way that was already reported to the user."""


def parse_pattern_options(values: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse ``NAME=REGEX`` pattern options.

    Args:
        values: Raw option values

    Returns:
        Pattern name to regex, in the order given

    Raises:
        ValueError: If a value has no name or no '='
    """
    patterns: Dict[str, str] = {}
    for value in values or []:
        name, sep, regex = value.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Pattern must look like NAME=REGEX: {value!r}")
        patterns[name] = regex
    return patterns


def read_document(path: Path) -> str:
    """Read a whole UTF-8 document into memory."""
    return path.read_text(encoding="utf-8")


def analyze_command(
    path: Path,
    patterns: Optional[List[str]],
    workers: Optional[int],
    grace_period: Optional[float],
    output_format: Optional[str],
    output_file: Optional[Path],
    sentences: bool,
    config_path: Optional[str],
    verbose: bool,
    console: Console,
) -> Report:
    """
    Execute analyze command.

    Args:
        path: Document to analyze
        patterns: Extra NAME=REGEX patterns (replace the configured ones)
        workers: Worker thread override
        grace_period: Shutdown grace period override
        output_format: console, json or text
        output_file: Where to save the report
        sentences: Also count sentences
        config_path: Config file path
        verbose: Enable verbose output
        console: Rich console

    Returns:
        The generated report
    """
    console.print(Panel.fit(
        "[bold]Text Analyzer[/bold]",
        border_style="blue"
    ))

    if not path.exists() or not path.is_file():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise CommandError(f"File not found: {path}")

    try:
        config = ConfigLoader.load(config_path)
        if workers is not None:
            config.parallel.max_workers = workers
        if grace_period is not None:
            config.parallel.grace_period_seconds = grace_period
        if verbose:
            config.logging.level = "INFO"
            config.output.verbose = True
        pattern_map = parse_pattern_options(patterns) if patterns else dict(config.analysis.patterns)
    except (ConfigurationError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise CommandError(str(e)) from e

    if output_format is None:
        output_format = config.output.default_format

    try:
        text = read_document(path)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error reading file:[/red] {escape(str(e))}")
        raise CommandError(str(e)) from e

    container = DIContainer.create(config=config)
    console.print(f"[cyan]Starting analysis for: {path}[/cyan]")
    if verbose:
        console.print(f"[cyan]Workers: {container.engine.max_workers}, "
                      f"patterns: {', '.join(pattern_map) or 'none'}[/cyan]")

    command = AnalyzeDocumentCommand(
        source_name=path.name,
        text=text,
        patterns=pattern_map,
        top_words=config.analysis.top_words,
        include_sentence_count=sentences or config.analysis.include_sentence_count,
    )

    try:
        with console.status("[cyan]Running analyses...[/cyan]"):
            report = container.analyze_handler.handle(command)
    except SchedulingInterrupted:
        console.print("\n[yellow]Analysis cancelled by user[/yellow]")
        container.engine.shutdown(grace_period=0)
        raise
    finally:
        if not container.close():
            console.print("[yellow]Some analyses were still running at shutdown and were cancelled[/yellow]")

    _emit_report(report, output_format, output_file, container, console)
    return report


def _emit_report(
    report: Report,
    output_format: str,
    output_file: Optional[Path],
    container: DIContainer,
    console: Console,
):
    """Print and/or save a report according to the output settings."""
    if output_format == "json":
        writer = container.json_writer
    elif output_format == "text":
        writer = container.text_writer
    else:
        writer = None

    if output_file:
        if writer is None:
            writer = container.json_writer
        _save(writer, report, output_file, console)
    elif writer is not None:
        console.print(writer.render(report), markup=False, highlight=False, soft_wrap=True)
    else:
        console.print("")
        ConsoleReportFormatter().print(report, console)

    if container.config.output.save_to_file and not output_file:
        output_dir = Path(container.config.output.output_directory)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        auto_file = output_dir / f"textanalyzer_{Path(report.source_name).stem}_{timestamp}.json"
        _save(container.json_writer, report, auto_file, console)


def _save(writer, report: Report, output_file: Path, console: Console):
    try:
        writer.write(report, output_file)
    except ReportPersistenceError as e:
        console.print(f"[red]Error saving report:[/red] {escape(str(e))}")
        raise CommandError(str(e)) from e
    console.print(f"\n[green]Report saved to {output_file}[/green]")


def show_command(report_file: Path, plain: bool, console: Console) -> Report:
    """
    Execute show command: load a saved JSON report and print it.

    Args:
        report_file: Report written with --format json / --output
        plain: Print the plain text rendering instead of a table
        console: Rich console
    """
    try:
        report = JSONReportWriter().read(report_file)
    except ReportPersistenceError as e:
        console.print(f"[red]Error loading report:[/red] {escape(str(e))}")
        raise CommandError(str(e)) from e

    if plain:
        console.print(render_report_text(report), markup=False, highlight=False, soft_wrap=True)
    else:
        ConsoleReportFormatter().print(report, console)
    console.print(f"\n[green]Loaded report source: {escape(report.source_name)}[/green]")
    return report


def sample_command(path: Path, console: Console) -> Path:
    """
    Write a small sample document.

    Args:
        path: Destination file (must not exist)
        console: Rich console
    """
    if path.exists():
        console.print(f"[red]Error:[/red] {path} already exists")
        raise CommandError(f"{path} already exists")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    console.print(f"[green]Sample file created: {path}[/green]")
    return path


def _load_or_fail(config_path: Optional[str], console: Console):
    try:
        return ConfigLoader.load(config_path)
    except ConfigurationError as e:
        console.print(f"\n[red]Error:[/red] {escape(str(e))}")
        raise CommandError(str(e)) from e


def _config_sources_table() -> Table:
    """Default locations, whether each exists, and active env overrides."""
    sources = ConfigLoader.get_config_info()
    existing = set(sources["existing_configs"])

    table = Table(title="Configuration sources", show_header=True)
    table.add_column("Source")
    table.add_column("Value", overflow="fold")
    for location in sources["default_paths"]:
        found = "[green]found[/green]" if location in existing else "[dim]missing[/dim]"
        table.add_row("file", f"{escape(location)} ({found})")
    for override in sources["env_overrides"]:
        table.add_row("env", escape(override))
    if not sources["env_overrides"]:
        table.add_row("env", "[dim]no TEXTANALYZER_* overrides[/dim]")
    return table


def info_command(config_path: Optional[str], console: Console):
    """
    Execute info command: print the effective engine and analysis settings.

    Args:
        config_path: Config file path
        console: Rich console
    """
    console.print(Panel.fit(
        f"[bold]Text Analyzer[/bold] {__version__}",
        border_style="blue"
    ))
    config = _load_or_fail(config_path, console)

    workers = config.parallel.max_workers or default_pool_width()
    source = "configured" if config.parallel.max_workers else "CPU count"
    console.print("\n[bold]Execution engine[/bold]")
    console.print(f"  Workers: {workers} ({source})")
    console.print(f"  Shutdown grace period: {config.parallel.grace_period_seconds}s")

    console.print("\n[bold]Analyses[/bold]")
    console.print(f"  Word count: top {config.analysis.top_words} words")
    for name, regex in config.analysis.patterns.items():
        console.print(f"  Pattern '{escape(name)}': {escape(regex)}")
    state = "enabled" if config.analysis.include_sentence_count else "disabled"
    console.print(f"  Sentence count: {state}")

    console.print("")
    console.print(_config_sources_table())


def config_command(
    init: bool,
    path: Optional[str],
    show: bool,
    console: Console,
):
    """
    Execute config command.

    With ``init`` a default file is written, with ``show`` the effective
    configuration is dumped as YAML, otherwise the config sources are listed.

    Args:
        init: Write a default configuration file
        path: Config file path
        show: Print the effective configuration
        console: Rich console
    """
    if init:
        try:
            written = ConfigLoader.create_default_config(path)
        except ConfigurationError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise CommandError(str(e)) from e
        console.print(f"[green]Wrote default configuration to {written}[/green]")
        return

    if show:
        config = _load_or_fail(path, console)
        console.print(config.to_yaml(), markup=False, highlight=False, soft_wrap=True)
        return

    console.print(_config_sources_table())
