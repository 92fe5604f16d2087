"""Rich console rendering of analysis reports."""

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ...domain.models.analysis import describe_payload
from ...domain.models.report import Report


class ConsoleReportFormatter:
    """Formats a report as a Rich table with a summary panel."""

    def __init__(self, max_items: int = 10):
        """
        Args:
            max_items: Payload entries shown per row before eliding
        """
        self.max_items = max_items

    def build(self, report: Report) -> Group:
        """Build the renderable for a report."""
        table = Table(title=f"Analysis Report for: {report.source_name}", show_lines=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Analysis")
        table.add_column("Label", style="cyan")
        table.add_column("Status")
        table.add_column("Duration", justify="right")
        table.add_column("Result", overflow="fold")

        for index, outcome in enumerate(report.results, start=1):
            if outcome.succeeded:
                status = "[green]ok[/green]"
                duration = f"{outcome.duration_micros} µs"
            else:
                status = "[red]failed[/red]"
                duration = "-"
            table.add_row(
                str(index),
                outcome.kind.description,
                outcome.label or "",
                status,
                duration,
                escape(describe_payload(outcome, max_items=self.max_items)),
            )

        failed = len(report.failed)
        border = "red" if failed else "green"
        summary = Panel.fit(
            f"Analyses: {len(report)}\n"
            f"[green]Succeeded: {len(report.succeeded)}[/green]\n"
            f"[red]Failed: {failed}[/red]",
            border_style=border,
        )
        return Group(table, summary)

    def print(self, report: Report, console: Console):
        """Print a report to a console."""
        console.print(self.build(report))
