"""Report writers for persisting analysis reports."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict
import json
import threading

from ...domain.exceptions import ReportPersistenceError
from ...domain.models.analysis import describe_payload
from ...domain.models.report import Report
from ..logging import TextAnalyzerLogger


REPORT_FORMAT_VERSION = 1


def render_report_text(report: Report) -> str:
    """
    Render a report as plain text.

    One line per outcome, framed by a header naming the source document.
    """
    lines = [f"=== Analysis Report for: {report.source_name} ==="]
    for index, outcome in enumerate(report.results, start=1):
        label = f" ({outcome.label})" if outcome.label else ""
        if outcome.succeeded:
            lines.append(
                f"{index}. {outcome.kind.description}{label} "
                f"[ok, {outcome.duration_micros}us] {describe_payload(outcome, max_items=20)}"
            )
        else:
            lines.append(
                f"{index}. {outcome.kind.description}{label} "
                f"[failed] {outcome.failure_reason}"
            )
    lines.append("=" * 35)
    return "\n".join(lines)


class ReportWriter(ABC):
    """Base class for report writers."""

    extension = ""

    def __init__(self):
        self.logger = TextAnalyzerLogger.get_instance()
        self._lock = threading.Lock()

    @abstractmethod
    def render(self, report: Report) -> str:
        """Render the report to the writer's format."""
        pass

    def write(self, report: Report, output_file: Path) -> Path:
        """
        Write a report to disk.

        Args:
            report: Report to write
            output_file: Destination path (parent directories are created)

        Returns:
            The path written

        Raises:
            ReportPersistenceError: If the file cannot be written
        """
        content = self.render(report)
        with self._lock:
            try:
                output_file.parent.mkdir(parents=True, exist_ok=True)
                with open(output_file, 'w', encoding='utf-8') as f:
                    f.write(content)
            except OSError as e:
                self.logger.error(f"Failed to write report: {e}")
                raise ReportPersistenceError(f"Could not write report to {output_file}: {e}") from e

        self.logger.info(
            f"Report saved: {output_file}",
            extra={"source_document": report.source_name, "results": len(report)}
        )
        return output_file


class JSONReportWriter(ReportWriter):
    """
    Writes reports as JSON and reads them back.

    Failure outcomes keep their reason and exception type; the live
    exception object is not persisted.
    """

    extension = ".json"

    def render(self, report: Report) -> str:
        data: Dict[str, Any] = {
            "format_version": REPORT_FORMAT_VERSION,
            **report.to_dict(),
        }
        return json.dumps(data, indent=2, ensure_ascii=False, default=str)

    def read(self, input_file: Path) -> Report:
        """
        Load a report written by ``write``.

        Args:
            input_file: Path to a JSON report

        Returns:
            The reconstructed report

        Raises:
            ReportPersistenceError: If the file is missing or malformed
        """
        try:
            with open(input_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ReportPersistenceError(f"Could not read report {input_file}: {e}") from e

        version = data.get("format_version") if isinstance(data, dict) else None
        if version != REPORT_FORMAT_VERSION:
            raise ReportPersistenceError(
                f"Unsupported report format in {input_file}: {version!r}"
            )

        try:
            return Report.from_dict(data)
        except (KeyError, ValueError, TypeError) as e:
            raise ReportPersistenceError(f"Malformed report {input_file}: {e}") from e


class TextReportWriter(ReportWriter):
    """Writes reports as plain text."""

    extension = ".txt"

    def render(self, report: Report) -> str:
        return render_report_text(report) + "\n"
