"""Report persistence."""

from .report_writer import (
    ReportWriter,
    JSONReportWriter,
    TextReportWriter,
    render_report_text,
)

__all__ = [
    "ReportWriter",
    "JSONReportWriter",
    "TextReportWriter",
    "render_report_text",
]
