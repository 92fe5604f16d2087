"""Report formatters."""

from .console_formatter import ConsoleReportFormatter

__all__ = ["ConsoleReportFormatter"]
