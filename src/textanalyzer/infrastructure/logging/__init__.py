"""Logging infrastructure."""

from .logger import TextAnalyzerLogger, ContextFormatter, LOGGER_NAME

__all__ = ["TextAnalyzerLogger", "ContextFormatter", "LOGGER_NAME"]
