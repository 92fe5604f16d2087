"""Exception hierarchy for textanalyzer."""

from typing import List, Optional


class TextAnalyzerError(Exception):
    """Base class for all textanalyzer errors."""


class AnalysisFailedError(TextAnalyzerError):
    """
    An analysis unit could not complete.

    Raised from inside ``analyze()`` (e.g. a malformed pattern) and converted
    to a failure outcome by the task wrapper. It never crosses the worker
    pool boundary.
    """


class EngineShutdownError(TextAnalyzerError):
    """A batch was submitted to an execution engine that has been shut down."""


class ConfigurationError(TextAnalyzerError):
    """Configuration file is unreadable or fails validation."""


class ReportPersistenceError(TextAnalyzerError):
    """A report could not be written to or read from disk."""


class SchedulingInterrupted(KeyboardInterrupt):
    """
    The thread waiting on the execution engine was interrupted.

    Subclasses ``KeyboardInterrupt`` so that the caller's own interruption
    handling still fires once the engine has cancelled outstanding work.

    Attributes:
        outcomes: Outcomes collected before the interruption, indexed by
            submission position. Slots that never completed are ``None``.
    """

    def __init__(self, message: str, outcomes: Optional[List] = None):
        super().__init__(message)
        self.message = message
        self.outcomes = outcomes or []

    def __str__(self) -> str:
        return self.message
