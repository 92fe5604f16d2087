"""Domain models."""

from .analysis import (
    AnalysisKind,
    AnalysisSuccess,
    AnalysisFailure,
    AnalysisOutcome,
    describe_payload,
    empty_payload,
    outcome_from_dict,
)
from .report import Report

__all__ = [
    "AnalysisKind",
    "AnalysisSuccess",
    "AnalysisFailure",
    "AnalysisOutcome",
    "Report",
    "describe_payload",
    "empty_payload",
    "outcome_from_dict",
]
