"""Analysis kinds and outcomes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class AnalysisKind(str, Enum):
    """Closed set of analyses the system knows how to run."""
    WORD_COUNT = "word_count"
    PATTERN_SEARCH = "pattern_search"
    SENTENCE_COUNT = "sentence_count"  # Reserved, not in the default set

    @property
    def description(self) -> str:
        """Human-readable description."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    AnalysisKind.WORD_COUNT: "Word Frequency Analysis",
    AnalysisKind.PATTERN_SEARCH: "Pattern Matching Analysis",
    AnalysisKind.SENTENCE_COUNT: "Sentence Count Analysis",
}


# Payload shapes per kind
WordFrequencies = Mapping[str, int]
MatchList = Tuple[str, ...]
Payload = Union[WordFrequencies, MatchList, int]


@dataclass(frozen=True)
class AnalysisSuccess:
    """
    Outcome of an analysis that completed.

    The payload type depends on ``kind``: a read-only word-frequency mapping
    for WORD_COUNT, a tuple of matched strings for PATTERN_SEARCH, and an
    integer for SENTENCE_COUNT.
    """
    kind: AnalysisKind
    payload: Payload
    duration_micros: int = 0
    completed_at: datetime = field(default_factory=datetime.now)
    label: Optional[str] = None

    succeeded = True

    def __post_init__(self):
        if self.duration_micros < 0:
            raise ValueError("duration_micros must be non-negative")
        if isinstance(self.payload, dict):
            object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))
        elif isinstance(self.payload, list):
            object.__setattr__(self, "payload", tuple(self.payload))

    @property
    def is_empty(self) -> bool:
        """True when the analysis found nothing."""
        if isinstance(self.payload, int):
            return self.payload == 0
        return len(self.payload) == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        if isinstance(self.payload, int):
            payload: Any = self.payload
        elif isinstance(self.payload, Mapping):
            payload = dict(self.payload)
        else:
            payload = list(self.payload)

        return {
            "kind": self.kind.value,
            "label": self.label,
            "status": "success",
            "payload": payload,
            "duration_micros": self.duration_micros,
            "completed_at": self.completed_at.isoformat(),
        }


@dataclass(frozen=True)
class AnalysisFailure:
    """
    Outcome of an analysis that raised or was cancelled.

    ``cause`` holds the original exception for diagnostics. Reports loaded
    back from disk have no live exception, only ``cause_type``.
    """
    kind: AnalysisKind
    failure_reason: str
    cause: Optional[BaseException] = field(default=None, compare=False)
    label: Optional[str] = None
    cause_type: Optional[str] = None

    succeeded = False

    def __post_init__(self):
        if self.cause is not None and self.cause_type is None:
            object.__setattr__(self, "cause_type", type(self.cause).__name__)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "kind": self.kind.value,
            "label": self.label,
            "status": "failure",
            "failure_reason": self.failure_reason,
            "cause_type": self.cause_type,
        }


AnalysisOutcome = Union[AnalysisSuccess, AnalysisFailure]


def outcome_from_dict(data: Dict[str, Any]) -> AnalysisOutcome:
    """
    Rebuild an outcome from its ``to_dict()`` form.

    Args:
        data: Dictionary produced by ``AnalysisSuccess.to_dict`` or
            ``AnalysisFailure.to_dict``

    Returns:
        The reconstructed outcome

    Raises:
        ValueError: If the status tag is unknown
    """
    kind = AnalysisKind(data["kind"])
    status = data.get("status")

    if status == "failure":
        return AnalysisFailure(
            kind=kind,
            failure_reason=data.get("failure_reason", ""),
            label=data.get("label"),
            cause_type=data.get("cause_type"),
        )

    if status != "success":
        raise ValueError(f"Unknown outcome status: {status!r}")

    payload = data.get("payload")
    if kind == AnalysisKind.WORD_COUNT:
        payload = dict(payload or {})
    elif kind == AnalysisKind.PATTERN_SEARCH:
        payload = list(payload or [])
    else:
        payload = int(payload or 0)

    completed_at = data.get("completed_at")
    return AnalysisSuccess(
        kind=kind,
        payload=payload,
        duration_micros=int(data.get("duration_micros", 0)),
        completed_at=datetime.fromisoformat(completed_at) if completed_at else datetime.now(),
        label=data.get("label"),
    )


def empty_payload(kind: AnalysisKind) -> Payload:
    """Zero-result payload for a kind."""
    if kind == AnalysisKind.WORD_COUNT:
        return {}
    if kind == AnalysisKind.PATTERN_SEARCH:
        return []
    return 0


def describe_payload(outcome: AnalysisOutcome, max_items: int = 5) -> str:
    """Short one-line summary of an outcome's payload for display."""
    if not outcome.succeeded:
        return outcome.failure_reason

    payload = outcome.payload
    if isinstance(payload, int):
        return str(payload)
    if isinstance(payload, Mapping):
        items: List[str] = [f"{word}={count}" for word, count in list(payload.items())[:max_items]]
    else:
        items = list(payload[:max_items])
    more = len(payload) - len(items)
    summary = ", ".join(items) if items else "(none)"
    if more > 0:
        summary += f", ... (+{more})"
    return summary
