"""
Analysis units.

Each unit is a pure function of the input text exposed through a single
``analyze(text)`` method. Units never mutate the text and treat ``None`` or
an empty string as a valid input with an empty result.
"""

import re
import time
from collections import Counter
from typing import Optional, Pattern, Protocol, Union, runtime_checkable

from ..exceptions import AnalysisFailedError
from ..models.analysis import AnalysisKind, AnalysisOutcome, AnalysisSuccess, empty_payload


DEFAULT_TOP_WORDS = 20

# Default extraction patterns
EMAIL_PATTERN = r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b"
URL_PATTERN = (
    r"https?://(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_\+.~#?&//=]*)"
)

_NON_WORD = re.compile(r"\W+")
_SENTENCE_END = re.compile(r"[.!?]+")


@runtime_checkable
class AnalysisUnit(Protocol):
    """Capability shared by every analysis unit."""

    kind: AnalysisKind
    label: Optional[str]

    def analyze(self, text: Optional[str]) -> AnalysisOutcome:
        ...


def _elapsed_micros(start_ns: int) -> int:
    return max(0, (time.perf_counter_ns() - start_ns) // 1000)


def _empty_outcome(unit: AnalysisUnit) -> AnalysisSuccess:
    return AnalysisSuccess(
        kind=unit.kind,
        payload=empty_payload(unit.kind),
        duration_micros=0,
        label=unit.label,
    )


class WordCountAnalyzer:
    """
    Counts word frequencies.

    Tokens are produced by splitting on runs of non-word characters and
    lower-casing. The result is ordered by count (descending, ties in
    first-seen order) and truncated to the ``top_n`` most frequent words.
    The truncation is lossy on purpose: the report only shows the head of
    the distribution.
    """

    kind = AnalysisKind.WORD_COUNT

    def __init__(self, top_n: int = DEFAULT_TOP_WORDS, label: Optional[str] = None):
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        self.top_n = top_n
        self.label = label

    def analyze(self, text: Optional[str]) -> AnalysisOutcome:
        if not text:
            return _empty_outcome(self)

        start_ns = time.perf_counter_ns()

        counts = Counter(
            token
            for token in (raw.lower() for raw in _NON_WORD.split(text))
            if token
        )
        # sorted() is stable, so equal counts keep first-seen order
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        top = dict(ranked[:self.top_n])

        return AnalysisSuccess(
            kind=self.kind,
            payload=top,
            duration_micros=_elapsed_micros(start_ns),
            label=self.label,
        )

    def __repr__(self) -> str:
        return f"WordCountAnalyzer(top_n={self.top_n})"


class PatternSearchAnalyzer:
    """
    Extracts every non-overlapping match of a regular expression.

    Matches are returned in order of appearance. The pattern is compiled on
    first use, so an empty document never triggers a compile error.
    """

    kind = AnalysisKind.PATTERN_SEARCH

    def __init__(self, pattern: Union[str, Pattern[str]], label: Optional[str] = None):
        self.pattern = pattern if isinstance(pattern, str) else pattern.pattern
        self.label = label
        self._compiled: Optional[Pattern[str]] = pattern if not isinstance(pattern, str) else None

    def _compile(self) -> Pattern[str]:
        if self._compiled is None:
            try:
                self._compiled = re.compile(self.pattern)
            except re.error as e:
                raise AnalysisFailedError(f"Invalid pattern {self.pattern!r}: {e}") from e
        return self._compiled

    def analyze(self, text: Optional[str]) -> AnalysisOutcome:
        if not text:
            return _empty_outcome(self)

        start_ns = time.perf_counter_ns()
        regex = self._compile()
        matches = [match.group(0) for match in regex.finditer(text)]

        return AnalysisSuccess(
            kind=self.kind,
            payload=matches,
            duration_micros=_elapsed_micros(start_ns),
            label=self.label,
        )

    def __repr__(self) -> str:
        return f"PatternSearchAnalyzer(label={self.label!r}, pattern={self.pattern!r})"


class SentenceCountAnalyzer:
    """Counts sentences terminated by '.', '!' or '?'. Not in the default set."""

    kind = AnalysisKind.SENTENCE_COUNT

    def __init__(self, label: Optional[str] = None):
        self.label = label

    def analyze(self, text: Optional[str]) -> AnalysisOutcome:
        if not text:
            return _empty_outcome(self)

        start_ns = time.perf_counter_ns()
        count = sum(1 for segment in _SENTENCE_END.split(text) if segment.strip())

        return AnalysisSuccess(
            kind=self.kind,
            payload=count,
            duration_micros=_elapsed_micros(start_ns),
            label=self.label,
        )

    def __repr__(self) -> str:
        return "SentenceCountAnalyzer()"
