"""Domain services."""

from typing import List, Mapping, Optional

from .analyzers import (
    AnalysisUnit,
    WordCountAnalyzer,
    PatternSearchAnalyzer,
    SentenceCountAnalyzer,
    DEFAULT_TOP_WORDS,
    EMAIL_PATTERN,
    URL_PATTERN,
)
from .report_aggregator import ReportAggregator

DEFAULT_PATTERNS = {
    "email": EMAIL_PATTERN,
    "url": URL_PATTERN,
}


def build_default_units(
    patterns: Optional[Mapping[str, str]] = None,
    top_words: int = DEFAULT_TOP_WORDS,
    include_sentence_count: bool = False,
) -> List[AnalysisUnit]:
    """
    Build the standard analysis set: word count plus one search per pattern.

    Args:
        patterns: Pattern name to regex (defaults to email and URL)
        top_words: Number of words kept by the word count
        include_sentence_count: Append the reserved sentence count analysis

    Returns:
        Analysis units in submission order
    """
    if patterns is None:
        patterns = DEFAULT_PATTERNS

    units: List[AnalysisUnit] = [WordCountAnalyzer(top_n=top_words, label="words")]
    for name, regex in patterns.items():
        units.append(PatternSearchAnalyzer(regex, label=name))
    if include_sentence_count:
        units.append(SentenceCountAnalyzer(label="sentences"))
    return units


__all__ = [
    "AnalysisUnit",
    "WordCountAnalyzer",
    "PatternSearchAnalyzer",
    "SentenceCountAnalyzer",
    "ReportAggregator",
    "build_default_units",
    "DEFAULT_PATTERNS",
    "DEFAULT_TOP_WORDS",
    "EMAIL_PATTERN",
    "URL_PATTERN",
]
