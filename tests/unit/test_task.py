"""Tests for the task wrapper."""

import pytest

from textanalyzer.domain.exceptions import AnalysisFailedError
from textanalyzer.domain.models.analysis import AnalysisFailure, AnalysisKind
from textanalyzer.domain.services import PatternSearchAnalyzer, WordCountAnalyzer
from textanalyzer.infrastructure.parallel import AnalysisTask, create_tasks

from tests.conftest import FailingUnit


def test_task_returns_unit_outcome():
    task = AnalysisTask(unit=WordCountAnalyzer(label="words"), text="a b a")

    outcome = task()

    assert outcome.succeeded
    assert task.kind == AnalysisKind.WORD_COUNT
    assert outcome.label == "words"
    assert dict(outcome.payload) == {"a": 2, "b": 1}


def test_task_converts_exceptions_into_failure_outcomes():
    error = RuntimeError("disk on fire")
    task = AnalysisTask(unit=FailingUnit(error), text="anything")

    outcome = task()

    assert isinstance(outcome, AnalysisFailure)
    assert not outcome.succeeded
    assert outcome.kind == AnalysisKind.WORD_COUNT
    assert outcome.failure_reason == "disk on fire"
    assert outcome.cause is error
    assert outcome.cause_type == "RuntimeError"
    assert outcome.label == "broken"


def test_task_uses_exception_type_when_message_is_empty():
    outcome = AnalysisTask(unit=FailingUnit(ValueError()), text="x")()

    assert outcome.failure_reason == "ValueError"


def test_malformed_pattern_becomes_failure():
    task = AnalysisTask(unit=PatternSearchAnalyzer("(", label="broken"), text="text")

    outcome = task()

    assert not outcome.succeeded
    assert isinstance(outcome.cause, AnalysisFailedError)
    assert "Invalid pattern" in outcome.failure_reason


def test_tasks_are_immutable():
    task = AnalysisTask(unit=WordCountAnalyzer(), text="abc")

    with pytest.raises(AttributeError):
        task.text = "changed"


def test_create_tasks_preserves_order_and_shares_text():
    units = [WordCountAnalyzer(), PatternSearchAnalyzer("a"), PatternSearchAnalyzer("b")]
    text = "shared document"

    tasks = create_tasks(units, text)

    assert [t.unit for t in tasks] == units
    assert all(t.text is text for t in tasks)


class _NoOutcomeUnit:
    kind = AnalysisKind.SENTENCE_COUNT
    label = "silent"

    def analyze(self, text):
        return None


def test_non_outcome_return_becomes_failure():
    outcome = AnalysisTask(unit=_NoOutcomeUnit(), text="text")()

    assert isinstance(outcome, AnalysisFailure)
    assert outcome.kind == AnalysisKind.SENTENCE_COUNT
    assert outcome.label == "silent"
    assert isinstance(outcome.cause, TypeError)
    assert outcome.failure_reason == "_NoOutcomeUnit returned NoneType, not an analysis outcome"
