"""Pytest configuration and fixtures for textanalyzer tests."""

import tempfile
import shutil
import threading
import time
from pathlib import Path
from typing import Generator, Optional
import pytest

from textanalyzer.domain.models.analysis import AnalysisKind, AnalysisOutcome, AnalysisSuccess
from textanalyzer.infrastructure.config.config_loader import ConfigLoader, ENV_OVERRIDES
from textanalyzer.infrastructure.logging import TextAnalyzerLogger
from textanalyzer.infrastructure.parallel import ExecutionEngine, WorkerConfig


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Provide a temporary directory for test files.

    Automatically cleaned up after the test completes.
    """
    temp_path = Path(tempfile.mkdtemp(prefix="textanalyzer_test_"))
    try:
        yield temp_path
    finally:
        if temp_path.exists():
            shutil.rmtree(temp_path)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep tests away from real config files, env overrides and log handlers."""
    for env_var in ENV_OVERRIDES:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setattr(
        ConfigLoader,
        "DEFAULT_PATHS",
        [tmp_path / "textanalyzer.yaml", tmp_path / "home" / "config.yaml"],
    )
    yield
    TextAnalyzerLogger.reset()


@pytest.fixture
def sample_text() -> str:
    """
    Provide a small document with words, emails and URLs.

    Returns:
        Document text
    """
    return (
        "Hello World! This is a sample text file for the Text Analysis Tool.\n"
        "It contains some emails like test@example.com and admin@site.org.\n"
        "It also has some URLs like https://www.google.com and http://python.org in it.\n"
        "Python is great. Python is powerful. Multithreading in Python is fun.\n"
    )


@pytest.fixture
def engine() -> Generator[ExecutionEngine, None, None]:
    """Execution engine with four workers, shut down after the test."""
    pool = ExecutionEngine(WorkerConfig(max_workers=4, grace_period_seconds=5.0))
    try:
        yield pool
    finally:
        pool.shutdown()


class SleepyUnit:
    """Test unit that sleeps, then returns its tag as a one-element match list."""

    kind = AnalysisKind.PATTERN_SEARCH

    def __init__(self, tag: str, delay: float = 0.0, label: Optional[str] = None):
        self.tag = tag
        self.delay = delay
        self.label = label or tag

    def analyze(self, text: Optional[str]) -> AnalysisOutcome:
        if self.delay:
            time.sleep(self.delay)
        return AnalysisSuccess(kind=self.kind, payload=[self.tag], label=self.label)


class FailingUnit:
    """Test unit that always raises."""

    kind = AnalysisKind.WORD_COUNT

    def __init__(self, error: Exception, label: Optional[str] = "broken"):
        self.error = error
        self.label = label

    def analyze(self, text: Optional[str]) -> AnalysisOutcome:
        raise self.error


class BlockingUnit:
    """Test unit that blocks until released."""

    kind = AnalysisKind.SENTENCE_COUNT

    def __init__(self, label: Optional[str] = "blocking"):
        self.label = label
        self.started = threading.Event()
        self.release = threading.Event()

    def analyze(self, text: Optional[str]) -> AnalysisOutcome:
        self.started.set()
        self.release.wait(timeout=10)
        return AnalysisSuccess(kind=self.kind, payload=1, label=self.label)
