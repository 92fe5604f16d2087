"""Tests for the analyze document use case and its wiring."""

import logging

import pytest

from textanalyzer.application.commands import AnalyzeDocumentCommand, AnalyzeDocumentHandler
from textanalyzer.domain.models import AnalysisKind
from textanalyzer.domain.services import ReportAggregator
from textanalyzer.infrastructure.config import ParallelConfig, TextAnalyzerConfig
from textanalyzer.infrastructure.di import DIContainer
from textanalyzer.infrastructure.logging import TextAnalyzerLogger
from textanalyzer.infrastructure.parallel import EngineState

from tests.conftest import FailingUnit


@pytest.fixture
def handler(engine):
    return AnalyzeDocumentHandler(engine=engine, aggregator=ReportAggregator())


class TestAnalyzeDocumentHandler:

    def test_default_analysis_set(self, handler, sample_text):
        report = handler.handle(AnalyzeDocumentCommand(source_name="sample.txt", text=sample_text))

        assert report.source_name == "sample.txt"
        assert [o.label for o in report.results] == ["words", "email", "url"]
        words, emails, urls = report.results
        assert words.kind == AnalysisKind.WORD_COUNT
        assert list(words.payload.items())[0] == ("is", 4)
        assert list(emails.payload) == ["test@example.com", "admin@site.org"]
        assert list(urls.payload) == ["https://www.google.com", "http://python.org"]
        assert not report.has_failures

    def test_custom_patterns_and_sentences(self, handler):
        command = AnalyzeDocumentCommand(
            source_name="doc",
            text="Call 555 1234. Now!",
            patterns={"digits": r"\d+"},
            top_words=2,
            include_sentence_count=True,
        )

        report = handler.handle(command)

        assert [o.kind for o in report.results] == [
            AnalysisKind.WORD_COUNT,
            AnalysisKind.PATTERN_SEARCH,
            AnalysisKind.SENTENCE_COUNT,
        ]
        assert len(report.results[0].payload) == 2
        assert list(report.results[1].payload) == ["555", "1234"]
        assert report.results[2].payload == 2

    def test_failures_are_reported_not_raised(self, handler, caplog):
        command = AnalyzeDocumentCommand(
            source_name="doc",
            text="some text",
            patterns={"broken": "("},
            extra_units=[FailingUnit(RuntimeError("boom"))],
        )

        with caplog.at_level(logging.WARNING, logger="textanalyzer"):
            report = handler.handle(command)

        assert [o.succeeded for o in report.results] == [True, False, False]
        assert "Invalid pattern" in report.results[1].failure_reason
        assert report.results[2].failure_reason == "boom"
        assert "contains failed analyses" in caplog.text

    def test_empty_document(self, handler):
        report = handler.handle(AnalyzeDocumentCommand(source_name="empty", text=""))

        assert len(report) == 3
        assert all(o.succeeded and o.is_empty for o in report.results)


class TestDIContainer:

    def test_wires_engine_from_config(self):
        config = TextAnalyzerConfig(parallel=ParallelConfig(max_workers=2, grace_period_seconds=1.0))

        container = DIContainer.create(config=config)
        try:
            assert container.engine.max_workers == 2
            assert container.analyze_handler.engine is container.engine
            assert container.logger.is_configured
            report = container.analyze_handler.handle(
                AnalyzeDocumentCommand(source_name="doc", text="a a b")
            )
            assert dict(report.results[0].payload) == {"a": 2, "b": 1}
        finally:
            assert container.close() is True

        assert container.engine.state == EngineState.SHUTDOWN


class TestLogger:

    def test_file_logging_includes_context(self, temp_dir):
        log_file = temp_dir / "logs" / "textanalyzer.log"
        logger = TextAnalyzerLogger.get_instance()

        logger.configure(level="INFO", console=False, file=str(log_file), rotation="none")
        logger.info("Report saved", extra={"results": 3})
        logger.debug("hidden")

        content = log_file.read_text(encoding="utf-8")
        assert "INFO" in content
        assert "Report saved | results=3" in content
        assert "hidden" not in content

    def test_singleton(self):
        assert TextAnalyzerLogger.get_instance() is TextAnalyzerLogger.get_instance()

    def test_reset_removes_handlers(self, temp_dir):
        logger = TextAnalyzerLogger.get_instance()
        logger.configure(level="INFO", console=True, file=str(temp_dir / "a.log"))
        assert len(logger.logger.handlers) == 2

        TextAnalyzerLogger.reset()

        assert logger.logger.handlers == []
        assert logger.logger.propagate is True
