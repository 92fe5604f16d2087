"""Analyze document use case."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...domain.models.report import Report
from ...domain.services import (
    AnalysisUnit,
    ReportAggregator,
    build_default_units,
    DEFAULT_TOP_WORDS,
)
from ...infrastructure.logging import TextAnalyzerLogger
from ...infrastructure.parallel import ExecutionEngine, create_tasks


@dataclass
class AnalyzeDocumentCommand:
    """Command to analyze one in-memory document."""
    source_name: str
    text: Optional[str]
    patterns: Optional[Dict[str, str]] = None
    top_words: int = DEFAULT_TOP_WORDS
    include_sentence_count: bool = False
    extra_units: List[AnalysisUnit] = field(default_factory=list)


class AnalyzeDocumentHandler:
    """
    Handler for the analyze document command.

    Builds the analysis set, runs it through the execution engine and
    aggregates the ordered outcomes into a report.
    """

    def __init__(self, engine: ExecutionEngine, aggregator: ReportAggregator):
        """
        Initialize handler.

        Args:
            engine: Execution engine running the tasks
            aggregator: Aggregator building the report
        """
        self.engine = engine
        self.aggregator = aggregator
        self.logger = TextAnalyzerLogger.get_instance()

    def handle(self, command: AnalyzeDocumentCommand) -> Report:
        """
        Execute the command.

        Args:
            command: Analyze document command

        Returns:
            Report with one outcome per analysis, in submission order
        """
        units = build_default_units(
            patterns=command.patterns,
            top_words=command.top_words,
            include_sentence_count=command.include_sentence_count,
        )
        units.extend(command.extra_units)

        self.logger.info(
            f"Analyzing {command.source_name}",
            extra={
                "analyses": len(units),
                "characters": len(command.text or ""),
            }
        )

        tasks = create_tasks(units, command.text)
        outcomes = self.engine.execute_all(tasks)
        report = self.aggregator.aggregate(command.source_name, outcomes)

        if report.has_failures:
            self.logger.warning(
                f"Report for {command.source_name} contains failed analyses",
                extra={"failed": len(report.failed), "total": len(report)}
            )

        return report
