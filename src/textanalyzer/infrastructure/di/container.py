"""Dependency injection container for textanalyzer."""

from dataclasses import dataclass
from typing import Optional

from ..config.config_loader import ConfigLoader
from ..config.config_models import TextAnalyzerConfig
from ..logging import TextAnalyzerLogger
from ..parallel import ExecutionEngine, WorkerConfig
from ..reporting import JSONReportWriter, TextReportWriter
from ...domain.services import ReportAggregator
from ...application.commands.analyze_document import AnalyzeDocumentHandler


@dataclass
class DIContainer:
    """
    Holds the wired components of one textanalyzer run.

    The CLI builds one container per command and closes it when done so
    the engine's worker threads are released.
    """

    # Configuration
    config: TextAnalyzerConfig

    # Infrastructure
    logger: TextAnalyzerLogger
    engine: ExecutionEngine
    json_writer: JSONReportWriter
    text_writer: TextReportWriter

    # Domain Services
    aggregator: ReportAggregator

    # Application Handlers
    analyze_handler: AnalyzeDocumentHandler

    @classmethod
    def create(
        cls,
        config_path: Optional[str] = None,
        config: Optional[TextAnalyzerConfig] = None,
    ) -> "DIContainer":
        """
        Build the components from configuration.

        Args:
            config_path: Optional path to a YAML configuration file
            config: Already loaded configuration (skips loading)

        Returns:
            Container with a running engine
        """
        if config is None:
            config = ConfigLoader.load(config_path)

        logger = TextAnalyzerLogger.get_instance()
        logger.configure(
            level=config.logging.level,
            console=config.logging.console,
            file=config.logging.file,
            rotation=config.logging.rotation,
            retention_days=config.logging.retention_days,
        )

        engine = ExecutionEngine(WorkerConfig(
            max_workers=config.parallel.max_workers,
            grace_period_seconds=config.parallel.grace_period_seconds,
        ))

        aggregator = ReportAggregator()

        analyze_handler = AnalyzeDocumentHandler(
            engine=engine,
            aggregator=aggregator,
        )

        return cls(
            config=config,
            logger=logger,
            engine=engine,
            json_writer=JSONReportWriter(),
            text_writer=TextReportWriter(),
            aggregator=aggregator,
            analyze_handler=analyze_handler,
        )

    def close(self) -> bool:
        """Shut down the execution engine. Returns False if tasks had to be cancelled."""
        return self.engine.shutdown()

    def __repr__(self) -> str:
        return f"<DIContainer: {self.engine.max_workers} workers>"
