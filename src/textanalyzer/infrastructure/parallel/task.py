"""Task wrapper binding an analysis unit to its input text."""

import threading
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ...domain.models.analysis import AnalysisFailure, AnalysisKind, AnalysisOutcome, AnalysisSuccess
from ...domain.services.analyzers import AnalysisUnit
from ..logging import TextAnalyzerLogger


@dataclass(frozen=True)
class AnalysisTask:
    """
    One analysis unit bound to one fixed text.

    Calling the task runs the unit and always returns an outcome: any
    exception raised by the unit is converted into an ``AnalysisFailure``
    that keeps the original exception as its cause.
    """
    unit: AnalysisUnit
    text: Optional[str]

    @property
    def kind(self) -> AnalysisKind:
        return self.unit.kind

    @property
    def label(self) -> Optional[str]:
        return getattr(self.unit, "label", None)

    def __call__(self) -> AnalysisOutcome:
        logger = TextAnalyzerLogger.get_instance()
        thread_name = threading.current_thread().name

        logger.debug(
            f"Starting task: {self.kind.description}",
            extra={"task_label": self.label, "worker": thread_name}
        )

        start = time.monotonic()
        try:
            outcome = self.unit.analyze(self.text)
        except Exception as e:
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.warning(
                f"Task failed: {self.kind.description}",
                extra={
                    "task_label": self.label,
                    "worker": thread_name,
                    "error": str(e),
                    "elapsed_ms": round(elapsed_ms, 3),
                }
            )
            return AnalysisFailure(
                kind=self.kind,
                failure_reason=str(e) or type(e).__name__,
                cause=e,
                label=self.label,
            )

        if not isinstance(outcome, (AnalysisSuccess, AnalysisFailure)):
            error = TypeError(
                f"{type(self.unit).__name__} returned {type(outcome).__name__}, "
                f"not an analysis outcome"
            )
            logger.warning(
                f"Task failed: {self.kind.description}",
                extra={"task_label": self.label, "worker": thread_name, "error": str(error)}
            )
            return AnalysisFailure(
                kind=self.kind,
                failure_reason=str(error),
                cause=error,
                label=self.label,
            )

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug(
            f"Task complete: {self.kind.description}",
            extra={
                "task_label": self.label,
                "worker": thread_name,
                "elapsed_ms": round(elapsed_ms, 3),
            }
        )
        return outcome


def create_tasks(units: Iterable[AnalysisUnit], text: Optional[str]) -> List[AnalysisTask]:
    """
    Wrap each unit as a task over the same text.

    Args:
        units: Analysis units in submission order
        text: Document text shared read-only by every task

    Returns:
        List of tasks, one per unit, in the same order
    """
    return [AnalysisTask(unit=unit, text=text) for unit in units]
