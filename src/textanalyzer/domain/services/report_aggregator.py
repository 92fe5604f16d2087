"""Folds ordered engine outcomes into a report."""

from typing import Iterable, Optional

from ..models.analysis import AnalysisOutcome
from ..models.report import Report


class ReportAggregator:
    """
    Builds reports from already-ordered outcomes.

    Aggregation runs on the caller's thread after the engine has returned.
    Every outcome becomes its own entry, even when several share a kind.
    """

    def aggregate(
        self,
        source_name: str,
        outcomes: Iterable[AnalysisOutcome],
        report: Optional[Report] = None,
    ) -> Report:
        """
        Append outcomes to a report in the order given.

        Args:
            source_name: Name of the analyzed document
            outcomes: Outcomes in submission order
            report: Existing report to extend (a new one is created if omitted)

        Returns:
            The report
        """
        if report is None:
            report = Report.create(source_name)
        elif report.source_name != source_name:
            raise ValueError(
                f"Report belongs to {report.source_name!r}, not {source_name!r}"
            )

        for outcome in outcomes:
            if outcome is None:
                raise ValueError("Outcome slots must all be filled before aggregation")
            report.add_result(outcome)

        return report
