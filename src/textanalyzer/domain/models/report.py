"""Report domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .analysis import AnalysisOutcome, outcome_from_dict


@dataclass
class Report:
    """
    Ordered collection of analysis outcomes for one document.

    Outcomes are kept in submission order. Only the aggregator appends;
    everyone else reads ``results``, which is a tuple snapshot.
    """
    source_name: str
    created_at: datetime = field(default_factory=datetime.now)
    _results: List[AnalysisOutcome] = field(default_factory=list, repr=False)

    @classmethod
    def create(cls, source_name: str) -> "Report":
        """Create an empty report for a source."""
        return cls(source_name=source_name)

    def add_result(self, outcome: AnalysisOutcome):
        """Append an outcome at the end of the report."""
        self._results.append(outcome)

    @property
    def results(self) -> Tuple[AnalysisOutcome, ...]:
        """Read-only view of the outcomes, in submission order."""
        return tuple(self._results)

    @property
    def succeeded(self) -> Tuple[AnalysisOutcome, ...]:
        return tuple(o for o in self._results if o.succeeded)

    @property
    def failed(self) -> Tuple[AnalysisOutcome, ...]:
        return tuple(o for o in self._results if not o.succeeded)

    @property
    def has_failures(self) -> bool:
        return any(not o.succeeded for o in self._results)

    def __len__(self) -> int:
        return len(self._results)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "source_name": self.source_name,
            "created_at": self.created_at.isoformat(),
            "summary": {
                "total": len(self._results),
                "succeeded": len(self.succeeded),
                "failed": len(self.failed),
            },
            "results": [outcome.to_dict() for outcome in self._results],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Report":
        """
        Rebuild a report from its ``to_dict()`` form.

        Args:
            data: Dictionary produced by ``to_dict``

        Returns:
            Report with the same source name and outcomes
        """
        created_at: Optional[str] = data.get("created_at")
        report = cls(
            source_name=data["source_name"],
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.now(),
        )
        for item in data.get("results", []):
            report.add_result(outcome_from_dict(item))
        return report
