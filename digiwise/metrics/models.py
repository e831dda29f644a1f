"""
Dashboard metric models.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class DashboardSummary:
    """
    Aggregate figures shown on the administrator dashboard.

    Attributes:
        total_assessments: Sessions started, in any status
        completed_assessments: Sessions with a stored result
        average_overall_score: Mean overall score of stored results, if any
        risk_distribution: Number of results per risk level, all tiers present
        category_averages: Mean score per category over stored results
    """
    total_assessments: int = 0
    completed_assessments: int = 0
    average_overall_score: Optional[float] = None
    risk_distribution: Dict[str, int] = field(default_factory=dict)
    category_averages: Dict[str, float] = field(default_factory=dict)

    @property
    def completion_rate(self) -> float:
        """Percentage of started sessions that were completed, to one decimal."""
        if self.total_assessments == 0:
            return 0.0
        return round(self.completed_assessments / self.total_assessments * 100, 1)

    def to_dict(self) -> Dict[str, Any]:
        """Converts the summary to a dictionary."""
        return {
            "total_assessments": self.total_assessments,
            "completed_assessments": self.completed_assessments,
            "completion_rate": self.completion_rate,
            "average_overall_score": self.average_overall_score,
            "risk_distribution": dict(self.risk_distribution),
            "category_averages": dict(self.category_averages),
        }
