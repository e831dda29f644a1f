"""
Service layer for the administrator dashboard.

Figures are aggregated from stored results only; no result is recomputed.
"""

from collections import defaultdict
from typing import Any, Dict, List

from digiwise.assessments.repositories import ResultRepository, SessionRepository
from digiwise.common.logger import get_logger
from digiwise.metrics.models import DashboardSummary
from digiwise.scoring.models import RiskLevel

logger = get_logger(__name__)


class DashboardService:
    """
    Provides aggregate assessment metrics for administrators.
    """

    def __init__(self, session_repository: SessionRepository, result_repository: ResultRepository):
        """
        Initialize the service with the session and result repositories.

        Args:
            session_repository: Source of started sessions
            result_repository: Source of stored results
        """
        self._sessions = session_repository
        self._results = result_repository
        logger.info("Initialized DashboardService")

    async def get_summary(self) -> DashboardSummary:
        """
        Aggregate every stored result into the dashboard summary.

        Returns:
            The dashboard summary
        """
        sessions = await self._sessions.list_sessions()
        records = await self._results.list_results()

        distribution = {level.value: 0 for level in RiskLevel}
        category_totals: Dict[str, List[int]] = defaultdict(list)
        for record in records:
            distribution[record.result.risk_level.value] += 1
            for category, value in record.result.category_scores.items():
                category_totals[category].append(value)

        average = None
        if records:
            average = round(sum(r.result.overall_score for r in records) / len(records), 1)

        summary = DashboardSummary(
            # Results may outlive their sessions in external stores.
            total_assessments=max(len(sessions), len(records)),
            completed_assessments=len(records),
            average_overall_score=average,
            risk_distribution=distribution,
            category_averages={
                category: round(sum(values) / len(values), 1)
                for category, values in category_totals.items()
            },
        )
        logger.debug(f"Dashboard summary: {summary.to_dict()}")
        return summary

    async def get_examinee_history(self, examinee_id: str) -> List[Dict[str, Any]]:
        """
        List an examinee's stored results, oldest first, for progress tracking.

        Args:
            examinee_id: The examinee

        Returns:
            Stored results as dictionaries
        """
        records = await self._results.list_results(examinee_id=examinee_id)
        return [record.to_dict() for record in sorted(records, key=lambda r: r.stored_at)]
