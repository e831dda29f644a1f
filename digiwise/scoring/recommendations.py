"""
Recommendations and Result Reports

Maps a risk level to the action plan shown with a result, and renders the
plain-text report examinees can download.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from digiwise.scoring.models import RiskLevel, ScoringResult


@dataclass(frozen=True)
class RecommendedAction:
    """A single suggested step and when to take it."""
    action: str
    timeframe: str

    def to_dict(self) -> Dict[str, str]:
        return {"action": self.action, "timeframe": self.timeframe}


ACTION_PLANS: Dict[RiskLevel, List[RecommendedAction]] = {
    RiskLevel.LOW: [
        RecommendedAction("Maintain current healthy digital boundaries", "Ongoing"),
        RecommendedAction("Set goals for continued improvement", "This week"),
    ],
    RiskLevel.MODERATE: [
        RecommendedAction("Implement screen time limits on social media apps", "Today"),
        RecommendedAction("Create designated tech-free zones", "This week"),
    ],
    RiskLevel.HIGH: [
        RecommendedAction("Schedule regular digital detox periods", "Today"),
        RecommendedAction("Use app blocking tools during work hours", "This week"),
    ],
    RiskLevel.SEVERE: [
        RecommendedAction("Set up strict device usage limitations", "Today"),
        RecommendedAction("Seek professional support for digital dependency", "This week"),
    ],
}


def recommended_actions(risk_level: Union[RiskLevel, str]) -> List[RecommendedAction]:
    """
    Get the action plan for a risk level.

    Args:
        risk_level: A RiskLevel or its string value

    Returns:
        The recommended actions, most urgent first
    """
    return list(ACTION_PLANS[RiskLevel(risk_level)])


def report_filename(on: Optional[date] = None) -> str:
    """Download name for a report, e.g. ``DigiWise_Results_2024-05-01.txt``."""
    return f"DigiWise_Results_{(on or date.today()).isoformat()}.txt"


def render_text_report(
    result: ScoringResult,
    first_name: Optional[str] = None,
    completed_at: Optional[datetime] = None
) -> str:
    """
    Render a result as the downloadable plain-text report.

    The report is built from the stored result only; nothing is recomputed.

    Args:
        result: The scoring result to render
        first_name: Examinee's first name; "User" when unknown
        completed_at: When the session was completed; today when unknown

    Returns:
        The report text
    """
    completed_on = (completed_at or datetime.now()).date()
    level = result.risk_level.value

    lines = [
        "DigiWise Digital Wellness Assessment Results",
        "=============================================",
        f"Name: {first_name or 'User'}",
        f"Date: {completed_on.isoformat()}",
        f"Overall Score: {result.overall_score}%",
        f"Risk Level: {level[0].upper() + level[1:]}",
        "Category Breakdown:",
    ]
    lines.extend(f"- {category}: {value}%" for category, value in result.category_scores.items())
    lines.append("Recommended Actions:")
    lines.extend(f"- {item.action} ({item.timeframe})" for item in recommended_actions(result.risk_level))
    lines.append("Thank you for completing the DigiWise Digital Wellness Assessment.")

    return "\n".join(lines) + "\n"
