"""
Scoring package for DigiWise.

Turns a complete answer set into category scores, an overall score and a
risk level, and derives the action plan and text report for a result.
"""

from digiwise.scoring.models import (
    Answer, RiskLevel, RiskBand, ScoringConfig, ScoringResult, DEFAULT_RISK_BANDS
)
from digiwise.scoring.engine import (
    compute_category_scores, compute_overall_score, classify_risk, score,
    validate_weights, validate_risk_bands, round_half_up
)
from digiwise.scoring.recommendations import (
    RecommendedAction, recommended_actions, render_text_report
)

__all__ = [
    # Models
    'Answer', 'RiskLevel', 'RiskBand', 'ScoringConfig', 'ScoringResult', 'DEFAULT_RISK_BANDS',

    # Engine
    'compute_category_scores', 'compute_overall_score', 'classify_risk', 'score',
    'validate_weights', 'validate_risk_bands', 'round_half_up',

    # Recommendations
    'RecommendedAction', 'recommended_actions', 'render_text_report',
]
