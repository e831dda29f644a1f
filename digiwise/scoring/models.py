"""
Scoring Models

This module defines the value types produced and consumed by the scoring
engine: answers, risk levels, risk bands, the immutable scoring result and
the scoring configuration.
"""

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(enum.Enum):
    """
    Ordered severity tiers derived from the overall score.

    Tiers compare by severity: LOW < MODERATE < HIGH < SEVERE.
    """
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        """Position of the tier in the severity ordering (0 = low)."""
        return _RISK_ORDER.index(self)

    def __lt__(self, other: 'RiskLevel') -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: 'RiskLevel') -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: 'RiskLevel') -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: 'RiskLevel') -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_ORDER: List[RiskLevel] = [RiskLevel.LOW, RiskLevel.MODERATE, RiskLevel.HIGH, RiskLevel.SEVERE]

DEFAULT_WEIGHT_TOLERANCE = 1e-6


class RiskBand(BaseModel):
    """
    One row of the risk threshold table.

    A band covers the half-open interval ``[lower, upper)``; the last band of
    a table also includes its upper bound.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    level: RiskLevel
    lower: float
    upper: float


DEFAULT_RISK_BANDS: List[RiskBand] = [
    RiskBand(level=RiskLevel.LOW, lower=0, upper=25),
    RiskBand(level=RiskLevel.MODERATE, lower=25, upper=50),
    RiskBand(level=RiskLevel.HIGH, lower=50, upper=75),
    RiskBand(level=RiskLevel.SEVERE, lower=75, upper=100),
]


@dataclass(frozen=True)
class Answer:
    """A selected ordinal value for one question."""
    question_id: str
    value: int


@dataclass(frozen=True, eq=True)
class ScoringResult:
    """
    The outcome of scoring one complete answer set.

    Attributes:
        overall_score: Aggregate percentage, 0 to 100
        category_scores: Read-only mapping of category label to percentage
        risk_level: Tier derived from the overall score
    """
    overall_score: int
    category_scores: Mapping[str, int] = field(default_factory=dict)
    risk_level: RiskLevel = RiskLevel.LOW

    def __post_init__(self):
        object.__setattr__(self, "category_scores", MappingProxyType(dict(self.category_scores)))

    def __hash__(self) -> int:
        return hash((self.overall_score, tuple(sorted(self.category_scores.items())), self.risk_level))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the result to the shape persisted for a session.

        Returns:
            Dictionary with overall_score, category_scores and risk_level
        """
        return {
            "overall_score": self.overall_score,
            "category_scores": dict(self.category_scores),
            "risk_level": self.risk_level.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScoringResult':
        """
        Rebuild a result from its persisted shape.

        Args:
            data: Dictionary produced by ``to_dict``

        Returns:
            A ScoringResult instance
        """
        return cls(
            overall_score=int(data["overall_score"]),
            category_scores={k: int(v) for k, v in data.get("category_scores", {}).items()},
            risk_level=RiskLevel(data["risk_level"]),
        )


class ScoringConfig(BaseModel):
    """
    Scoring configuration.

    ``weights`` maps category to weight; when unset every category weighs
    the same. The weight table and risk bands are checked by the scoring
    engine itself, which raises ``InvalidWeightConfiguration`` or
    ``InvalidThresholdConfiguration`` when they are unusable.
    """
    weights: Optional[Dict[str, float]] = None
    weight_tolerance: float = Field(default=DEFAULT_WEIGHT_TOLERANCE, gt=0)
    risk_bands: List[RiskBand] = Field(default_factory=lambda: list(DEFAULT_RISK_BANDS))
