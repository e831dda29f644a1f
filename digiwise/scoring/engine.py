"""
Scoring Engine

Maps a complete answer set to per-category percentages, an overall score and
a risk level. Every function here is pure: no I/O, no shared state, and the
same inputs always give the same Result, so the engine may be called
concurrently without coordination.

``score`` is the entry point for collaborators. The three steps it composes
are exposed for direct use and testing:

1. ``compute_category_scores`` - answer sums over the category maximum
2. ``compute_overall_score`` - mean (or weighted mean) of category scores
3. ``classify_risk`` - half-open threshold lookup against the risk bands

All percentages are whole numbers rounded half up.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from digiwise.common.exceptions import (
    IncompleteAnswerSet, InvalidAnswer, InvalidThresholdConfiguration,
    InvalidWeightConfiguration, ScoringError, UnknownCategory, ValidationError
)
from digiwise.common.logger import get_logger, log_execution_time
from digiwise.domain.questions import QuestionCatalog
from digiwise.scoring.models import (
    Answer, DEFAULT_RISK_BANDS, DEFAULT_WEIGHT_TOLERANCE, RiskBand, RiskLevel,
    ScoringConfig, ScoringResult
)

logger = get_logger(__name__)

AnswerSet = Union[Iterable[Answer], Mapping[str, int]]
BandTable = Sequence[Union[RiskBand, dict]]

_HUNDRED = Decimal(100)


def round_half_up(value: Decimal) -> int:
    """Round to the nearest whole number, halves away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _as_answers(answers: AnswerSet) -> List[Answer]:
    if isinstance(answers, Mapping):
        return [Answer(question_id=qid, value=value) for qid, value in answers.items()]
    return list(answers)


#------------------------------------------------------------------------------
# Category scores
#------------------------------------------------------------------------------

def compute_category_scores(answers: AnswerSet, catalog: QuestionCatalog) -> Dict[str, int]:
    """
    Compute the percentage score of every category in the catalog.

    For each category the selected values of its questions are summed and
    divided by the sum of those questions' maximum values.

    Args:
        answers: Answers as ``Answer`` objects or a ``{question_id: value}`` mapping
        catalog: The active question catalog

    Returns:
        Mapping of category label to percentage, covering exactly the
        catalog's active categories

    Raises:
        UnknownCategory: If an answer references a question outside the active catalog
        InvalidAnswer: If a value is off the scale or a question is answered twice
        IncompleteAnswerSet: If an active question has no answer
    """
    values: Dict[str, int] = {}
    for answer in _as_answers(answers):
        question = catalog.get(answer.question_id)
        if question is None:
            known = catalog.get_any(answer.question_id)
            orphaned = known.category if known and known.category not in catalog.categories else None
            raise UnknownCategory(answer.question_id, orphaned)
        if answer.question_id in values:
            raise InvalidAnswer(answer.question_id, "answered more than once")
        if not question.accepts(answer.value):
            raise InvalidAnswer(
                answer.question_id,
                f"value {answer.value!r} is outside the scale 0-{question.max_value}"
            )
        values[answer.question_id] = answer.value

    missing = [q.question_id for q in catalog if q.question_id not in values]
    if missing:
        raise IncompleteAnswerSet(missing)

    scores: Dict[str, int] = {}
    for category in catalog.categories:
        questions = catalog.questions_in(category)
        earned = sum(values[q.question_id] for q in questions)
        possible = sum(q.max_value for q in questions)
        scores[category] = round_half_up(Decimal(earned) * _HUNDRED / Decimal(possible))

    return scores


#------------------------------------------------------------------------------
# Overall score
#------------------------------------------------------------------------------

def validate_weights(
    weights: Mapping[str, float],
    categories: Iterable[str],
    tolerance: float = DEFAULT_WEIGHT_TOLERANCE
) -> None:
    """
    Check a category weight table against the scored categories.

    Args:
        weights: Mapping of category to weight
        categories: Categories that were scored
        tolerance: Allowed distance of the weight sum from 1.0

    Raises:
        InvalidWeightConfiguration: If the table references unknown categories,
            omits a scored category, holds a negative or non-finite weight or
            does not sum to 1.0
    """
    expected = set(categories)
    unknown = sorted(set(weights) - expected)
    if unknown:
        raise InvalidWeightConfiguration(f"unknown categories {unknown}", weights)

    missing = sorted(expected - set(weights))
    if missing:
        raise InvalidWeightConfiguration(f"no weight for categories {missing}", weights)

    non_finite = sorted(c for c, w in weights.items() if not math.isfinite(w))
    if non_finite:
        raise InvalidWeightConfiguration(f"non-finite weight for categories {non_finite}", weights)

    negative = sorted(c for c, w in weights.items() if w < 0)
    if negative:
        raise InvalidWeightConfiguration(f"negative weight for categories {negative}", weights)

    total = sum(weights.values())
    if abs(total - 1.0) > tolerance:
        raise InvalidWeightConfiguration(f"weights sum to {total}, expected 1.0", weights)


def compute_overall_score(
    category_scores: Mapping[str, int],
    weights: Optional[Mapping[str, float]] = None,
    tolerance: float = DEFAULT_WEIGHT_TOLERANCE
) -> int:
    """
    Aggregate category scores into a single percentage.

    Without a weight table this is the plain mean of the category scores.

    Args:
        category_scores: Mapping of category label to percentage
        weights: Optional mapping of category to weight, summing to 1.0
        tolerance: Allowed distance of the weight sum from 1.0

    Returns:
        Overall score, 0 to 100

    Raises:
        ScoringError: If there are no category scores
        ValidationError: If a category score is outside [0, 100]
        InvalidWeightConfiguration: If the weight table is unusable
    """
    if not category_scores:
        raise ScoringError("Cannot compute an overall score without category scores")

    out_of_range = {c: s for c, s in category_scores.items() if not 0 <= s <= 100}
    if out_of_range:
        raise ValidationError("category scores must lie in [0, 100]", errors=out_of_range)

    if weights is None:
        total = sum(Decimal(s) for s in category_scores.values())
        return round_half_up(total / Decimal(len(category_scores)))

    validate_weights(weights, category_scores.keys(), tolerance)

    # Normalised by the actual weight sum so the result stays within [0, 100].
    weight_sum = sum(Decimal(str(w)) for w in weights.values())
    weighted = sum(Decimal(str(weights[c])) * Decimal(s) for c, s in category_scores.items())
    return round_half_up(weighted / weight_sum)


#------------------------------------------------------------------------------
# Risk classification
#------------------------------------------------------------------------------

def _as_band(band: Union[RiskBand, dict]) -> RiskBand:
    if isinstance(band, RiskBand):
        return band
    try:
        return RiskBand.model_validate(band)
    except ValueError as e:
        raise InvalidThresholdConfiguration(f"malformed band {band!r}: {e}") from e


def validate_risk_bands(bands: BandTable) -> List[RiskBand]:
    """
    Check that a band table partitions [0, 100] into increasing risk tiers.

    Args:
        bands: Bands ordered from the lowest score upwards

    Returns:
        The bands as RiskBand objects

    Raises:
        InvalidThresholdConfiguration: If the table is empty, leaves gaps,
            overlaps, does not span exactly [0, 100] or is not monotonic
    """
    table = [_as_band(b) for b in bands]
    if not table:
        raise InvalidThresholdConfiguration("no risk bands configured")

    if table[0].lower != 0:
        raise InvalidThresholdConfiguration(f"first band starts at {table[0].lower}, expected 0")
    if table[-1].upper != 100:
        raise InvalidThresholdConfiguration(f"last band ends at {table[-1].upper}, expected 100")

    for band in table:
        if not (math.isfinite(band.lower) and math.isfinite(band.upper)):
            raise InvalidThresholdConfiguration(
                f"band '{band.level.value}' has a non-finite bound: [{band.lower}, {band.upper})"
            )
        if band.lower >= band.upper:
            raise InvalidThresholdConfiguration(
                f"band '{band.level.value}' is empty or inverted: [{band.lower}, {band.upper})"
            )

    for previous, current in zip(table, table[1:]):
        if current.lower > previous.upper:
            raise InvalidThresholdConfiguration(
                f"gap between {previous.upper} and {current.lower}"
            )
        if current.lower < previous.upper:
            raise InvalidThresholdConfiguration(
                f"bands '{previous.level.value}' and '{current.level.value}' overlap"
            )
        if current.level <= previous.level:
            raise InvalidThresholdConfiguration(
                f"tier '{current.level.value}' does not rank above '{previous.level.value}'"
            )

    return table


def classify_risk(overall_score: float, bands: Optional[BandTable] = None) -> RiskLevel:
    """
    Look up the risk tier of an overall score.

    Each band covers ``[lower, upper)``, so a score on a boundary falls into
    the upper band. A score of exactly 100 belongs to the last band.

    Args:
        overall_score: Overall score, 0 to 100
        bands: Band table; defaults to low/moderate/high/severe at 25-point steps

    Returns:
        The matching risk level

    Raises:
        InvalidThresholdConfiguration: If the band table is unusable
        ValidationError: If the score is outside [0, 100]
    """
    table = validate_risk_bands(DEFAULT_RISK_BANDS if bands is None else bands)

    if isinstance(overall_score, bool) or not 0 <= overall_score <= 100:
        raise ValidationError(f"overall score {overall_score!r} is outside [0, 100]")

    for band in table:
        if band.lower <= overall_score < band.upper:
            return band.level
    return table[-1].level


#------------------------------------------------------------------------------
# Composite
#------------------------------------------------------------------------------

@log_execution_time(logger)
def score(
    answers: AnswerSet,
    catalog: QuestionCatalog,
    config: Optional[ScoringConfig] = None
) -> ScoringResult:
    """
    Score one complete answer set.

    Args:
        answers: Answers as ``Answer`` objects or a ``{question_id: value}`` mapping
        catalog: The active question catalog
        config: Weights and risk bands; defaults to equal weights and the default bands

    Returns:
        The immutable scoring result

    Raises:
        ScoringError: Any of the engine errors; no result is produced
    """
    config = config or ScoringConfig()

    category_scores = compute_category_scores(answers, catalog)
    overall = compute_overall_score(category_scores, config.weights, config.weight_tolerance)
    risk_level = classify_risk(overall, config.risk_bands)

    logger.debug(
        f"Scored {len(catalog)} answers: overall={overall} risk={risk_level.value} "
        f"categories={category_scores}"
    )
    return ScoringResult(
        overall_score=overall,
        category_scores=category_scores,
        risk_level=risk_level
    )
