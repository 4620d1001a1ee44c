"""Dimension Aggregator - second stage of the scoring pipeline.

Sums response contributions per dimension, derives a percentage and a
qualitative level from the fixed four-bucket scale, then rolls weighted
dimension scores into a grand total.
"""

import math
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .config import DimensionLevelsConfig, ScaleConfig, get_config
from .response_scorer import score_response
from .schema import Dimension, DimensionScore, Instrument, Response


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def percentage(score: float, max_score: float) -> int:
    """Rounded percentage, defined as 0 when there is nothing to score against."""
    if max_score <= 0:
        return 0
    return round_half_up(score / max_score * 100)


def dimension_level(pct: float, levels: Optional[DimensionLevelsConfig] = None) -> str:
    """Label a dimension percentage with the fixed four-bucket scale."""
    levels = levels or get_config().dimension_levels
    if pct <= levels.low_max:
        return "Low"
    if pct <= levels.moderate_max:
        return "Moderate"
    if pct <= levels.high_max:
        return "High"
    return "Very High"


def calculate_dimension_score(
    instrument: Instrument,
    responses: Mapping[str, Response],
    dimension_key: str,
    question_ids: list[str],
    scale: Optional[ScaleConfig] = None,
) -> DimensionScore:
    """Sum contributions for one dimension.

    Question ids that do not resolve, and question types that are not scored,
    leave both score and maximum untouched.
    """
    total = 0.0
    max_total = 0.0

    for question_id in question_ids:
        question = instrument.get_question(question_id)
        if question is None:
            continue
        contribution = score_response(question, responses.get(question_id), scale)
        if contribution is None:
            continue
        total += contribution.score
        max_total += contribution.max_score

    pct = percentage(total, max_total)
    return DimensionScore(
        dimension=dimension_key,
        score=total,
        max_score=max_total,
        percentage=pct,
        level=dimension_level(pct),
    )


@dataclass
class AggregateTotals:
    """Weighted roll-up of every dimension of an instrument."""
    dimension_scores: list[DimensionScore] = field(default_factory=list)
    weighted_score: float = 0.0
    weighted_max_score: float = 0.0

    @property
    def percentage(self) -> float:
        """Unrounded grand percentage used for threshold classification."""
        if self.weighted_max_score <= 0:
            return 0.0
        return self.weighted_score / self.weighted_max_score * 100


def weight_dimension(score: DimensionScore, dimension: Dimension) -> DimensionScore:
    """Report score/max_score scaled by the dimension weight.

    Percentage and level stay those of the unweighted dimension.
    """
    return score.model_copy(update={
        "score": round_half_up(score.score * dimension.weight),
        "max_score": round_half_up(score.max_score * dimension.weight),
    })


def aggregate_dimensions(
    instrument: Instrument,
    responses: Mapping[str, Response],
    scale: Optional[ScaleConfig] = None,
) -> AggregateTotals:
    """Score every configured dimension and accumulate weighted totals."""
    totals = AggregateTotals()

    for dimension in instrument.scoring_config.dimensions:
        score = calculate_dimension_score(
            instrument, responses, dimension.key, dimension.question_ids, scale
        )
        totals.dimension_scores.append(weight_dimension(score, dimension))
        totals.weighted_score += score.score * dimension.weight
        totals.weighted_max_score += score.max_score * dimension.weight

    return totals
