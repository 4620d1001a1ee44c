"""Threshold Classifier - final stage of the scoring pipeline.

Maps an overall value onto an instrument's threshold table. A value that
falls into a gap of the table is not an error: it classifies as "Unknown"
with no recommendation.
"""

import logging
from typing import Optional

from .config import get_config
from .schema import DimensionScore, Threshold, ThresholdMatch

logger = logging.getLogger(__name__)

UNKNOWN_LEVEL = "Unknown"


def classify(value: float, thresholds: list[Threshold]) -> ThresholdMatch:
    """Return the first threshold whose inclusive range contains the value."""
    for threshold in thresholds:
        if threshold.contains(value):
            return ThresholdMatch(
                level=threshold.level,
                description=threshold.description,
                recommendation=threshold.recommendation,
            )

    logger.debug("Value %s matched no threshold of %d", value, len(thresholds))
    return ThresholdMatch(level=UNKNOWN_LEVEL)


def attention_callouts(
    dimension_scores: list[DimensionScore],
    attention_percentage: Optional[int] = None,
) -> list[str]:
    """One call-out per dimension whose percentage exceeds the attention cut point."""
    if attention_percentage is None:
        attention_percentage = get_config().dimension_levels.attention_percentage
    return [
        f"High score in {score.dimension} - this area needs attention."
        for score in dimension_scores
        if score.percentage > attention_percentage
    ]


def build_recommendations(
    match: ThresholdMatch,
    dimension_scores: list[DimensionScore],
) -> list[str]:
    """Base recommendation of the matched threshold followed by dimension call-outs."""
    recommendations = []
    if match.recommendation:
        recommendations.append(match.recommendation)
    recommendations.extend(attention_callouts(dimension_scores))
    return recommendations


def find_coverage_issues(
    thresholds: list[Threshold],
    range_min: float,
    range_max: float,
) -> list[str]:
    """Describe gaps and overlaps of a threshold table over a declared range.

    Thresholds are treated as integer-bounded when every bound is whole, so
    [0, 25] followed by [26, 50] is contiguous.
    """
    issues: list[str] = []
    if not thresholds:
        return ["No thresholds defined"]

    ordered = sorted(thresholds, key=lambda t: (t.min, t.max))
    integral = all(float(t.min).is_integer() and float(t.max).is_integer() for t in ordered)
    step = 1 if integral else 0

    for t in ordered:
        if t.min > t.max:
            issues.append(f"Threshold '{t.level}' has min {t.min} above max {t.max}")

    if ordered[0].min > range_min:
        issues.append(f"Gap below '{ordered[0].level}': {range_min} to {ordered[0].min}")

    for prev, cur in zip(ordered, ordered[1:]):
        if cur.min <= prev.max:
            issues.append(f"Thresholds '{prev.level}' and '{cur.level}' overlap")
        elif cur.min > prev.max + step:
            issues.append(f"Gap between '{prev.level}' and '{cur.level}': {prev.max} to {cur.min}")

    highest = max(t.max for t in ordered)
    if highest < range_max:
        issues.append(f"Gap above {highest} up to {range_max}")

    return issues
