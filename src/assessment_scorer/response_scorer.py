"""Response Scorer - first stage of the scoring pipeline.

Turns one question plus its (optional) response into a score contribution and
a maximum possible contribution. Each question type has its own scoring
function; types used only for data collection map to ``None`` and are skipped
by the aggregator rather than counted as zero.
"""

from typing import Callable, Optional

from .config import ScaleConfig, get_config
from .schema import Question, QuestionType, Response, ResponseContribution


ScoringFunction = Callable[[Question, Optional[Response], ScaleConfig], ResponseContribution]


def _numeric(value) -> Optional[float]:
    # bool is an int subclass but never a valid score
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def reverse_likert(value: float, scale: Optional[ScaleConfig] = None) -> float:
    """Invert a likert answer around the scale midpoint (5->1, 3->3, 1->5)."""
    scale = scale or get_config().scales
    return (scale.likert_min + scale.likert_max) - value


def score_likert(
    question: Question,
    response: Optional[Response],
    scale: ScaleConfig,
) -> ResponseContribution:
    """Scaled-agreement answer. Missing answers still count toward the maximum."""
    value = _numeric(response.value) if response is not None else None
    if value is None:
        return ResponseContribution(score=0, max_score=scale.likert_max)

    if question.is_reverse_scored:
        value = reverse_likert(value, scale)

    return ResponseContribution(score=value, max_score=scale.likert_max)


def score_rating_scale(
    question: Question,
    response: Optional[Response],
    scale: ScaleConfig,
) -> ResponseContribution:
    """Raw numeric rating against validation.max (or the default maximum)."""
    max_score = scale.rating_scale_default_max
    if question.validation and question.validation.max:
        max_score = question.validation.max

    value = _numeric(response.value) if response is not None else None
    return ResponseContribution(score=value or 0, max_score=max_score)


def score_single_select(
    question: Question,
    response: Optional[Response],
    scale: ScaleConfig,
) -> ResponseContribution:
    """Chosen option's numeric value over the number of options."""
    max_score = len(question.options) or scale.single_select_default_options

    score = 0
    if response is not None:
        option = next((o for o in question.options if o.id == response.value), None)
        if option is not None:
            score = _numeric(option.value) or 0

    return ResponseContribution(score=score, max_score=max_score)


SCORERS: dict[QuestionType, Optional[ScoringFunction]] = {
    QuestionType.LIKERT: score_likert,
    QuestionType.RATING_SCALE: score_rating_scale,
    QuestionType.SINGLE_SELECT: score_single_select,
    # Data collection only
    QuestionType.MULTI_SELECT: None,
    QuestionType.OPEN_TEXT: None,
    QuestionType.RANKING: None,
    QuestionType.MATRIX: None,
    QuestionType.WEIGHTED_SELECTION: None,
}


def is_scored_type(question_type: QuestionType) -> bool:
    """Check if a question type contributes to aggregate scores."""
    return SCORERS.get(question_type) is not None


def score_response(
    question: Question,
    response: Optional[Response],
    scale: Optional[ScaleConfig] = None,
) -> Optional[ResponseContribution]:
    """Score one question.

    Args:
        question: The question being scored
        response: The participant's response, or None if unanswered
        scale: Scale assumptions (defaults to the global config)

    Returns:
        The contribution, or None when the question type is not scored
    """
    scorer = SCORERS.get(question.type)
    if scorer is None:
        return None
    return scorer(question, response, scale or get_config().scales)
