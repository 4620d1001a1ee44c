"""Scoring Engine - entry point tying the pipeline together.

Instrument + Responses -> Response Scorer -> Dimension Aggregator ->
Threshold Classifier -> AssessmentResult.

The pipeline itself is pure. File access happens only here, when loading an
instrument or a response list.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from .aggregator import aggregate_dimensions, round_half_up
from .classifier import build_recommendations, classify, find_coverage_issues
from .instruments import UnknownInstrumentError, load_builtin_instrument
from .response_scorer import is_scored_type
from .schema import AssessmentResult, Instrument, Response

logger = logging.getLogger(__name__)

ResponsesInput = Union[Iterable[Union[Response, Mapping[str, Any]]], Mapping[str, Any]]


class InstrumentLoadError(ValueError):
    """Raised when an instrument document cannot be read or is invalid."""


# =============================================================================
# Inputs
# =============================================================================


def normalize_responses(responses: ResponsesInput) -> dict[str, Response]:
    """Key responses by question id; the last response for a question wins.

    Accepts Response objects, dicts in the Response shape, or a plain
    ``{question_id: value}`` mapping. A mapping may also hold Response
    objects, as returned by ``load_responses_file``. Nothing is timestamped
    here, so identical input always yields identical responses.
    """
    if isinstance(responses, Mapping):
        return {
            qid: value if isinstance(value, Response) else Response(question_id=qid, value=value)
            for qid, value in responses.items()
        }

    by_question: dict[str, Response] = {}
    for item in responses:
        response = item if isinstance(item, Response) else Response.model_validate(item)
        by_question[response.question_id] = response
    return by_question


def _read_document(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(f)
        return json.load(f)


def load_instrument_file(path: Union[str, Path]) -> Instrument:
    """Load an instrument document from a YAML or JSON file.

    Raises:
        InstrumentLoadError: If the file is unreadable or not a valid instrument.
    """
    path = Path(path)
    try:
        data = _read_document(path)
        instrument = Instrument.model_validate(data)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise InstrumentLoadError(f"Cannot read instrument {path}: {e}") from e
    except ValidationError as e:
        raise InstrumentLoadError(f"Invalid instrument {path}: {e}") from e

    logger.info("Loaded instrument %s (%s) from %s", instrument.code, instrument.name, path)
    return instrument


def load_responses_file(path: Union[str, Path]) -> dict[str, Response]:
    """Load responses from a JSON or YAML file (list of responses or id->value mapping)."""
    data = _read_document(Path(path))
    return normalize_responses(data or [])


# =============================================================================
# Scoring
# =============================================================================


def calculate_assessment_result(
    instrument: Instrument,
    responses: ResponsesInput,
    user_id: str,
    assessment_id: Optional[str] = None,
) -> AssessmentResult:
    """Run the full scoring pipeline.

    Missing responses, unknown question ids and threshold gaps never raise;
    they lower the score or yield an "Unknown" level.

    Args:
        instrument: The instrument definition
        responses: Answers given so far (last answer per question wins)
        user_id: Participant id copied into the result
        assessment_id: Defaults to the instrument id

    Returns:
        AssessmentResult with per-dimension and overall scores
    """
    by_question = normalize_responses(responses)
    totals = aggregate_dimensions(instrument, by_question)

    match = classify(totals.percentage, instrument.scoring_config.thresholds)
    recommendations = build_recommendations(match, totals.dimension_scores)

    return AssessmentResult(
        assessment_id=assessment_id or instrument.id,
        user_id=user_id,
        responses=list(by_question.values()),
        dimension_scores=totals.dimension_scores,
        total_score=round_half_up(totals.weighted_score),
        total_max_score=round_half_up(totals.weighted_max_score),
        overall_level=match.level,
        recommendations=recommendations,
    )


# =============================================================================
# Validation
# =============================================================================


def validate_instrument(instrument: Instrument) -> tuple[bool, list[str]]:
    """Report configuration defects of an instrument without raising.

    Checks threshold coverage of the declared score range, dimension question
    ids that do not resolve, and dimensions with nothing to score.
    """
    issues: list[str] = []
    config = instrument.scoring_config
    score_range = config.total_score_range

    issues.extend(find_coverage_issues(config.thresholds, score_range.min, score_range.max))

    question_ids = {q.id for q in instrument.questions}
    for dimension in config.dimensions:
        missing = [qid for qid in dimension.question_ids if qid not in question_ids]
        if missing:
            issues.append(f"Dimension '{dimension.key}' references unknown questions: {', '.join(missing)}")
        scored = [
            qid for qid in dimension.question_ids
            if qid in question_ids and is_scored_type(instrument.get_question(qid).type)
        ]
        if not scored:
            issues.append(f"Dimension '{dimension.key}' has no scored questions")
        if dimension.weight < 0:
            issues.append(f"Dimension '{dimension.key}' has negative weight {dimension.weight}")

    return len(issues) == 0, issues


def validate_instrument_file(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Validate an instrument document on disk."""
    try:
        instrument = load_instrument_file(path)
    except InstrumentLoadError as e:
        return False, [str(e)]
    return validate_instrument(instrument)


class ScoringEngine:
    """Facade over the scoring pipeline for one loaded instrument."""

    def __init__(self, instrument: Optional[Instrument] = None):
        self.instrument = instrument

    def load_instrument(self, source: Union[str, Path]) -> Instrument:
        """Load an instrument from a file path or a built-in id/code."""
        path = Path(source)
        if path.exists():
            self.instrument = load_instrument_file(path)
        else:
            try:
                self.instrument = load_builtin_instrument(str(source))
            except UnknownInstrumentError:
                raise InstrumentLoadError(
                    f"'{source}' is neither an instrument file nor a built-in instrument"
                ) from None
        return self.instrument

    def score(
        self,
        responses: Union[ResponsesInput, str, Path],
        user_id: str = "anonymous",
        assessment_id: Optional[str] = None,
    ) -> AssessmentResult:
        """Score responses (or a responses file) against the loaded instrument."""
        if self.instrument is None:
            raise RuntimeError("No instrument loaded. Call load_instrument() first.")
        if isinstance(responses, (str, Path)):
            responses = load_responses_file(responses)
        return calculate_assessment_result(self.instrument, responses, user_id, assessment_id)

    def validate(self) -> tuple[bool, list[str]]:
        if self.instrument is None:
            return False, ["No instrument loaded"]
        return validate_instrument(self.instrument)
