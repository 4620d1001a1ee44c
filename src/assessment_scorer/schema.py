"""Pydantic models for the Assessment Scoring Engine.

Input schemas describe an instrument (sections, questions, scoring config)
and the participant's responses. Output schemas are derived results that are
rebuilt on every scoring run and never mutated in place.

Instrument documents may use camelCase keys (``reverseScored``,
``questionIds``, ``scoringConfig``...) or the snake_case field names.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


ResponseValue = Union[int, float, str, list[Union[int, float, str]]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Enums
# =============================================================================


class QuestionType(str, Enum):
    """Question type tag. Drives which scoring variant applies."""
    LIKERT = "likert"  # Scaled agreement, 1-5
    RATING_SCALE = "rating-scale"
    SINGLE_SELECT = "single-select"
    MULTI_SELECT = "multi-select"
    OPEN_TEXT = "open-text"
    RANKING = "ranking"
    MATRIX = "matrix"
    WEIGHTED_SELECTION = "weighted-selection"

    def has_fixed_range(self) -> bool:
        """Check if answers to this type live on a fixed, known numeric range."""
        return self is QuestionType.LIKERT


class InstrumentCategory(str, Enum):
    """Catalog category of an instrument."""
    ASSESSMENT = "assessment"
    WORKBOOK = "workbook"
    FRAMEWORK = "framework"
    REPORT = "report"
    EXERCISE = "exercise"


class Quadrant(str, Enum):
    """Knowledge x passion quadrant."""
    GROWTH = "growth"  # High knowledge, high passion
    DEVELOPMENT = "development"  # Low knowledge, high passion
    SURVIVOR = "survivor"  # High knowledge, low passion
    WEED_OFF = "weed_off"  # Low knowledge, low passion

    @property
    def label(self) -> str:
        return {
            Quadrant.GROWTH: "Growth",
            Quadrant.DEVELOPMENT: "Development",
            Quadrant.SURVIVOR: "Survivor",
            Quadrant.WEED_OFF: "Weed Off",
        }[self]


class ValuesStep(str, Enum):
    """Steps of the work-values prioritization wizard, in order."""
    INTRO = "intro"
    SELECT_10 = "select-10"
    SELECT_5 = "select-5"
    WEIGHT = "weight"
    ALIGN = "align"
    REFLECT = "reflect"

    @classmethod
    def ordered(cls) -> list["ValuesStep"]:
        return list(cls)


# =============================================================================
# Instrument Model
# =============================================================================


class QuestionOption(BaseModel):
    """A choice offered by a select-type question."""
    id: str
    label: str
    value: Union[int, float, str]
    description: Optional[str] = None


class QuestionValidation(BaseModel):
    """Validation bounds. Enforced by the form collaborator, not the engine."""
    model_config = ConfigDict(populate_by_name=True)

    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    pattern: Optional[str] = None


class QuestionScoring(BaseModel):
    """Per-question scoring metadata."""
    model_config = ConfigDict(populate_by_name=True)

    dimension: str
    weight: float = 1.0
    reverse_scored: bool = Field(default=False, alias="reverseScored")


class Question(BaseModel):
    """A single question within a section."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: QuestionType
    text: str = ""
    help_text: Optional[str] = Field(default=None, alias="helpText")
    required: bool = False
    options: list[QuestionOption] = Field(default_factory=list)
    validation: Optional[QuestionValidation] = None
    scoring: Optional[QuestionScoring] = None

    @model_validator(mode="after")
    def _check_reverse_scoring(self) -> "Question":
        if self.scoring and self.scoring.reverse_scored and not self.type.has_fixed_range():
            raise ValueError(
                f"Question '{self.id}' is reverse-scored but type "
                f"'{self.type.value}' has no fixed numeric range"
            )
        return self

    @property
    def is_reverse_scored(self) -> bool:
        return bool(self.scoring and self.scoring.reverse_scored)


class Section(BaseModel):
    """Ordered group of questions. Purely organizational."""
    id: str
    title: str
    description: Optional[str] = None
    questions: list[Question] = Field(default_factory=list)


class Dimension(BaseModel):
    """A named sub-scale aggregating a subset of questions."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    key: str
    description: str = ""
    weight: float = 1.0
    question_ids: list[str] = Field(default_factory=list, alias="questionIds")


class Threshold(BaseModel):
    """One labeled range of the instrument's threshold table (inclusive)."""
    level: str
    min: float
    max: float
    description: str = ""
    recommendation: str = ""

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class ScoreRange(BaseModel):
    """Declared total-score range."""
    min: float = 0
    max: float = 100


class ScoringConfig(BaseModel):
    """Dimensions, thresholds and declared total range of an instrument."""
    model_config = ConfigDict(populate_by_name=True)

    dimensions: list[Dimension] = Field(default_factory=list)
    thresholds: list[Threshold] = Field(default_factory=list)
    total_score_range: ScoreRange = Field(default_factory=ScoreRange, alias="totalScoreRange")


class Instrument(BaseModel):
    """Static description of an assessment. Treated as immutable during scoring."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    code: str
    name: str
    description: str = ""
    category: InstrumentCategory = InstrumentCategory.ASSESSMENT
    estimated_time: int = Field(default=0, alias="estimatedTime", description="Minutes")
    sections: list[Section] = Field(default_factory=list)
    scoring_config: ScoringConfig = Field(default_factory=ScoringConfig, alias="scoringConfig")

    @property
    def questions(self) -> list[Question]:
        """All questions, flattened in section order."""
        return [q for section in self.sections for q in section.questions]

    def get_question(self, question_id: str) -> Optional[Question]:
        """Look up a question by id."""
        return next((q for q in self.questions if q.id == question_id), None)


class Response(BaseModel):
    """A participant's answer to one question. Replaced, never edited."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    question_id: str = Field(alias="questionId")
    value: ResponseValue
    timestamp: Optional[datetime] = Field(default=None, description="When answered, if the caller recorded it")


# =============================================================================
# Scoring and Output Models
# =============================================================================


class ResponseContribution(BaseModel):
    """What one question adds to its dimension's score and denominator."""
    model_config = ConfigDict(frozen=True)

    score: float = 0
    max_score: float = 0


class DimensionScore(BaseModel):
    """Per-dimension result."""
    model_config = ConfigDict(frozen=True)

    dimension: str
    score: float
    max_score: float
    percentage: int = Field(..., description="Unweighted percentage, rounded")
    level: str


class ThresholdMatch(BaseModel):
    """Outcome of classifying a value against a threshold table."""
    level: str
    description: Optional[str] = None
    recommendation: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.recommendation is not None


class AssessmentResult(BaseModel):
    """Complete output of the generic scoring pipeline."""
    assessment_id: str
    user_id: str
    responses: list[Response] = Field(default_factory=list)
    dimension_scores: list[DimensionScore] = Field(default_factory=list)
    total_score: int = 0
    total_max_score: int = 0
    overall_level: str = "Unknown"
    recommendations: list[str] = Field(default_factory=list)
    completed_at: datetime = Field(default_factory=_utcnow)


class BBDResult(BaseModel):
    """Flat result of the BBD prefix-grouped scorer."""
    bored: float = 0
    burned_out: float = 0
    dissatisfied: float = 0
    total: float = 0
    level: str


class AlignedValue(BaseModel):
    """A core value with its alignment rating."""
    value: str
    score: float


class ValuesAlignmentResult(BaseModel):
    """Outcome of the work-values alignment scoring."""
    alignment_score: int
    level: str = "Unknown"
    top_aligned: list[AlignedValue] = Field(default_factory=list)
    low_aligned: list[AlignedValue] = Field(default_factory=list)


class Skill(BaseModel):
    """A skill entry of the knowledge-passion matrix (both axes 0-10)."""
    id: str
    name: str
    knowledge: float = 5
    passion: float = 5


class SkillClassification(BaseModel):
    """A skill and the quadrant it falls into."""
    skill: Skill
    quadrant: Quadrant
    label: str = Field(..., description='Quadrant name, e.g. "Weed Off"')
    zone: str
    recommendation: str
