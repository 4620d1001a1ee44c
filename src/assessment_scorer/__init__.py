"""Assessment scoring engine."""

from assessment_scorer.bbd import calculate_bbd_score
from assessment_scorer.engine import (
    InstrumentLoadError,
    ScoringEngine,
    calculate_assessment_result,
    validate_instrument,
)
from assessment_scorer.instruments import list_builtin_instruments, load_builtin_instrument
from assessment_scorer.quadrant import SkillMatrix, classify_quadrant
from assessment_scorer.values_workflow import (
    JsonFileStorage,
    InMemoryStorage,
    ValuesWorkflow,
    calculate_values_alignment,
)

__all__ = [
    "calculate_bbd_score",
    "InstrumentLoadError",
    "ScoringEngine",
    "calculate_assessment_result",
    "validate_instrument",
    "list_builtin_instruments",
    "load_builtin_instrument",
    "SkillMatrix",
    "classify_quadrant",
    "JsonFileStorage",
    "InMemoryStorage",
    "ValuesWorkflow",
    "calculate_values_alignment",
]
