"""Constrained Selection Workflow for the Work Values assessment.

The participant narrows a catalog of 16 work values down to a top 10, then a
core 5, weights the core values (weights must total exactly 100), rates how
well the current role honors each one and finally reflects in free text.

Invariant violations never raise. Selection caps make over-selection a no-op,
weight clamping makes it impossible to push the total above 100, and
``can_proceed()`` is the gate callers check before moving on. The whole
state is a pydantic model so it can be saved and restored verbatim through
an injected storage collaborator.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .aggregator import round_half_up
from .classifier import classify
from .config import ValuesWorkflowConfig, get_config
from .schema import AlignedValue, Threshold, ValuesAlignmentResult, ValuesStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkValue:
    """An entry of the work-values catalog."""
    id: str
    label: str
    description: str


WORK_VALUES: list[WorkValue] = [
    WorkValue("achievement", "Achievement", "Accomplishing goals and seeing results"),
    WorkValue("autonomy", "Autonomy", "Having independence and freedom in work"),
    WorkValue("balance", "Work-Life Balance", "Harmony between work and personal life"),
    WorkValue("challenge", "Challenge", "Solving complex problems and continuous learning"),
    WorkValue("collaboration", "Collaboration", "Working with others towards common goals"),
    WorkValue("compensation", "Compensation", "Fair pay and financial rewards"),
    WorkValue("creativity", "Creativity", "Expressing ideas and innovation"),
    WorkValue("growth", "Growth", "Opportunities for learning and advancement"),
    WorkValue("impact", "Impact", "Making a difference and contributing to society"),
    WorkValue("leadership", "Leadership", "Guiding others and influencing decisions"),
    WorkValue("recognition", "Recognition", "Being appreciated for contributions"),
    WorkValue("security", "Security", "Job stability and predictable future"),
    WorkValue("variety", "Variety", "Diverse tasks and changing responsibilities"),
    WorkValue("purpose", "Purpose", "Meaningful work aligned with personal values"),
    WorkValue("relationships", "Relationships", "Building connections with colleagues"),
    WorkValue("expertise", "Expertise", "Becoming an expert in your field"),
]


def get_value_label(value_id: str) -> str:
    """Display label for a catalog value id (the id itself if unknown)."""
    return next((v.label for v in WORK_VALUES if v.id == value_id), value_id)


# =============================================================================
# Persisted State
# =============================================================================


class Reflections(BaseModel):
    """Free-text answers of the reflect step. Never required."""
    gaps: str = ""
    ideal: str = ""


class ValuesWorkflowState(BaseModel):
    """Snapshot of a participant's progress through the wizard."""
    model_config = ConfigDict(populate_by_name=True)

    selected_top10: list[str] = Field(default_factory=list, alias="selectedTop10")
    selected_core5: list[str] = Field(default_factory=list, alias="selectedCore5")
    weights: dict[str, int] = Field(default_factory=dict)
    alignments: dict[str, int] = Field(default_factory=dict)
    reflections: Reflections = Field(default_factory=Reflections)
    current_step: ValuesStep = Field(default=ValuesStep.INTRO, alias="currentStep")


class WorkflowStorage(Protocol):
    """Where a workflow snapshot is kept between sessions. Last writer wins."""

    def save(self, state: ValuesWorkflowState) -> None: ...

    def load(self) -> Optional[ValuesWorkflowState]: ...

    def clear(self) -> None: ...


class InMemoryStorage:
    """Keeps the serialized snapshot in memory."""

    def __init__(self):
        self._blob: Optional[str] = None

    def save(self, state: ValuesWorkflowState) -> None:
        self._blob = state.model_dump_json(by_alias=True)

    def load(self) -> Optional[ValuesWorkflowState]:
        if self._blob is None:
            return None
        return ValuesWorkflowState.model_validate_json(self._blob)

    def clear(self) -> None:
        self._blob = None


class JsonFileStorage:
    """Keeps the snapshot in a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def save(self, state: ValuesWorkflowState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(state.model_dump(mode="json", by_alias=True), f, indent=2)
        logger.debug("Saved work-values progress to %s", self.path)

    def load(self) -> Optional[ValuesWorkflowState]:
        if not self.path.exists():
            return None
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return ValuesWorkflowState.model_validate(data)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


# =============================================================================
# Scoring
# =============================================================================


def _highlights(
    ratings: list[tuple[str, float]],
    count: int,
) -> tuple[list[AlignedValue], list[AlignedValue]]:
    # sorted() is stable, so equal ratings keep their input order
    ordered = sorted(ratings, key=lambda item: item[1], reverse=True)
    top = [AlignedValue(value=v, score=s) for v, s in ordered[:count]]
    low = [AlignedValue(value=v, score=s) for v, s in ordered[-count:]] if count else []
    return top, low


def _alignment_level(score: int, thresholds: Optional[list[Threshold]]) -> str:
    if thresholds is None:
        from .instruments import load_builtin_instrument
        thresholds = load_builtin_instrument("work-values").scoring_config.thresholds
    return classify(score, thresholds).level


def score_workflow(
    state: ValuesWorkflowState,
    thresholds: Optional[list[Threshold]] = None,
    cfg: Optional[ValuesWorkflowConfig] = None,
) -> ValuesAlignmentResult:
    """Weighted alignment of the core values: round(sum(weight/100 * alignment)).

    Unweighted core values count with the default weight and unrated ones with
    the default alignment.
    """
    cfg = cfg or get_config().values_workflow
    weighted_sum = 0.0
    ratings: list[tuple[str, float]] = []

    for value_id in state.selected_core5:
        weight = state.weights.get(value_id, cfg.default_weight)
        alignment = state.alignments.get(value_id, cfg.default_alignment)
        weighted_sum += weight / cfg.weight_total * alignment
        ratings.append((value_id, alignment))

    score = round_half_up(weighted_sum)
    top, low = _highlights(ratings, cfg.highlight_count)
    return ValuesAlignmentResult(
        alignment_score=score,
        level=_alignment_level(score, thresholds),
        top_aligned=top,
        low_aligned=low,
    )


def calculate_values_alignment(
    selected_values: list[str],
    value_ratings: dict[str, float],
    value_weights: dict[str, float],
    thresholds: Optional[list[Threshold]] = None,
    cfg: Optional[ValuesWorkflowConfig] = None,
) -> ValuesAlignmentResult:
    """Weighted average alignment, normalized by the weights actually present.

    Equals ``score_workflow`` when the weights total 100. Missing ratings and
    weights count as 0.
    """
    cfg = cfg or get_config().values_workflow
    weighted_sum = 0.0
    total_weight = 0.0
    ratings: list[tuple[str, float]] = []

    for value_id in selected_values:
        rating = value_ratings.get(value_id, 0)
        weight = value_weights.get(value_id, 0)
        weighted_sum += rating * (weight / cfg.weight_total)
        total_weight += weight / cfg.weight_total
        ratings.append((value_id, rating))

    score = round_half_up(weighted_sum / total_weight) if total_weight > 0 else 0
    top, low = _highlights(ratings, cfg.highlight_count)
    return ValuesAlignmentResult(
        alignment_score=score,
        level=_alignment_level(score, thresholds),
        top_aligned=top,
        low_aligned=low,
    )


# =============================================================================
# Workflow
# =============================================================================


class ValuesWorkflow:
    """Drives one participant through the work-values wizard.

    When a storage is given, every change made after the intro step is saved
    immediately; ``resume`` restores the last snapshot.
    """

    STEPS = ValuesStep.ordered()

    def __init__(
        self,
        state: Optional[ValuesWorkflowState] = None,
        storage: Optional[WorkflowStorage] = None,
        cfg: Optional[ValuesWorkflowConfig] = None,
    ):
        self.state = state or ValuesWorkflowState()
        self.storage = storage
        self.cfg = cfg or get_config().values_workflow
        self._catalog_ids = {v.id for v in WORK_VALUES}

    @classmethod
    def resume(
        cls,
        storage: WorkflowStorage,
        cfg: Optional[ValuesWorkflowConfig] = None,
    ) -> "ValuesWorkflow":
        """Restore from storage, or start fresh when nothing was saved."""
        state = storage.load()
        if state is not None:
            logger.info("Resuming work-values progress at step '%s'", state.current_step.value)
        return cls(state=state, storage=storage, cfg=cfg)

    # -- derived values -------------------------------------------------------

    @property
    def step(self) -> ValuesStep:
        return self.state.current_step

    @property
    def step_index(self) -> int:
        return self.STEPS.index(self.state.current_step)

    @property
    def progress(self) -> int:
        return round_half_up(self.step_index / (len(self.STEPS) - 1) * 100)

    @property
    def total_weight(self) -> int:
        return sum(self.state.weights.get(v, 0) for v in self.state.selected_core5)

    # -- selection ------------------------------------------------------------

    def toggle_top10(self, value_id: str) -> bool:
        """Select or deselect a catalog value. Returns whether anything changed.

        Deselecting also drops the value from the core selection.
        """
        state = self.state
        if value_id in state.selected_top10:
            state.selected_top10 = [v for v in state.selected_top10 if v != value_id]
            if value_id in state.selected_core5:
                self._set_core5([v for v in state.selected_core5 if v != value_id])
        elif value_id in self._catalog_ids and len(state.selected_top10) < self.cfg.top_count:
            state.selected_top10 = state.selected_top10 + [value_id]
        else:
            return False
        self._persist()
        return True

    def toggle_core5(self, value_id: str) -> bool:
        """Select or deselect a core value from the top selection."""
        state = self.state
        if value_id in state.selected_core5:
            self._set_core5([v for v in state.selected_core5 if v != value_id])
        elif value_id in state.selected_top10 and len(state.selected_core5) < self.cfg.core_count:
            self._set_core5(state.selected_core5 + [value_id])
        else:
            return False
        self._persist()
        return True

    def _set_core5(self, core: list[str]) -> None:
        self.state.selected_core5 = core
        if len(core) == self.cfg.core_count:
            previous = self.state.weights
            self.state.weights = {v: previous.get(v, self.cfg.default_weight) for v in core}

    # -- weighting and alignment ----------------------------------------------

    def set_weight(self, value_id: str, weight: int) -> Optional[int]:
        """Set a core value's weight, clamped so the total cannot exceed 100.

        Returns the weight actually stored, or None for a non-core value.
        """
        if value_id not in self.state.selected_core5:
            return None
        others = sum(
            self.state.weights.get(v, self.cfg.default_weight)
            for v in self.state.selected_core5
            if v != value_id
        )
        max_allowed = max(self.cfg.weight_total - others, 0)
        adjusted = min(max(int(weight), 0), max_allowed)
        self.state.weights = {**self.state.weights, value_id: adjusted}
        self._persist()
        return adjusted

    def set_alignment(self, value_id: str, rating: int) -> Optional[int]:
        """Rate how well the current role honors a core value (0-100)."""
        if value_id not in self.state.selected_core5:
            return None
        adjusted = min(max(int(rating), 0), 100)
        self.state.alignments = {**self.state.alignments, value_id: adjusted}
        self._persist()
        return adjusted

    def set_reflection(self, gaps: Optional[str] = None, ideal: Optional[str] = None) -> None:
        updates = {}
        if gaps is not None:
            updates["gaps"] = gaps
        if ideal is not None:
            updates["ideal"] = ideal
        self.state.reflections = self.state.reflections.model_copy(update=updates)
        self._persist()

    # -- navigation -----------------------------------------------------------

    def can_proceed(self) -> bool:
        """Gate for leaving the current step, evaluated from the current state."""
        state = self.state
        step = state.current_step
        if step is ValuesStep.SELECT_10:
            return len(state.selected_top10) == self.cfg.top_count
        if step is ValuesStep.SELECT_5:
            return len(state.selected_core5) == self.cfg.core_count
        if step is ValuesStep.WEIGHT:
            return self.total_weight == self.cfg.weight_total
        if step is ValuesStep.ALIGN:
            return all(v in state.alignments for v in state.selected_core5)
        return True

    def next(self) -> bool:
        """Advance one step if the gate allows it."""
        if self.step_index >= len(self.STEPS) - 1 or not self.can_proceed():
            return False
        self.state.current_step = self.STEPS[self.step_index + 1]
        self._persist()
        return True

    def back(self) -> bool:
        if self.step_index == 0:
            return False
        self.state.current_step = self.STEPS[self.step_index - 1]
        self._persist()
        return True

    def is_ready_to_submit(self) -> bool:
        return self.state.current_step is ValuesStep.REFLECT and self.can_proceed()

    def submit(self, thresholds: Optional[list[Threshold]] = None) -> Optional[ValuesAlignmentResult]:
        """Score the finished workflow and drop the saved progress.

        Returns None when the participant has not reached the last step.
        """
        if not self.is_ready_to_submit():
            return None
        result = score_workflow(self.state, thresholds, self.cfg)
        if self.storage is not None:
            self.storage.clear()
        return result

    # -- persistence ----------------------------------------------------------

    def save(self) -> None:
        if self.storage is not None:
            self.storage.save(self.state)

    def _persist(self) -> None:
        if self.state.current_step is not ValuesStep.INTRO:
            self.save()
