"""Centralized configuration management for the assessment scorer.

Scale bounds and fixed cut points live here as named values shared by all
modules. They are separate from the threshold tables carried by each
instrument document.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class ScaleConfig(BaseModel):
    """Numeric scale assumptions used by the response scorer."""
    likert_min: int = Field(1, description="Lowest answer on a likert question")
    likert_max: int = Field(5, description="Highest answer on a likert question")
    rating_scale_default_max: float = Field(
        100,
        description="Denominator for rating-scale questions without validation.max"
    )
    single_select_default_options: int = Field(
        5,
        description="Denominator for single-select questions that declare no options"
    )


class DimensionLevelsConfig(BaseModel):
    """Fixed four-bucket scale used to label each dimension.

    Percentages at or below a cut point take that bucket's label.
    """
    low_max: int = Field(25, description="Upper bound (inclusive) of 'Low'")
    moderate_max: int = Field(50, description="Upper bound (inclusive) of 'Moderate'")
    high_max: int = Field(75, description="Upper bound (inclusive) of 'High'")
    attention_percentage: int = Field(
        70,
        description="Dimensions strictly above this percentage get a call-out recommendation"
    )


class BBDConfig(BaseModel):
    """Prefix grouping and raw-total cut points for the BBD flat scorer."""
    bored_prefix: str = "bored-"
    burned_out_prefix: str = "burnout-"
    dissatisfied_prefix: str = "dissatisfied-"
    low_max: float = Field(15, description="Raw totals at or below this are 'Low'")
    moderate_max: float = Field(30, description="Raw totals at or below this are 'Moderate'")
    high_max: float = Field(45, description="Raw totals at or below this are 'High'")


class ValuesWorkflowConfig(BaseModel):
    """Selection caps and defaults for the work-values wizard."""
    top_count: int = Field(10, description="Values to pick in the first selection step")
    core_count: int = Field(5, description="Core values to pick from the top selection")
    weight_total: int = Field(100, description="Required sum of core value weights")
    default_weight: int = Field(20, description="Weight assumed for an unweighted core value")
    default_alignment: int = Field(50, description="Alignment assumed for an unrated core value")
    highlight_count: int = Field(3, description="Values listed as top/low aligned")


class QuadrantConfig(BaseModel):
    """Knowledge-passion matrix settings."""
    midpoint: float = Field(5, description="Axis values strictly above this read as high")
    scale_max: float = Field(10, description="Top of both axes")
    default_rating: float = Field(5, description="Initial knowledge/passion for a new skill")
    min_skills: int = Field(5, description="Skills required before rating")
    max_skills: int = Field(20, description="Maximum skills in one matrix")


class ScorerConfig(BaseModel):
    """Complete configuration for the assessment scorer."""
    scales: ScaleConfig = Field(default_factory=ScaleConfig)
    dimension_levels: DimensionLevelsConfig = Field(default_factory=DimensionLevelsConfig)
    bbd: BBDConfig = Field(default_factory=BBDConfig)
    values_workflow: ValuesWorkflowConfig = Field(default_factory=ValuesWorkflowConfig)
    quadrant: QuadrantConfig = Field(default_factory=QuadrantConfig)


ENV_VAR = "ASSESSMENT_SCORER_CONFIG"
LOCAL_CONFIG_NAMES = ("scorer-config.yaml", "scorer-config.yml")
USER_CONFIG_PATH = Path(".config") / "assessment-scorer" / "config.yaml"

# Active config; None until first use
_config: Optional[ScorerConfig] = None


def get_config() -> ScorerConfig:
    """Scale bounds and cut points every scoring module reads.

    Falls back to the built-in defaults when no file has been loaded.
    """
    global _config
    if _config is None:
        _config = ScorerConfig()
    return _config


def load_config(path: Path) -> ScorerConfig:
    """Replace the active config with the one in a YAML file.

    Sections missing from the file keep their defaults, so a file holding
    only ``bbd:`` cut points leaves likert bounds and workflow caps alone.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    _config = ScorerConfig.model_validate(data or {})
    return _config


def reset_config() -> None:
    """Go back to the built-in defaults (1-5 likert, 15/30/45 BBD, midpoint 5)."""
    global _config
    _config = ScorerConfig()


def _candidate_paths() -> list[Path]:
    candidates = []
    env_path = os.environ.get(ENV_VAR)
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(Path(name) for name in LOCAL_CONFIG_NAMES)
    candidates.append(Path.home() / USER_CONFIG_PATH)
    return candidates


def find_config_file() -> Optional[Path]:
    """First existing scorer config: $ASSESSMENT_SCORER_CONFIG, then
    ./scorer-config.yaml or .yml, then ~/.config/assessment-scorer/config.yaml.
    """
    return next((path for path in _candidate_paths() if path.exists()), None)


def _section_comments() -> str:
    lines = []
    for name, field in ScorerConfig.model_fields.items():
        model = field.default_factory
        summary = (model.__doc__ or "").strip().splitlines()[0]
        lines.append(f"#   {name}: {summary}")
    return "\n".join(lines)


def save_default_config(path: Path) -> None:
    """Write the default scorer configuration to a commented YAML file."""
    header = (
        "# Assessment Scorer Configuration\n"
        "#\n"
        "# Sections:\n"
        f"{_section_comments()}\n"
        "#\n"
        "# Instrument threshold tables are not configured here; they belong\n"
        "# to each instrument document.\n"
        "#\n"
        f"# Looked up via ${ENV_VAR}, ./{LOCAL_CONFIG_NAMES[0]} or ~/{USER_CONFIG_PATH.as_posix()}\n"
        "\n"
    )
    body = yaml.dump(ScorerConfig().model_dump(), default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(header + body)
