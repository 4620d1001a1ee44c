"""BBD (Bored / Burned out / Dissatisfied) flat scorer.

A lighter path than the generic pipeline: raw answer values are summed by
question-id prefix and the raw total is bucketed directly. It does not use
dimension mappings, weights or the instrument's threshold table.
"""

from typing import Iterable, Mapping, Optional, Union

from .config import BBDConfig, get_config
from .schema import BBDResult, Response


def bbd_level(total: float, cfg: Optional[BBDConfig] = None) -> str:
    """Severity label for a raw BBD total."""
    cfg = cfg or get_config().bbd
    if total <= cfg.low_max:
        return "Low"
    if total <= cfg.moderate_max:
        return "Moderate"
    if total <= cfg.high_max:
        return "High"
    return "Critical"


def _answers(responses: Union[Iterable[Response], Mapping[str, object]]) -> dict[str, object]:
    if isinstance(responses, Mapping):
        return dict(responses)
    # Last answer for a question wins
    return {r.question_id: r.value for r in responses}


def calculate_bbd_score(
    responses: Union[Iterable[Response], Mapping[str, object]],
    cfg: Optional[BBDConfig] = None,
) -> BBDResult:
    """Score BBD answers.

    Args:
        responses: Response objects or a plain ``{question_id: value}`` mapping

    Returns:
        Per-group raw sums, their total and the severity level
    """
    cfg = cfg or get_config().bbd
    sums = {"bored": 0.0, "burned_out": 0.0, "dissatisfied": 0.0}
    prefixes = {
        "bored": cfg.bored_prefix,
        "burned_out": cfg.burned_out_prefix,
        "dissatisfied": cfg.dissatisfied_prefix,
    }

    for question_id, value in _answers(responses).items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        for group, prefix in prefixes.items():
            if question_id.startswith(prefix):
                sums[group] += value

    total = sums["bored"] + sums["burned_out"] + sums["dissatisfied"]
    return BBDResult(
        bored=sums["bored"],
        burned_out=sums["burned_out"],
        dissatisfied=sums["dissatisfied"],
        total=total,
        level=bbd_level(total, cfg),
    )
