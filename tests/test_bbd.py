"""Tests for the BBD flat scorer."""

import pytest

from assessment_scorer.bbd import bbd_level, calculate_bbd_score
from assessment_scorer.config import BBDConfig
from assessment_scorer.schema import Response


def answers(**groups) -> list[Response]:
    """Build responses like bored-1..bored-n from lists of values."""
    responses = []
    for group, values in groups.items():
        for i, value in enumerate(values, 1):
            responses.append(Response(question_id=f"{group}-{i}", value=value))
    return responses


class TestPrefixSums:
    """Tests for grouping raw answers by question-id prefix."""

    def test_groups_summed(self):
        result = calculate_bbd_score(answers(
            bored=[1, 2, 3, 4, 5],
            burnout=[2, 2, 2, 2, 2],
            dissatisfied=[5, 5, 5, 5, 5],
        ))
        assert result.bored == 15
        assert result.burned_out == 10
        assert result.dissatisfied == 25
        assert result.total == 50
        assert result.level == "Critical"

    def test_other_prefixes_ignored(self):
        result = calculate_bbd_score({"impact-1": 5, "reflection-1": "text", "bored-1": 3})
        assert result.total == 3

    def test_non_numeric_values_ignored(self):
        result = calculate_bbd_score({"bored-1": "often", "bored-2": [1, 2], "bored-3": True, "bored-4": 2})
        assert result.bored == 2

    def test_last_answer_wins(self):
        responses = [
            Response(question_id="bored-1", value=5),
            Response(question_id="bored-1", value=1),
        ]
        assert calculate_bbd_score(responses).bored == 1

    def test_empty(self):
        result = calculate_bbd_score([])
        assert result.total == 0
        assert result.level == "Low"


class TestSeverity:
    """Tests for raw-total severity cut points."""

    @pytest.mark.parametrize("total,level", [
        (0, "Low"),
        (15, "Low"),
        (16, "Moderate"),
        (30, "Moderate"),
        (31, "High"),
        (45, "High"),
        (46, "Critical"),
        (75, "Critical"),
    ])
    def test_cut_points(self, total, level):
        assert bbd_level(total) == level

    def test_custom_cut_points(self):
        cfg = BBDConfig(low_max=25, moderate_max=45, high_max=60)
        assert bbd_level(30, cfg) == "Moderate"
        assert bbd_level(61, cfg) == "Critical"

    def test_fractional_total(self):
        assert bbd_level(15.5) == "Moderate"
