"""Tests for dimension aggregation and weighted roll-up."""

import pytest

from assessment_scorer.aggregator import (
    aggregate_dimensions,
    calculate_dimension_score,
    dimension_level,
    percentage,
    round_half_up,
)
from assessment_scorer.engine import normalize_responses
from assessment_scorer.schema import Instrument


def make_instrument(dimensions, questions) -> Instrument:
    return Instrument.model_validate({
        "id": "test",
        "code": "TEST-001",
        "name": "Test Instrument",
        "sections": [{"id": "s1", "title": "Section", "questions": questions}],
        "scoringConfig": {
            "dimensions": dimensions,
            "thresholds": [
                {"level": "Low", "min": 0, "max": 25},
                {"level": "Moderate", "min": 26, "max": 50},
                {"level": "High", "min": 51, "max": 75},
                {"level": "Critical", "min": 76, "max": 100},
            ],
        },
    })


def likert(qid, dimension="d1", reverse=False):
    return {
        "id": qid,
        "type": "likert",
        "text": qid,
        "scoring": {"dimension": dimension, "weight": 1, "reverseScored": reverse},
    }


class TestPercentage:
    """Tests for percentage computation."""

    def test_zero_denominator(self):
        assert percentage(0, 0) == 0
        assert percentage(5, 0) == 0

    @pytest.mark.parametrize("score,max_score", [(0, 10), (3, 7), (7, 7), (1, 3), (2, 3), (99, 100)])
    def test_bounded_when_score_within_max(self, score, max_score):
        assert 0 <= percentage(score, max_score) <= 100

    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(62.5) == 63
        assert round_half_up(0.49) == 0
        assert percentage(1, 8) == 13  # 12.5


class TestDimensionLevel:
    """Tests for the fixed four-bucket level scale."""

    @pytest.mark.parametrize("pct,level", [
        (0, "Low"),
        (25, "Low"),
        (26, "Moderate"),
        (50, "Moderate"),
        (51, "High"),
        (75, "High"),
        (76, "Very High"),
        (100, "Very High"),
    ])
    def test_buckets(self, pct, level):
        assert dimension_level(pct) == level


class TestDimensionScore:
    """Tests for per-dimension aggregation."""

    def test_two_agree_answers(self):
        """One dimension, two likert questions both answered 4."""
        instrument = make_instrument(
            [{"name": "D1", "key": "d1", "weight": 1, "questionIds": ["q1", "q2"]}],
            [likert("q1"), likert("q2")],
        )
        responses = normalize_responses({"q1": 4, "q2": 4})

        score = calculate_dimension_score(instrument, responses, "d1", ["q1", "q2"])

        assert score.score == 8
        assert score.max_score == 10
        assert score.percentage == 80
        assert score.level == "Very High"

    def test_missing_response_depresses_score(self):
        instrument = make_instrument([], [likert("q1"), likert("q2")])
        responses = normalize_responses({"q1": 5})

        score = calculate_dimension_score(instrument, responses, "d1", ["q1", "q2"])

        assert score.score == 5
        assert score.max_score == 10
        assert score.percentage == 50

    def test_unknown_question_id_is_skipped(self):
        instrument = make_instrument([], [likert("q1")])
        responses = normalize_responses({"q1": 5, "ghost": 5})

        score = calculate_dimension_score(instrument, responses, "d1", ["q1", "ghost"])

        assert score.score == 5
        assert score.max_score == 5

    def test_unscored_type_does_not_inflate_denominator(self):
        instrument = make_instrument(
            [],
            [likert("q1"), {"id": "t1", "type": "open-text", "text": "Why?"}],
        )
        responses = normalize_responses({"q1": 3, "t1": "Because"})

        score = calculate_dimension_score(instrument, responses, "d1", ["q1", "t1"])

        assert score.max_score == 5
        assert score.percentage == 60

    def test_empty_dimension(self):
        instrument = make_instrument([], [])
        score = calculate_dimension_score(instrument, {}, "d1", [])
        assert score.percentage == 0
        assert score.level == "Low"

    def test_reverse_scored_question(self):
        instrument = make_instrument([], [likert("q1"), likert("q2", reverse=True)])
        responses = normalize_responses({"q1": 5, "q2": 1})

        score = calculate_dimension_score(instrument, responses, "d1", ["q1", "q2"])

        assert score.score == 10
        assert score.percentage == 100


class TestWeightedRollup:
    """Tests for weighting dimensions into the grand total."""

    def test_weights_scale_totals(self):
        instrument = make_instrument(
            [
                {"name": "A", "key": "a", "weight": 1, "questionIds": ["a1", "a2"]},
                {"name": "B", "key": "b", "weight": 0.5, "questionIds": ["b1", "b2"]},
            ],
            [likert("a1", "a"), likert("a2", "a"), likert("b1", "b"), likert("b2", "b")],
        )
        responses = normalize_responses({"a1": 5, "a2": 5, "b1": 1, "b2": 2})

        totals = aggregate_dimensions(instrument, responses)

        # a: 10/10, b: 3/10 weighted to 1.5/5
        assert totals.weighted_score == pytest.approx(11.5)
        assert totals.weighted_max_score == pytest.approx(15)
        assert totals.percentage == pytest.approx(100 * 11.5 / 15)

        a, b = totals.dimension_scores
        assert (a.score, a.max_score, a.percentage) == (10, 10, 100)
        # Reported score is weighted and rounded; percentage stays unweighted
        assert (b.score, b.max_score, b.percentage) == (2, 5, 30)
        assert b.level == "Moderate"

    def test_zero_weighted_max(self):
        instrument = make_instrument(
            [{"name": "A", "key": "a", "weight": 0, "questionIds": ["a1"]}],
            [likert("a1", "a")],
        )
        totals = aggregate_dimensions(instrument, normalize_responses({"a1": 5}))
        assert totals.percentage == 0
