"""Tests for per-question scoring."""

import pytest

from assessment_scorer.config import ScaleConfig
from assessment_scorer.response_scorer import (
    is_scored_type,
    reverse_likert,
    score_response,
)
from assessment_scorer.schema import (
    Question,
    QuestionOption,
    QuestionType,
    QuestionValidation,
    Response,
)


def likert(qid: str = "q1", reverse: bool = False) -> Question:
    return Question(
        id=qid,
        type=QuestionType.LIKERT,
        text="Statement",
        scoring={"dimension": "d", "weight": 1, "reverseScored": reverse},
    )


def answer(qid: str, value) -> Response:
    return Response(question_id=qid, value=value)


class TestLikert:
    """Tests for scaled-agreement questions."""

    def test_plain_value(self):
        result = score_response(likert(), answer("q1", 4))
        assert result.score == 4
        assert result.max_score == 5

    @pytest.mark.parametrize("raw,expected", [(1, 5), (2, 4), (3, 3), (4, 2), (5, 1)])
    def test_reverse_scoring(self, raw, expected):
        result = score_response(likert(reverse=True), answer("q1", raw))
        assert result.score == expected
        assert result.max_score == 5

    @pytest.mark.parametrize("v", [1, 2, 3, 4, 5])
    def test_reverse_symmetry(self, v):
        """Reversed v scores like plain 6-v, and reversed 6-v like plain v."""
        reversed_q = likert(reverse=True)
        plain_q = likert()
        assert score_response(reversed_q, answer("q1", v)).score == score_response(plain_q, answer("q1", 6 - v)).score
        assert score_response(reversed_q, answer("q1", 6 - v)).score == score_response(plain_q, answer("q1", v)).score

    def test_reverse_is_self_inverse(self):
        for v in range(1, 6):
            assert reverse_likert(reverse_likert(v)) == v
        assert reverse_likert(3) == 3

    def test_missing_response_keeps_denominator(self):
        result = score_response(likert(), None)
        assert result.score == 0
        assert result.max_score == 5

    def test_non_numeric_value_scores_zero(self):
        result = score_response(likert(), answer("q1", "agree"))
        assert result.score == 0
        assert result.max_score == 5

    def test_custom_scale(self):
        scale = ScaleConfig(likert_min=1, likert_max=7)
        result = score_response(likert(reverse=True), answer("q1", 2), scale)
        assert result.score == 6
        assert result.max_score == 7


class TestRatingScale:
    """Tests for rating-scale questions."""

    def test_uses_validation_max(self):
        q = Question(id="r", type=QuestionType.RATING_SCALE, validation=QuestionValidation(max=10))
        result = score_response(q, answer("r", 7))
        assert result.score == 7
        assert result.max_score == 10

    def test_defaults_to_hundred(self):
        q = Question(id="r", type=QuestionType.RATING_SCALE)
        result = score_response(q, answer("r", 42))
        assert result.score == 42
        assert result.max_score == 100

    def test_missing_response(self):
        q = Question(id="r", type=QuestionType.RATING_SCALE)
        result = score_response(q, None)
        assert result.score == 0
        assert result.max_score == 100

    def test_reverse_scoring_rejected(self):
        with pytest.raises(ValueError):
            Question(
                id="r",
                type=QuestionType.RATING_SCALE,
                scoring={"dimension": "d", "reverse_scored": True},
            )


class TestSingleSelect:
    """Tests for single-choice questions."""

    @pytest.fixture
    def question(self):
        return Question(
            id="s",
            type=QuestionType.SINGLE_SELECT,
            options=[
                QuestionOption(id="a", label="A", value=1),
                QuestionOption(id="b", label="B", value=3),
                QuestionOption(id="c", label="C", value="text"),
            ],
        )

    def test_numeric_option_value(self, question):
        result = score_response(question, answer("s", "b"))
        assert result.score == 3
        assert result.max_score == 3  # number of options

    def test_string_option_value_scores_zero(self, question):
        result = score_response(question, answer("s", "c"))
        assert result.score == 0
        assert result.max_score == 3

    def test_unknown_option(self, question):
        assert score_response(question, answer("s", "zzz")).score == 0

    def test_no_options_falls_back(self):
        q = Question(id="s", type=QuestionType.SINGLE_SELECT)
        assert score_response(q, None).max_score == 5


class TestUnscoredTypes:
    """Data-collection types contribute nothing at all."""

    @pytest.mark.parametrize("qtype", [
        QuestionType.MULTI_SELECT,
        QuestionType.OPEN_TEXT,
        QuestionType.RANKING,
        QuestionType.MATRIX,
        QuestionType.WEIGHTED_SELECTION,
    ])
    def test_returns_none(self, qtype):
        q = Question(id="x", type=qtype)
        assert score_response(q, answer("x", "something")) is None
        assert not is_scored_type(qtype)

    @pytest.mark.parametrize("qtype", [
        QuestionType.LIKERT,
        QuestionType.RATING_SCALE,
        QuestionType.SINGLE_SELECT,
    ])
    def test_scored_types(self, qtype):
        assert is_scored_type(qtype)
