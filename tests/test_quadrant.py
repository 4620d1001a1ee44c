"""Tests for the knowledge-passion quadrant classifier."""

import pytest

from assessment_scorer.config import QuadrantConfig
from assessment_scorer.quadrant import (
    QUADRANT_INFO,
    SkillMatrix,
    classify_quadrant,
    classify_skill,
    group_by_quadrant,
)
from assessment_scorer.schema import Quadrant, Skill


class TestClassifyQuadrant:
    """Tests for point classification."""

    def test_midpoint_is_low(self):
        assert classify_quadrant(5, 5) is Quadrant.WEED_OFF

    def test_just_above_midpoint_is_high(self):
        assert classify_quadrant(5.01, 5.01) is Quadrant.GROWTH

    @pytest.mark.parametrize("knowledge,passion,quadrant", [
        (9, 9, Quadrant.GROWTH),
        (2, 8, Quadrant.DEVELOPMENT),
        (8, 2, Quadrant.SURVIVOR),
        (1, 1, Quadrant.WEED_OFF),
        (5, 6, Quadrant.DEVELOPMENT),
        (6, 5, Quadrant.SURVIVOR),
        (0, 10, Quadrant.DEVELOPMENT),
    ])
    def test_all_quadrants(self, knowledge, passion, quadrant):
        assert classify_quadrant(knowledge, passion) is quadrant

    def test_custom_midpoint(self):
        assert classify_quadrant(6, 6, QuadrantConfig(midpoint=7)) is Quadrant.WEED_OFF

    def test_labels(self):
        assert Quadrant.WEED_OFF.label == "Weed Off"
        assert QUADRANT_INFO[Quadrant.GROWTH].name == "Growth Zone"

    def test_classify_skill(self):
        result = classify_skill(Skill(id="s1", name="Python", knowledge=8, passion=3))
        assert result.quadrant is Quadrant.SURVIVOR
        assert result.label == "Survivor"
        assert result.zone == "Survivor Zone"
        assert result.recommendation == QUADRANT_INFO[Quadrant.SURVIVOR].recommendation


class TestGrouping:
    """Tests for grouping skills by quadrant."""

    def test_every_quadrant_present(self):
        groups = group_by_quadrant([])
        assert set(groups) == set(Quadrant)
        assert all(members == [] for members in groups.values())

    def test_input_order_kept(self):
        skills = [
            Skill(id="a", name="A", knowledge=9, passion=9),
            Skill(id="b", name="B", knowledge=1, passion=1),
            Skill(id="c", name="C", knowledge=7, passion=8),
        ]
        groups = group_by_quadrant(skills)
        assert [s.id for s in groups[Quadrant.GROWTH]] == ["a", "c"]
        assert [s.id for s in groups[Quadrant.WEED_OFF]] == ["b"]


class TestSkillMatrix:
    """Tests for building and rating a skill list."""

    def test_new_skills_start_at_midpoint(self):
        matrix = SkillMatrix()
        skill = matrix.add_skill("  Negotiation ")
        assert skill.name == "Negotiation"
        assert (skill.knowledge, skill.passion) == (5, 5)
        classification = matrix.classify()[0]
        assert classification.quadrant is Quadrant.WEED_OFF
        assert classification.label == "Weed Off"

    def test_blank_name_ignored(self):
        matrix = SkillMatrix()
        assert matrix.add_skill("   ") is None
        assert matrix.skills == []

    def test_cap_of_twenty(self):
        matrix = SkillMatrix()
        for i in range(20):
            assert matrix.add_skill(f"Skill {i}") is not None
        assert matrix.add_skill("One too many") is None
        assert len(matrix.skills) == 20

    def test_minimum_before_rating(self):
        matrix = SkillMatrix()
        for i in range(4):
            matrix.add_skill(f"Skill {i}")
        assert not matrix.can_proceed_to_rating()
        matrix.add_skill("Fifth")
        assert matrix.can_proceed_to_rating()

    def test_ids_unique_after_removal(self):
        matrix = SkillMatrix()
        first = matrix.add_skill("First")
        matrix.add_skill("Second")
        matrix.remove_skill(first.id)
        third = matrix.add_skill("Third")
        assert third.id == "skill-3"
        assert [s.id for s in matrix.skills] == ["skill-2", "skill-3"]

    def test_ids_skip_existing(self):
        matrix = SkillMatrix([Skill(id="skill-2", name="Existing")])
        added = matrix.add_skill("New")
        assert added.id == "skill-3"

    def test_rating_clamped(self):
        matrix = SkillMatrix()
        skill = matrix.add_skill("Design")
        matrix.rate(skill.id, knowledge=12, passion=-1)
        rated = matrix.skills[0]
        assert (rated.knowledge, rated.passion) == (10, 0)
        assert matrix.classify()[0].quadrant is Quadrant.SURVIVOR

    def test_rate_one_axis(self):
        matrix = SkillMatrix()
        skill = matrix.add_skill("Design")
        matrix.rate(skill.id, passion=9)
        assert (matrix.skills[0].knowledge, matrix.skills[0].passion) == (5, 9)
        assert matrix.groups()[Quadrant.DEVELOPMENT][0].name == "Design"
