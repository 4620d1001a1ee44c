"""Quadrant Classifier for the Knowledge-Passion matrix.

Each skill is classified on its own: knowledge and passion are read as
"high" only when strictly above the midpoint, so a rating of exactly 5 is
low on that axis.
"""

from dataclasses import dataclass
from typing import Optional

from .config import QuadrantConfig, get_config
from .schema import Quadrant, Skill, SkillClassification


@dataclass(frozen=True)
class QuadrantInfo:
    """Display text for a quadrant."""
    name: str
    description: str
    recommendation: str


QUADRANT_INFO: dict[Quadrant, QuadrantInfo] = {
    Quadrant.GROWTH: QuadrantInfo(
        name="Growth Zone",
        description="High Knowledge + High Passion",
        recommendation=(
            "These are your sweet spots! Leverage these skills for maximum "
            "impact and career growth."
        ),
    ),
    Quadrant.DEVELOPMENT: QuadrantInfo(
        name="Development Zone",
        description="Low Knowledge + High Passion",
        recommendation=(
            "You love these but need to build competence. Invest in learning "
            "and development here."
        ),
    ),
    Quadrant.SURVIVOR: QuadrantInfo(
        name="Survivor Zone",
        description="High Knowledge + Low Passion",
        recommendation=(
            "You're good at these but they drain you. Minimize or delegate "
            "when possible."
        ),
    ),
    Quadrant.WEED_OFF: QuadrantInfo(
        name="Weed Off Zone",
        description="Low Knowledge + Low Passion",
        recommendation=(
            "Neither skilled nor interested. Actively avoid or deprioritize "
            "these tasks."
        ),
    ),
}


def classify_quadrant(
    knowledge: float,
    passion: float,
    cfg: Optional[QuadrantConfig] = None,
) -> Quadrant:
    """Classify a (knowledge, passion) point."""
    midpoint = (cfg or get_config().quadrant).midpoint
    high_knowledge = knowledge > midpoint
    high_passion = passion > midpoint

    if high_knowledge and high_passion:
        return Quadrant.GROWTH
    if high_passion:
        return Quadrant.DEVELOPMENT
    if high_knowledge:
        return Quadrant.SURVIVOR
    return Quadrant.WEED_OFF


def classify_skill(skill: Skill, cfg: Optional[QuadrantConfig] = None) -> SkillClassification:
    quadrant = classify_quadrant(skill.knowledge, skill.passion, cfg)
    info = QUADRANT_INFO[quadrant]
    return SkillClassification(
        skill=skill,
        quadrant=quadrant,
        label=quadrant.label,
        zone=info.name,
        recommendation=info.recommendation,
    )


def group_by_quadrant(
    skills: list[Skill],
    cfg: Optional[QuadrantConfig] = None,
) -> dict[Quadrant, list[Skill]]:
    """Group skills by quadrant. Every quadrant is present, skills keep input order."""
    groups: dict[Quadrant, list[Skill]] = {q: [] for q in Quadrant}
    for skill in skills:
        groups[classify_quadrant(skill.knowledge, skill.passion, cfg)].append(skill)
    return groups


class SkillMatrix:
    """A participant's list of skills being rated on the matrix.

    Additions beyond the cap and blank names are ignored; ratings are clamped
    to the axis range.
    """

    def __init__(self, skills: Optional[list[Skill]] = None, cfg: Optional[QuadrantConfig] = None):
        self.cfg = cfg or get_config().quadrant
        self.skills: list[Skill] = list(skills or [])
        self._next_id = len(self.skills) + 1

    def add_skill(self, name: str) -> Optional[Skill]:
        name = name.strip()
        if not name or len(self.skills) >= self.cfg.max_skills:
            return None
        existing = {s.id for s in self.skills}
        while f"skill-{self._next_id}" in existing:
            self._next_id += 1
        skill = Skill(
            id=f"skill-{self._next_id}",
            name=name,
            knowledge=self.cfg.default_rating,
            passion=self.cfg.default_rating,
        )
        self._next_id += 1
        self.skills.append(skill)
        return skill

    def remove_skill(self, skill_id: str) -> None:
        self.skills = [s for s in self.skills if s.id != skill_id]

    def rate(self, skill_id: str, knowledge: Optional[float] = None, passion: Optional[float] = None) -> None:
        """Update one or both ratings of a skill."""
        updates = {}
        if knowledge is not None:
            updates["knowledge"] = self._clamp(knowledge)
        if passion is not None:
            updates["passion"] = self._clamp(passion)
        self.skills = [
            s.model_copy(update=updates) if s.id == skill_id else s
            for s in self.skills
        ]

    def can_proceed_to_rating(self) -> bool:
        return len(self.skills) >= self.cfg.min_skills

    def classify(self) -> list[SkillClassification]:
        return [classify_skill(s, self.cfg) for s in self.skills]

    def groups(self) -> dict[Quadrant, list[Skill]]:
        return group_by_quadrant(self.skills, self.cfg)

    def _clamp(self, value: float) -> float:
        return min(max(value, 0), self.cfg.scale_max)
