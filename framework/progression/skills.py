"""
Skill system - skill definitions and the skill catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Iterator, Optional

from engine.resources.database import Database
from framework.components.character import Attribute, SubAttribute, attribute_of
from framework.config import DEFAULT_RULES, RulesConfig


class SkillCategory(Enum):
    """Skill categories."""
    GENERAL = auto()
    CRAFTING = auto()
    RESEARCH = auto()


# Crafting and research skills feed their sub-attribute at a reduced rate
REDUCED_RATE_CATEGORIES = frozenset({SkillCategory.CRAFTING, SkillCategory.RESEARCH})


SKILL_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Skill definition",
    "type": "object",
    "required": ["id", "name"],
    "additionalProperties": False,
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "category": {
            "type": "string",
            "enum": [c.name.lower() for c in SkillCategory] + [c.name for c in SkillCategory],
        },
        "governs": {"enum": [sub.value for sub in SubAttribute]},
        "is_advanced": {"type": "boolean"},
        "attr_rate_mod": {"type": "number", "minimum": 0},
    },
}


@dataclass
class SkillDefinition:
    """
    Complete definition of a skill.

    ``attr_rate_mod`` left as None means "use the rules default for the
    category": the configured crafting rate for crafting and research
    skills, 1.0 for everything else.
    """
    id: str
    name: str
    description: str = ""
    category: SkillCategory = SkillCategory.GENERAL

    # Sub-attribute raised on rank-up
    governs: Optional[SubAttribute] = None

    # Advanced skills stay locked until the unlock tier
    is_advanced: bool = False

    attr_rate_mod: Optional[float] = None

    @property
    def attribute(self) -> Optional[Attribute]:
        if self.governs is None:
            return None
        return attribute_of(self.governs)

    def effective_rate_mod(self, rules: RulesConfig | None = None) -> float:
        """Attribute advancement rate applied to this skill's rank-ups."""
        if self.attr_rate_mod is not None:
            return max(0.0, self.attr_rate_mod)
        rules = rules or DEFAULT_RULES
        if self.category in REDUCED_RATE_CATEGORIES:
            return rules.crafting_attr_rate_mod
        return 1.0


CRAFTING_SKILLS: tuple[SkillDefinition, ...] = (
    SkillDefinition("smithing", "Smithing", "Forging arms, armor and metal goods.",
                    SkillCategory.CRAFTING, SubAttribute.MIGHT),
    SkillDefinition("alchemy", "Alchemy", "Brewing potions, elixirs and reagents.",
                    SkillCategory.CRAFTING, SubAttribute.INSIGHT),
    SkillDefinition("textiles", "Textiles", "Weaving, tailoring and leatherwork.",
                    SkillCategory.CRAFTING, SubAttribute.INSIGHT),
    SkillDefinition("cooking", "Cooking", "Preparing meals and provisions.",
                    SkillCategory.CRAFTING, SubAttribute.FORTITUDE),
    SkillDefinition("jeweler", "Jeweler", "Cutting gems and setting jewelry.",
                    SkillCategory.CRAFTING, SubAttribute.FOCUS),
    SkillDefinition("engineering", "Engineering", "Building devices and mechanisms.",
                    SkillCategory.CRAFTING, SubAttribute.INSIGHT),
)

RECIPE_RESEARCH_SKILL = SkillDefinition(
    "recipe_research", "Recipe Research", "Discovering new recipes during downtime.",
    SkillCategory.RESEARCH, SubAttribute.FOCUS,
)


class SkillManager:
    """
    Manages skill definitions.
    """

    def __init__(
        self,
        data_path: str = "data",
        database: Optional[Database] = None,
        include_defaults: bool = True,
    ):
        self.data_path = Path(data_path)
        self._database = database or Database(self.data_path)
        if self._database.get_schema("skill") is None:
            self._database.register_schema("skill", SKILL_SCHEMA)
        self._skills: dict[str, SkillDefinition] = {}
        self.logger = logging.getLogger(__name__)

        if include_defaults:
            self.load_default_skills()

    def register_skill(self, skill: SkillDefinition) -> None:
        """Register (or replace) a skill definition."""
        if skill.id in self._skills:
            self.logger.debug(f"Replacing skill definition: {skill.id}")
        self._skills[skill.id] = skill

    def load_default_skills(self) -> None:
        """Register the crafting skills and recipe research."""
        for skill in CRAFTING_SKILLS:
            self.register_skill(skill)
        self.register_skill(RECIPE_RESEARCH_SKILL)

    def load_skills(self, filename: str = "skills.json") -> int:
        """
        Load skill definitions from JSON.

        Entries failing the schema are skipped (see Database.load_entries).

        Returns:
            Number of skills loaded
        """
        entries = self._database.load_entries(filename, "skill", "skills")

        for skill_data in entries.values():
            governs = skill_data.get('governs')
            skill = SkillDefinition(
                id=skill_data['id'],
                name=skill_data['name'],
                description=skill_data.get('description', ''),
                category=SkillCategory[skill_data.get('category', 'GENERAL').upper()],
                governs=SubAttribute(governs) if governs else None,
                is_advanced=skill_data.get('is_advanced', False),
                attr_rate_mod=skill_data.get('attr_rate_mod'),
            )
            self.register_skill(skill)

        return len(entries)

    def get_skill(self, skill_id: str) -> Optional[SkillDefinition]:
        """Get a skill definition."""
        return self._skills.get(skill_id)

    def require_skill(self, skill_id: str) -> SkillDefinition:
        """Get a skill definition, raising KeyError if it is unknown."""
        skill = self._skills.get(skill_id)
        if skill is None:
            self.logger.warning(f"Unknown skill id: {skill_id}")
            raise KeyError(f"Unknown skill: {skill_id}")
        return skill

    def skills_governing(self, sub: SubAttribute | str) -> list[SkillDefinition]:
        """All skills that raise the given sub-attribute."""
        parsed = SubAttribute.parse(sub)
        if parsed is None:
            return []
        return [s for s in self._skills.values() if s.governs is parsed]

    def get_skills_by_category(self, category: SkillCategory) -> list[SkillDefinition]:
        return [s for s in self._skills.values() if s.category is category]

    def __contains__(self, skill_id: object) -> bool:
        return skill_id in self._skills

    def __iter__(self) -> Iterator[SkillDefinition]:
        return iter(self._skills.values())

    def __len__(self) -> int:
        return len(self._skills)
