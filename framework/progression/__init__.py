"""
Progression module - skills, ranks, rank caps.

Provides:
- Skill definitions and the skill catalog
- The advancement state machine (outcome -> rank-ups)
- A per-character tracker that applies sub-attribute bonuses
"""

from framework.progression.advancement import (
    OutcomeKind,
    OutcomeResult,
    ProgressionEvent,
    SkillProgress,
    apply_outcome,
    apply_outcomes,
    award_for,
    coerce_record,
    is_advanced_unlocked,
    is_capped,
    uses_remaining,
    uses_to_increase_rank,
)
from framework.progression.skills import (
    SkillManager,
    SkillDefinition,
    SkillCategory,
    CRAFTING_SKILLS,
    RECIPE_RESEARCH_SKILL,
)
from framework.progression.tracker import SkillTracker

__all__ = [
    # Advancement
    "OutcomeKind",
    "OutcomeResult",
    "ProgressionEvent",
    "SkillProgress",
    "apply_outcome",
    "apply_outcomes",
    "award_for",
    "coerce_record",
    "is_advanced_unlocked",
    "is_capped",
    "uses_remaining",
    "uses_to_increase_rank",
    # Skills
    "SkillManager",
    "SkillDefinition",
    "SkillCategory",
    "CRAFTING_SKILLS",
    "RECIPE_RESEARCH_SKILL",
    # Tracker
    "SkillTracker",
]
