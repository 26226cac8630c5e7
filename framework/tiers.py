"""
Tier tables - the ten ordered proficiency bands.

Characters, skills and recipe mastery tracks all share one tier order.
Every gate in the rules is a ``>=`` comparison on that order.

Locked tables:
- Skill rank cap per tier
- Tier modifier (% points added to the governing sub-attribute per
  skill rank-up)
- Starting tier for abilities by mana category
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Tier(str, Enum):
    """Canonical tiers, lowest first."""
    NORMAL = "normal"
    INITIATE = "initiate"
    NOVICE = "novice"
    APPRENTICE = "apprentice"
    JOURNEYMAN = "journeyman"
    ADEPT = "adept"
    MASTER = "master"
    GRANDMASTER = "grandmaster"
    AVATAR = "avatar"
    ASCENDANT = "ascendant"

    @property
    def index(self) -> int:
        return TIER_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value.title()

    @classmethod
    def parse(cls, value: "Tier | str | None") -> "Tier | None":
        """Return the matching tier, or None for an unknown key."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


TIER_ORDER: tuple[Tier, ...] = tuple(Tier)

SKILL_RANK_CAPS: Mapping[Tier, int] = MappingProxyType({
    Tier.NORMAL: 3,
    Tier.INITIATE: 5,
    Tier.NOVICE: 7,
    Tier.APPRENTICE: 10,
    Tier.JOURNEYMAN: 13,
    Tier.ADEPT: 16,
    Tier.MASTER: 20,
    Tier.GRANDMASTER: 25,
    Tier.AVATAR: 30,
    Tier.ASCENDANT: 40,
})

TIER_MODIFIERS_PERCENT: Mapping[Tier, float] = MappingProxyType({
    Tier.NORMAL: 2.0,
    Tier.INITIATE: 1.75,
    Tier.NOVICE: 1.5,
    Tier.APPRENTICE: 1.25,
    Tier.JOURNEYMAN: 1.0,
    Tier.ADEPT: 0.9,
    Tier.MASTER: 0.8,
    Tier.GRANDMASTER: 0.7,
    Tier.AVATAR: 0.6,
    Tier.ASCENDANT: 0.5,
})

# Ability tier-ups feed sub-attributes at this fraction of the skill rate
ABILITY_ATTR_MOD = 0.5

ABILITY_START_TIERS: Mapping[str, Tier] = MappingProxyType({
    "base": Tier.NORMAL,
    "hybrid": Tier.APPRENTICE,
    "eldritch": Tier.MASTER,
})


def tier_index(tier: Tier | str | None) -> int:
    """Position in the canonical order (normal=0 ... ascendant=9), -1 if unknown."""
    parsed = Tier.parse(tier)
    if parsed is None:
        return -1
    return parsed.index


def is_valid_tier(tier: Tier | str | None) -> bool:
    return Tier.parse(tier) is not None


def tier_at_least(tier: Tier | str | None, required: Tier | str) -> bool:
    """True when ``tier`` has reached ``required``. Unknown tiers never pass."""
    current = tier_index(tier)
    target = tier_index(required)
    if current < 0 or target < 0:
        return False
    return current >= target


def max_rank_for_tier(tier: Tier | str | None) -> int:
    """Skill rank cap at a tier. Unknown tiers use the Normal cap."""
    parsed = Tier.parse(tier) or Tier.NORMAL
    return SKILL_RANK_CAPS[parsed]


def tier_modifier(tier: Tier | str | None) -> float:
    parsed = Tier.parse(tier) or Tier.NORMAL
    return TIER_MODIFIERS_PERCENT[parsed]


def skill_rank_up_bonus(tier: Tier | str | None, rate_mod: float = 1.0) -> float:
    """
    Sub-attribute % gained for one skill rank-up at a tier.

    Args:
        tier: Character tier when the rank was gained
        rate_mod: Advancement rate for the skill (0.5 for crafting)

    Returns:
        Percentage points, e.g. 1.25 means +1.25%
    """
    return tier_modifier(tier) * max(0.0, rate_mod)


def ability_tier_up_bonus(tier: Tier | str | None, attr_mod: float = ABILITY_ATTR_MOD) -> float:
    """Sub-attribute % gained for one ability tier-up at a tier."""
    return tier_modifier(tier) * max(0.0, attr_mod)


def ability_start_tier(category: str) -> Tier | None:
    """Starting tier for an ability of the given mana category."""
    return ABILITY_START_TIERS.get(str(category).strip().lower())
