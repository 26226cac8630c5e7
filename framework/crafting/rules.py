"""
Crafting rules - tier-table helpers for downtime crafting and research.

All helpers are pure and read the shared tier order. Unknown tier keys
never pass a gate and earn no points.

Locked tables:
- Points per downtime day (CP or RP) by tier: 1,1,2,2,3,3,4,5,6,7
- Daily cap: base points * 2
- Batch crafting: skill tier at least two above the recipe tier
- Mastery: (tier index + 1) * 5 successful crafts at a mastery tier
- Critical failure with mana invested: 1d6 per 25 mana, per type
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional

from engine.core.numeric import ZERO, floor_int, non_negative_decimal, parse_decimal
from framework.crafting.policies import (
    DEFAULT_MANA_ROUNDING,
    BatchPolicy,
    ManaRoundingPolicy,
    UnlockedBatchPolicy,
)
from framework.mana.types import normalize_identifier
from framework.tiers import Tier, tier_index

logger = logging.getLogger(__name__)


POINTS_PER_DOWNTIME_DAY: Mapping[Tier, int] = MappingProxyType({
    Tier.NORMAL: 1,
    Tier.INITIATE: 1,
    Tier.NOVICE: 2,
    Tier.APPRENTICE: 2,
    Tier.JOURNEYMAN: 3,
    Tier.ADEPT: 3,
    Tier.MASTER: 4,
    Tier.GRANDMASTER: 5,
    Tier.AVATAR: 6,
    Tier.ASCENDANT: 7,
})

DAILY_POINT_CAP_MULTIPLIER = 2
BATCH_MIN_TIER_DELTA = 2
MASTERY_CRAFTS_PER_TIER_STEP = 5
MANA_PER_EXPLOSION_DIE = 25

# Outcomes that count as a successful craft for recipe mastery
MASTERY_OUTCOMES = frozenset({"success", "crit", "critical", "partial"})


def points_per_downtime_day(tier: Tier | str | None) -> int:
    """Base crafting or research points earned per downtime day."""
    parsed = Tier.parse(tier)
    if parsed is None:
        return 0
    return POINTS_PER_DOWNTIME_DAY[parsed]


def daily_points_with_cap(tier: Tier | str | None, bonus: Any = 0) -> Decimal:
    """
    Points for one downtime day after workstation/assistant bonuses.

    The total is capped at twice the base and never goes below zero.
    """
    base = Decimal(points_per_downtime_day(tier))
    cap = base * DAILY_POINT_CAP_MULTIPLIER
    total = base + parse_decimal(bonus)
    return max(ZERO, min(total, cap))


def meets_recipe_tier_gates(
    recipe_tier: Tier | str | None,
    actor_tier: Tier | str | None,
    crafting_skill_tier: Tier | str | None,
    research_tier: Tier | str | None = None,
) -> bool:
    """
    Check the tier gates for a recipe.

    The character and the crafting skill must both reach the recipe
    tier. The research tier is checked only when given (it gates
    learning the recipe, not crafting it).
    """
    required = tier_index(recipe_tier)
    if required < 0:
        return False
    if tier_index(actor_tier) < required:
        return False
    if tier_index(crafting_skill_tier) < required:
        return False
    if research_tier is not None and tier_index(research_tier) < required:
        return False
    return True


def can_batch_craft(recipe_tier: Tier | str | None, crafting_skill_tier: Tier | str | None) -> bool:
    recipe = tier_index(recipe_tier)
    skill = tier_index(crafting_skill_tier)
    if recipe < 0 or skill < 0:
        return False
    return skill - recipe >= BATCH_MIN_TIER_DELTA


def mastery_crafts_required(mastery_tier: Tier | str | None) -> Optional[int]:
    """Successful crafts needed at a mastery tier (Normal = 5), None if unknown."""
    index = tier_index(mastery_tier)
    if index < 0:
        return None
    return (index + 1) * MASTERY_CRAFTS_PER_TIER_STEP


def counts_toward_mastery(outcome: str | None) -> bool:
    """Success and partial success count toward mastery; failures do not."""
    if outcome is None:
        return False
    return normalize_identifier(outcome) in MASTERY_OUTCOMES


def effective_research_cost(rp_cost: Any, has_found_source: bool = False) -> Decimal:
    """Research point cost, halved when a physical source was found."""
    cost = non_negative_decimal(rp_cost)
    if has_found_source:
        return cost / 2
    return cost


def daily_mana_cost(
    mana: Mapping[Any, Any] | None,
    days: Any,
    rounding: ManaRoundingPolicy | str | None = None,
) -> Optional[dict[str, Decimal]]:
    """
    Mana paid per downtime day, per mana type.

    Args:
        mana: Total mana by type, e.g. {"fire": 50}
        days: Downtime days the craft takes
        rounding: Rounding for fractional results (no rounding by default).
            Unknown policies log a warning and fall back to the default.

    Returns:
        Per-type daily mana, or None when no mana is due
    """
    total_days = parse_decimal(days)
    if not mana or total_days <= 0:
        return None

    try:
        policy = ManaRoundingPolicy.parse(rounding)
    except ValueError:
        logger.warning(f"Unknown mana rounding {rounding!r}; using {DEFAULT_MANA_ROUNDING.value}")
        policy = DEFAULT_MANA_ROUNDING

    daily: dict[str, Decimal] = {}
    for mana_type, total in mana.items():
        amount = parse_decimal(total)
        if amount <= 0:
            continue
        daily[normalize_identifier(mana_type)] = policy.apply(amount / total_days)

    return daily or None


def explosion_dice(mana_invested: Mapping[Any, Any] | None) -> dict[str, int]:
    """
    d6 count per mana type for a critical failure explosion.

    {"fire": 50, "water": 30} -> {"fire": 2, "water": 1}
    """
    dice: dict[str, int] = {}
    for mana_type, invested in (mana_invested or {}).items():
        count = floor_int(non_negative_decimal(invested) / MANA_PER_EXPLOSION_DIE)
        if count > 0:
            dice[normalize_identifier(mana_type)] = count
    return dice


@dataclass(frozen=True)
class BatchPlan:
    """Size and total cost of an eligible batch craft."""
    size: int
    cost: Decimal


def plan_batch(
    recipe_tier: Tier | str | None,
    crafting_skill_tier: Tier | str | None,
    base_cost: Any,
    policy: Optional[BatchPolicy] = None,
) -> Optional[BatchPlan]:
    """
    Plan a batch craft.

    Returns None when the skill is not far enough above the recipe.
    Eligible batches defer to ``policy`` for size and cost; the default
    policy raises NotImplementedError.
    """
    if not can_batch_craft(recipe_tier, crafting_skill_tier):
        logger.debug(f"Batch not allowed: recipe {recipe_tier!r}, skill {crafting_skill_tier!r}")
        return None

    policy = policy or UnlockedBatchPolicy()
    recipe = Tier.parse(recipe_tier)
    skill = Tier.parse(crafting_skill_tier)
    size = policy.batch_size(recipe, skill)
    cost = policy.batch_cost(non_negative_decimal(base_cost), size)
    return BatchPlan(size=size, cost=cost)
