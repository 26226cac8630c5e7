"""
Crafting module - downtime crafting and research helpers.

Provides:
- Tier-table helpers (points per day, gates, mastery, explosion dice)
- Policy hooks for per-day mana rounding and batch sizing
"""

from framework.crafting.policies import (
    BatchPolicy,
    DEFAULT_MANA_ROUNDING,
    ManaRoundingPolicy,
    UnlockedBatchPolicy,
)
from framework.crafting.rules import (
    BatchPlan,
    POINTS_PER_DOWNTIME_DAY,
    can_batch_craft,
    counts_toward_mastery,
    daily_mana_cost,
    daily_points_with_cap,
    effective_research_cost,
    explosion_dice,
    mastery_crafts_required,
    meets_recipe_tier_gates,
    plan_batch,
    points_per_downtime_day,
)

__all__ = [
    # Policies
    "BatchPolicy",
    "DEFAULT_MANA_ROUNDING",
    "ManaRoundingPolicy",
    "UnlockedBatchPolicy",
    # Rules
    "BatchPlan",
    "POINTS_PER_DOWNTIME_DAY",
    "can_batch_craft",
    "counts_toward_mastery",
    "daily_mana_cost",
    "daily_points_with_cap",
    "effective_research_cost",
    "explosion_dice",
    "mastery_crafts_required",
    "meets_recipe_tier_gates",
    "plan_batch",
    "points_per_downtime_day",
]
