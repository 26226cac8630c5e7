"""
Mana module - resource types, combination graph, pool formulas.

Provides:
- Base / hybrid / eldritch type identifiers
- Order-independent combination lookups
- Locked pool scaling (percent bands, empowerment, averaging)
"""

from framework.mana.types import (
    ManaTier,
    BaseMana,
    HybridMana,
    EldritchMana,
    ManaType,
    SUB_ATTRIBUTE_TO_BASE_MANA,
    parse_mana,
    mana_tier_of,
    label_for,
)
from framework.mana.combinations import (
    HYBRID_COMBOS,
    ELDRITCH_COMBOS,
    pair_key,
    resolve_hybrid,
    resolve_eldritch,
    resolve_composite,
    hybrid_recipe,
    eldritch_recipe,
    eldritch_options,
)
from framework.mana.pools import (
    MANA_RULES,
    ManaRules,
    ManaPools,
    pool_from_percent,
    apply_tiered_bonus,
    aggregate_primitive,
    combine_two_values,
    calc_base_mana,
    calc_force_mana,
    calc_hybrid_mana,
    calc_eldritch_mana,
    calc_effectiveness_bonus,
    derive_mana_pools,
)

__all__ = [
    # Types
    "ManaTier",
    "BaseMana",
    "HybridMana",
    "EldritchMana",
    "ManaType",
    "SUB_ATTRIBUTE_TO_BASE_MANA",
    "parse_mana",
    "mana_tier_of",
    "label_for",
    # Combinations
    "HYBRID_COMBOS",
    "ELDRITCH_COMBOS",
    "pair_key",
    "resolve_hybrid",
    "resolve_eldritch",
    "resolve_composite",
    "hybrid_recipe",
    "eldritch_recipe",
    "eldritch_options",
    # Pools
    "MANA_RULES",
    "ManaRules",
    "ManaPools",
    "pool_from_percent",
    "apply_tiered_bonus",
    "aggregate_primitive",
    "combine_two_values",
    "calc_base_mana",
    "calc_force_mana",
    "calc_hybrid_mana",
    "calc_eldritch_mana",
    "calc_effectiveness_bonus",
    "derive_mana_pools",
]
