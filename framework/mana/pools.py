"""
Mana pool formulas (locked).

    base     = floor(subAttributePercent / 5) * 10
    empower  = floor(base * (1 + 0.20 * empowerLevels))
    force    = floor(sum(unblocked base) / count(unblocked base types))
    hybrid   = floor((baseA + baseB) / 2), then +20% per specialization level
    eldritch = floor((hybrid + addedBase) / 2)

Every step floors, never rounds, in decimal arithmetic: 50 * 1.6 is
exactly 80.

Bad numeric input (negative, NaN, None, non-numeric strings, values
of 1e101 or more) counts as zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping

from pydantic import ConfigDict, Field

from engine.core.component import Component, register_component
from engine.core.numeric import ZERO, floor_int, non_negative_decimal
from framework.components.character import SubAttribute, SubAttributes
from framework.mana.combinations import hybrid_recipe, resolve_eldritch, resolve_hybrid
from framework.mana.types import (
    SUB_ATTRIBUTE_TO_BASE_MANA,
    BaseMana,
    EldritchMana,
    HybridMana,
    normalize_identifier,
)


@dataclass(frozen=True)
class ManaRules:
    """Locked scaling rates."""
    base_empower_mana_per_level: Decimal = Decimal("0.20")
    hybrid_spec_mana_per_level: Decimal = Decimal("0.20")
    base_empower_effect_per_level: Decimal = Decimal("0.25")
    hybrid_spec_effect_per_level: Decimal = Decimal("0.50")
    percent_band: int = 5
    pool_per_band: int = 10


MANA_RULES = ManaRules()


def pool_from_percent(percent: Any) -> int:
    """
    Raw base pool for a sub-attribute percentage.

    Percentages are bucketed into 5-point bands worth 10 each:
    37% -> floor(37 / 5) * 10 = 70.
    """
    p = non_negative_decimal(percent)
    return floor_int(p / MANA_RULES.percent_band) * MANA_RULES.pool_per_band


def apply_tiered_bonus(value: Any, levels: Any, per_level_rate: Any) -> int:
    """
    floor(value * (1 + rate * max(0, levels))).

    Used for empowerment on base pools and specialization on hybrid
    pools. Zero (or negative) levels leave the value unchanged.
    """
    v = non_negative_decimal(value)
    n = non_negative_decimal(levels)
    rate = non_negative_decimal(per_level_rate)
    return floor_int(v * (1 + rate * n))


def aggregate_primitive(
    pools_by_type: Mapping[Any, Any] | None,
    excluded_types: Iterable[Any] = (),
) -> int:
    """
    Floored average of every base pool not excluded.

    Base types missing from the mapping count as 0. When every type
    is excluded the average is defined as 0.
    """
    pools = {normalize_identifier(k): v for k, v in (pools_by_type or {}).items()}
    excluded = {normalize_identifier(t) for t in excluded_types}

    values = [
        non_negative_decimal(pools.get(base.value))
        for base in BaseMana
        if base.value not in excluded
    ]
    if not values:
        return 0
    return floor_int(sum(values, ZERO) / len(values))


def combine_two_values(value_a: Any, value_b: Any) -> int:
    """floor((a + b) / 2) - the same rule one tier up and two tiers up."""
    total = non_negative_decimal(value_a) + non_negative_decimal(value_b)
    return floor_int(total / 2)


def calc_base_mana(percent: Any, empower_levels: Any = 0) -> int:
    """Base pool for a percentage after empowerment."""
    return apply_tiered_bonus(
        pool_from_percent(percent),
        empower_levels,
        MANA_RULES.base_empower_mana_per_level,
    )


def calc_force_mana(
    base_pools: Mapping[Any, Any] | None,
    blocked: Iterable[Any] = (),
) -> int:
    """Force pool: average of every unblocked base pool."""
    return aggregate_primitive(base_pools, blocked)


def calc_hybrid_mana(base_a: Any, base_b: Any, spec_levels: Any = 0) -> int:
    """Hybrid pool from two (already empowered) base pools."""
    return apply_tiered_bonus(
        combine_two_values(base_a, base_b),
        spec_levels,
        MANA_RULES.hybrid_spec_mana_per_level,
    )


def calc_eldritch_mana(hybrid_value: Any, added_base_value: Any) -> int:
    """Eldritch pool from a hybrid pool and the added base pool."""
    return combine_two_values(hybrid_value, added_base_value)


def calc_effectiveness_bonus(empower_levels: Any = 0, spec_levels: Any = 0) -> float:
    """
    Additive effectiveness bonus for abilities.

    +25% per base empower level, +50% per specialization level of the
    hybrid an eldritch ability comes from. 0.75 means +75%.
    """
    e = non_negative_decimal(empower_levels)
    s = non_negative_decimal(spec_levels)
    total = (
        MANA_RULES.base_empower_effect_per_level * e
        + MANA_RULES.hybrid_spec_effect_per_level * s
    )
    return float(total)


@register_component
class ManaPools(Component):
    """
    A character's derived pools.

    Attributes:
        base: Base pool per type, after empowerment
        blocked: Base types left out of the force average
        force: Force pool
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    base: dict[BaseMana, int] = Field(default_factory=dict)
    blocked: list[BaseMana] = Field(default_factory=list)
    force: int = 0

    def base_value(self, base: BaseMana | str) -> int:
        """Pool for a base type (0 for an unknown identifier)."""
        mana = BaseMana._value2member_map_.get(normalize_identifier(base))
        if mana is None:
            return 0
        return self.base.get(mana, 0)

    def hybrid(
        self,
        base_a: BaseMana | str,
        base_b: BaseMana | str,
        spec_levels: Any = 0,
    ) -> tuple[HybridMana, int] | None:
        """Resolve a hybrid and its pool, or None if the pair makes nothing."""
        hybrid = resolve_hybrid(base_a, base_b)
        if hybrid is None:
            return None
        value = calc_hybrid_mana(self.base_value(base_a), self.base_value(base_b), spec_levels)
        return hybrid, value

    def eldritch(
        self,
        hybrid: HybridMana | str,
        added_base: BaseMana | str,
        hybrid_spec_levels: Any = 0,
    ) -> tuple[EldritchMana, int] | None:
        """Resolve an eldritch type and its pool, or None if the pair makes nothing."""
        eldritch = resolve_eldritch(hybrid, added_base)
        if eldritch is None:
            return None
        recipe = hybrid_recipe(hybrid)
        if recipe is None:
            return None
        hybrid_value = calc_hybrid_mana(
            self.base_value(recipe[0]),
            self.base_value(recipe[1]),
            hybrid_spec_levels,
        )
        return eldritch, calc_eldritch_mana(hybrid_value, self.base_value(added_base))


def derive_mana_pools(
    sub_attributes: SubAttributes | Mapping[Any, Any],
    empower_levels: Mapping[Any, Any] | None = None,
    blocked: Iterable[Any] = (),
) -> ManaPools:
    """
    Build every base pool and the force pool from sub-attribute percentages.

    Args:
        sub_attributes: SubAttributes component or {sub-attribute: percent}
        empower_levels: {base type: empower levels}
        blocked: Base types excluded from the force average
    """
    if isinstance(sub_attributes, SubAttributes):
        percents = {sub.value: value for sub, value in sub_attributes.as_mapping().items()}
    else:
        percents = {normalize_identifier(k): v for k, v in sub_attributes.items()}
    empower = {normalize_identifier(k): v for k, v in (empower_levels or {}).items()}

    base: dict[BaseMana, int] = {}
    for sub in SubAttribute:
        mana = SUB_ATTRIBUTE_TO_BASE_MANA[sub]
        base[mana] = calc_base_mana(percents.get(sub.value), empower.get(mana.value, 0))

    blocked_types = sorted(
        {BaseMana(key) for key in map(normalize_identifier, blocked) if key in BaseMana._value2member_map_},
        key=lambda b: list(BaseMana).index(b),
    )
    return ManaPools(
        base=base,
        blocked=blocked_types,
        force=calc_force_mana(base, blocked_types),
    )
