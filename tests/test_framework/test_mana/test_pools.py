import pytest
from decimal import Decimal
from pydantic import ValidationError
from framework.components.character import SubAttributes
from framework.mana.types import BaseMana, HybridMana, EldritchMana
from framework.mana.pools import (
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

@pytest.mark.parametrize("percent, expected", [
    (37, 70),
    (0, 0),
    (4.99, 0),
    (5, 10),
    (100, 200),
    ("45", 90),
])
def test_pool_from_percent(percent, expected):
    assert pool_from_percent(percent) == expected

@pytest.mark.parametrize("percent", [-10, float("nan"), float("inf"), None, "abc"])
def test_pool_from_malformed_percent_is_zero(percent):
    assert pool_from_percent(percent) == 0

@pytest.mark.parametrize("percent", ["0", "3", "5", "37", "42.5", "99.9", "100", "123.45"])
def test_pool_is_constant_within_band(percent):
    p = Decimal(percent)
    assert pool_from_percent(p) == pool_from_percent(p - p % 5)

def test_pool_is_monotonic():
    previous = 0
    for tenth in range(0, 1001):
        value = pool_from_percent(tenth / 10)
        assert value >= previous
        previous = value

def test_apply_tiered_bonus():
    assert apply_tiered_bonus(70, 3, 0.2) == 112
    assert apply_tiered_bonus(50, 3, 0.2) == 80
    assert apply_tiered_bonus(70, 0, 0.2) == 70

@pytest.mark.parametrize("derive, args, expected", [
    (pool_from_percent, ("1e1000000",), 0),
    (apply_tiered_bonus, ("9e999999", 5, 0.2), 0),
    (apply_tiered_bonus, (70, "9e999999", "9e999999"), 70),
    (combine_two_values, ("9e999999", "9e999999"), 0),
    (combine_two_values, ("9e999999", 40), 20),
    (calc_hybrid_mana, ("9e999999", "9e999999", 3), 0),
    (calc_eldritch_mana, ("9e999999", "9e999999"), 0),
])
def test_huge_inputs_count_as_zero(derive, args, expected):
    assert derive(*args) == expected

def test_apply_tiered_bonus_negative_levels_clamp():
    assert apply_tiered_bonus(70, -2, 0.2) == 70

def test_aggregate_primitive_excludes_types():
    pools = {base: 0 for base in BaseMana}
    pools[BaseMana.FIRE] = 90
    pools[BaseMana.WATER] = 10

    assert aggregate_primitive(pools) == 11
    excluded = [b for b in BaseMana if b not in (BaseMana.FIRE, BaseMana.WATER)]
    assert aggregate_primitive(pools, excluded) == 50

def test_aggregate_primitive_missing_counts_as_zero():
    assert aggregate_primitive({"fire": 90}) == 10

def test_aggregate_primitive_all_excluded():
    assert aggregate_primitive({"fire": 90}, list(BaseMana)) == 0
    assert aggregate_primitive(None) == 0

def test_combine_two_values():
    assert combine_two_values(70, 35) == 52
    assert combine_two_values(70, -35) == 35

def test_calc_base_mana():
    assert calc_base_mana(37) == 70
    assert calc_base_mana(37, 2) == 98

def test_calc_force_mana():
    pools = {base: 20 for base in BaseMana}
    assert calc_force_mana(pools) == 20
    assert calc_force_mana(pools, [BaseMana.FIRE]) == 20

def test_calc_hybrid_and_eldritch_mana():
    assert calc_hybrid_mana(70, 50) == 60
    assert calc_hybrid_mana(70, 50, 1) == 72
    assert calc_eldritch_mana(72, 40) == 56

def test_calc_effectiveness_bonus():
    assert calc_effectiveness_bonus(1, 1) == pytest.approx(0.75)
    assert calc_effectiveness_bonus(-1, 0) == 0.0

def test_derive_mana_pools():
    sheet = SubAttributes(might=37, fortitude=25, presence=12)
    pools = derive_mana_pools(sheet, empower_levels={"enhancement": 1})

    assert pools.base_value(BaseMana.ENHANCEMENT) == 84
    assert pools.base_value("earth") == 50
    assert pools.base_value(BaseMana.FIRE) == 20
    assert pools.base_value("bogus") == 0
    # (84 + 50 + 20) / 9
    assert pools.force == 17

def test_derive_mana_pools_blocked_types():
    pools = derive_mana_pools({"might": 50, "fortitude": 50}, blocked=["Enhancement", "bogus"])

    assert pools.blocked == [BaseMana.ENHANCEMENT]
    # 100 / 8
    assert pools.force == 12

def test_mana_pools_hybrid_and_eldritch():
    pools = derive_mana_pools({"might": 37, "fortitude": 25, "focus": 30, "willpower": 20})

    assert pools.hybrid("earth", "enhancement") == (HybridMana.METAL, 60)
    assert pools.hybrid("enhancement", "enhancement") is None

    # Crystal = earth 50 + astral 60 -> 55; + water 40 -> 47
    assert pools.eldritch("crystal", "water") == (EldritchMana.RESONANCE, 47)
    assert pools.eldritch("metal", "water") is None

def test_mana_pools_are_frozen():
    pools = ManaPools(force=10)
    with pytest.raises(ValidationError):
        pools.force = 20
