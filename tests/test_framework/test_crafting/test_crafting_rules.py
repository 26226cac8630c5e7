import logging
import pytest
from decimal import Decimal
from framework.tiers import Tier
from framework.crafting.policies import (
    BatchPolicy,
    ManaRoundingPolicy,
    UnlockedBatchPolicy,
)
from framework.crafting.rules import (
    BatchPlan,
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

@pytest.mark.parametrize("tier, points", [
    ("normal", 1), ("initiate", 1), ("novice", 2), ("apprentice", 2),
    ("journeyman", 3), ("adept", 3), ("master", 4), ("grandmaster", 5),
    ("avatar", 6), ("ascendant", 7), ("legendary", 0),
])
def test_points_per_downtime_day(tier, points):
    assert points_per_downtime_day(tier) == points

def test_daily_points_with_cap():
    assert daily_points_with_cap("master") == 4
    assert daily_points_with_cap("master", bonus=2) == 6
    assert daily_points_with_cap("master", bonus=10) == 8
    assert daily_points_with_cap("normal", bonus=-5) == 0
    assert daily_points_with_cap("novice", bonus=float("nan")) == 2

def test_recipe_tier_gates():
    assert meets_recipe_tier_gates("apprentice", "apprentice", "adept")
    assert not meets_recipe_tier_gates("apprentice", "novice", "adept")
    assert not meets_recipe_tier_gates("apprentice", "master", "novice")
    assert not meets_recipe_tier_gates("apprentice", "master", "master", research_tier="normal")
    assert meets_recipe_tier_gates("apprentice", "master", "master", research_tier="apprentice")
    assert not meets_recipe_tier_gates("legendary", "master", "master")

def test_can_batch_craft():
    assert can_batch_craft("normal", "novice")
    assert not can_batch_craft("normal", "initiate")
    assert can_batch_craft(Tier.APPRENTICE, Tier.ADEPT)
    assert not can_batch_craft("normal", "legendary")

@pytest.mark.parametrize("tier, crafts", [
    ("normal", 5), ("initiate", 10), ("master", 35), ("ascendant", 50),
])
def test_mastery_crafts_required(tier, crafts):
    assert mastery_crafts_required(tier) == crafts

def test_mastery_unknown_tier():
    assert mastery_crafts_required("legendary") is None

def test_counts_toward_mastery():
    assert counts_toward_mastery("success")
    assert counts_toward_mastery("Partial")
    assert not counts_toward_mastery("fail")
    assert not counts_toward_mastery(None)

def test_effective_research_cost():
    assert effective_research_cost(3) == 3
    assert effective_research_cost(3, has_found_source=True) == Decimal("1.5")
    assert effective_research_cost(-2, has_found_source=True) == 0
    assert effective_research_cost("abc") == 0

def test_daily_mana_cost():
    assert daily_mana_cost({"fire": 50}, 2) == {"fire": Decimal("25")}
    assert daily_mana_cost({"Fire": 50, "water": 0}, 4) == {"fire": Decimal("12.5")}

def test_daily_mana_cost_nothing_due():
    assert daily_mana_cost(None, 2) is None
    assert daily_mana_cost({}, 2) is None
    assert daily_mana_cost({"fire": 50}, 0) is None
    assert daily_mana_cost({"fire": -5}, 2) is None

@pytest.mark.parametrize("rounding, expected", [
    (None, Decimal("12.5")),
    ("none", Decimal("12.5")),
    (ManaRoundingPolicy.FLOOR, Decimal("12")),
    ("ceil", Decimal("13")),
    ("nearest", Decimal("13")),
])
def test_daily_mana_rounding(rounding, expected):
    assert daily_mana_cost({"fire": 50}, 4, rounding=rounding) == {"fire": expected}

def test_unknown_rounding_policy_falls_back(caplog):
    with caplog.at_level(logging.WARNING, logger="framework.crafting.rules"):
        daily = daily_mana_cost({"fire": 50}, 4, rounding="sideways")

    assert daily == {"fire": Decimal("12.5")}
    assert "Unknown mana rounding" in caplog.text

def test_rounding_policy_parse_rejects_unknown():
    with pytest.raises(ValueError):
        ManaRoundingPolicy.parse("sideways")

def test_explosion_dice():
    assert explosion_dice({"fire": 50, "water": 30, "earth": 10}) == {"fire": 2, "water": 1}
    assert explosion_dice({"fire": float("nan")}) == {}
    assert explosion_dice(None) == {}

def test_plan_batch_not_eligible():
    assert plan_batch("normal", "initiate", 4) is None

def test_plan_batch_default_policy_is_unset():
    with pytest.raises(NotImplementedError):
        plan_batch("normal", "novice", 4)

class DoubleBatch:
    def batch_size(self, recipe_tier, crafting_skill_tier):
        return crafting_skill_tier.index - recipe_tier.index

    def batch_cost(self, base_cost, batch_size):
        return base_cost * batch_size

def test_plan_batch_with_policy():
    policy = DoubleBatch()
    assert isinstance(policy, BatchPolicy)
    assert not isinstance(object(), BatchPolicy)

    plan = plan_batch("normal", "apprentice", 4, policy=policy)

    assert plan == BatchPlan(size=3, cost=Decimal("12"))

def test_unlocked_policy_is_a_batch_policy():
    assert isinstance(UnlockedBatchPolicy(), BatchPolicy)
