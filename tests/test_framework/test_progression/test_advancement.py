import pytest
from decimal import Decimal
from framework.config import RulesConfig
from framework.progression.advancement import (
    OutcomeKind,
    ProgressionEvent,
    SkillProgress,
    apply_outcome,
    apply_outcomes,
    award_for,
    coerce_record,
    is_capped,
    uses_remaining,
    uses_to_increase_rank,
)
from framework.tiers import TIER_ORDER, max_rank_for_tier

@pytest.mark.parametrize("rank, uses", [(0, 5), (1, 10), (2, 15), (9, 50)])
def test_uses_to_increase_rank(rank, uses):
    assert uses_to_increase_rank(rank) == uses

def test_uses_to_increase_rank_bad_input():
    assert uses_to_increase_rank(float("nan")) == 5
    assert uses_to_increase_rank(-4) == 5

@pytest.mark.parametrize("outcome, award", [
    ("success", Decimal("1")),
    ("crit", Decimal("2")),
    ("critical", Decimal("2")),
    ("fail", Decimal("0.2")),
    ("fumble", Decimal("0.2")),
    (None, Decimal("0.2")),
    (OutcomeKind.SUCCESS, Decimal("1")),
])
def test_award_for(outcome, award):
    assert award_for(outcome) == award

def test_five_successes_for_first_rank():
    record = SkillProgress()
    for _ in range(4):
        result = apply_outcome(record, "success", "normal")
        record = result.record
        assert result.rank_ups == 0

    result = apply_outcome(record, "success", "normal")

    assert result.rank_ups == 1
    assert result.record == SkillProgress(rank=1, progress=0)
    assert result.events == (ProgressionEvent.RANK_UP,)

def test_crit_carries_leftover_progress():
    result = apply_outcome(SkillProgress(rank=0, progress=4), "crit", "novice")

    assert result.record.rank == 1
    assert result.record.progress == Decimal("1")
    assert result.award == Decimal("2")

def test_five_failures_equal_one_success():
    result = apply_outcomes(SkillProgress(), ["fail"] * 5, "normal")

    assert result.record.progress == Decimal("1")
    assert result.award == Decimal("1")

def test_twenty_five_failures_rank_up_exactly():
    result = apply_outcomes(SkillProgress(), ["fail"] * 25, "normal")

    assert result.rank_ups == 1
    assert result.record == SkillProgress(rank=1, progress=0)

def test_capped_record_unchanged():
    record = SkillProgress(rank=3, progress=Decimal("2.4"))

    result = apply_outcome(record, "crit", "normal")

    assert result.record is record
    assert result.capped is True
    assert result.rank_ups == 0
    assert result.award == 0
    assert result.events == (ProgressionEvent.CAPPED,)
    assert not result.changed

def test_rank_above_cap_is_not_reduced():
    record = SkillProgress(rank=12, progress=3)

    result = apply_outcome(record, "success", "normal")

    assert result.record.rank == 12
    assert result.capped is True

def test_rank_up_into_cap():
    record = SkillProgress(rank=2, progress=14)

    result = apply_outcome(record, "success", "normal")

    assert result.record.rank == 3
    assert result.capped is True
    assert result.events == (ProgressionEvent.RANK_UP, ProgressionEvent.CAP_REACHED)

def test_loop_stops_at_cap_and_banks_leftover():
    # Enough progress for many ranks
    record = SkillProgress(rank=0, progress=500)

    result = apply_outcome(record, "success", "initiate")

    assert result.record.rank == 5
    # 501 - (5 + 10 + 15 + 20 + 25)
    assert result.record.progress == Decimal("426")
    assert result.rank_ups == 5

def test_multiple_rank_ups_from_one_event():
    record = SkillProgress(rank=0, progress=Decimal("14.5"))

    result = apply_outcome(record, "crit", "master")

    # 16.5 - 5 - 10
    assert result.rank_ups == 2
    assert result.record == SkillProgress(rank=2, progress=Decimal("1.5"))

def test_advanced_skill_blocked_below_unlock_tier():
    record = SkillProgress(rank=0, progress=4)

    result = apply_outcome(record, "crit", "novice", is_advanced=True)

    assert result.advanced_blocked is True
    assert result.record == record
    assert result.rank_ups == 0
    assert result.events == (ProgressionEvent.ADVANCED_BLOCKED,)

def test_gate_checked_before_cap():
    record = SkillProgress(rank=3)

    result = apply_outcome(record, "success", "normal", is_advanced=True)

    assert result.advanced_blocked is True
    assert result.capped is True

def test_advanced_skill_advances_at_unlock_tier():
    result = apply_outcome(SkillProgress(rank=0, progress=4), "success", "apprentice", is_advanced=True)

    assert result.advanced_blocked is False
    assert result.rank_ups == 1

def test_advanced_skill_with_unknown_tier_is_blocked():
    result = apply_outcome(SkillProgress(), "success", "legendary", is_advanced=True)
    assert result.advanced_blocked is True

def test_unknown_tier_uses_normal_cap():
    result = apply_outcome(SkillProgress(rank=3), "success", "legendary")
    assert result.capped is True

def test_custom_rules():
    rules = RulesConfig(fail_award=0, uses_base=2, uses_per_rank=0, advanced_unlock_tier="normal")

    assert apply_outcome(SkillProgress(), "fail", "normal", rules=rules).record.progress == 0
    result = apply_outcomes(SkillProgress(), ["success"] * 4, "normal", is_advanced=True, rules=rules)
    assert result.record.rank == 2

@pytest.mark.parametrize("rank, progress", [
    (float("nan"), float("nan")),
    (-3, -10),
    ("abc", "xyz"),
    (None, None),
    (float("inf"), float("-inf")),
    ("1e999999", "9.99e999999"),
])
def test_malformed_records_coerced_to_zero(rank, progress):
    record = SkillProgress(rank=rank, progress=progress)

    assert record == SkillProgress(rank=0, progress=0)
    result = apply_outcome(record, "success", "normal")
    assert result.record == SkillProgress(rank=0, progress=1)

def test_coerce_record_from_mapping():
    assert coerce_record({"rank": "2", "progress": "3.4"}) == SkillProgress(rank=2, progress=Decimal("3.4"))
    assert coerce_record(None) == SkillProgress()
    assert coerce_record(42) == SkillProgress()

def test_record_round_trips_through_json():
    record = SkillProgress(rank=2, progress=Decimal("1.2"))
    assert SkillProgress.model_validate_json(record.model_dump_json()) == record

def test_rank_and_progress_stay_in_bounds_for_every_tier():
    outcomes = ["success", "fail", "crit", "fail", "success"] * 200
    for tier in TIER_ORDER:
        cap = max_rank_for_tier(tier)
        record = SkillProgress()
        for outcome in outcomes:
            result = apply_outcome(record, outcome, tier)
            record = result.record
            assert record.rank <= cap
            if record.rank < cap:
                assert record.progress < uses_to_increase_rank(record.rank)

def test_is_capped_and_uses_remaining():
    assert is_capped(SkillProgress(rank=7), "novice")
    assert not is_capped(SkillProgress(rank=6), "novice")
    assert uses_remaining(SkillProgress(rank=1, progress=Decimal("2.4")), "novice") == Decimal("7.6")
    assert uses_remaining(SkillProgress(rank=7), "novice") is None

def test_apply_outcomes_empty():
    record = SkillProgress(rank=1, progress=2)
    result = apply_outcomes(record, [], "normal")

    assert result.record == record
    assert result.rank_ups == 0
    assert result.events == ()
