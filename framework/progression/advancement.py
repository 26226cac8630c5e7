"""
Skill advancement - turns roll outcomes into ranks.

A skill's whole state is its (rank, progress) record. One outcome
moves it through four steps, in this order:

1. Gate: an advanced skill does not advance before the character
   reaches the unlock tier. Nothing changes.
2. Cap: a skill at its tier cap gains nothing at all. Progress is not
   banked while capped.
3. Award: success 1, crit 2, fail 0.2 (unknown kinds count as fail).
4. Rank-ups: while below the cap and progress covers the cost of the
   next rank (5 + 5 * rank), pay it and rank up. Leftover progress
   stays on the record, including anything above the cap's threshold.

Transitions are pure: the caller loads the record, calls
``apply_outcome`` and stores ``result.record``. Two outcomes for the
same record must be applied one after the other (see SkillTracker).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Iterable, Mapping

from pydantic import ConfigDict, field_validator

from engine.core.component import Component, register_component
from engine.core.numeric import ZERO, non_negative_decimal, non_negative_int
from framework.config import DEFAULT_RULES, RulesConfig
from framework.tiers import Tier, max_rank_for_tier, tier_at_least

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    """Classified roll outcomes."""
    SUCCESS = "success"
    CRIT = "crit"
    FAIL = "fail"

    @classmethod
    def parse(cls, value: "OutcomeKind | str | None") -> "OutcomeKind":
        """Match an outcome kind. Anything unrecognized is a failure."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower() if value is not None else ""
        key = _OUTCOME_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            logger.debug(f"Unrecognized outcome {value!r}; using the failure award")
            return cls.FAIL


_OUTCOME_ALIASES = {
    "critical": "crit",
    "failure": "fail",
}


class ProgressionEvent(Enum):
    """What a transition did, for hosts listening on an EventBus."""
    RANK_UP = auto()            # one or more ranks gained
    CAP_REACHED = auto()        # ranked up into the tier cap
    CAPPED = auto()             # outcome arrived at the cap, nothing gained
    ADVANCED_BLOCKED = auto()   # advanced skill below the unlock tier
    ABILITY_TIER_UP = auto()    # raised by SkillTracker, not by transitions


@register_component
class SkillProgress(Component):
    """
    Per-character, per-skill progression record.

    Attributes:
        rank: Current rank (0 when the skill is first associated)
        progress: Practice credit toward the next rank

    Malformed numbers (NaN, negatives, non-numeric strings) become 0
    instead of failing validation.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    rank: int = 0
    progress: Decimal = ZERO

    @field_validator("rank", mode="before")
    @classmethod
    def _coerce_rank(cls, value: Any) -> int:
        return non_negative_int(value)

    @field_validator("progress", mode="before")
    @classmethod
    def _coerce_progress(cls, value: Any) -> Decimal:
        return non_negative_decimal(value)


@dataclass(frozen=True)
class OutcomeResult:
    """
    Result of applying one (or a batch of) outcomes.

    Attributes:
        record: The record to store
        previous: The record before the transition
        rank_ups: Ranks gained
        capped: Whether the skill ended at its tier cap
        advanced_blocked: Whether the advanced-skill gate rejected the outcome
        award: Progress actually added (0 when blocked or capped)
        events: What happened, in order
    """
    record: SkillProgress
    previous: SkillProgress
    rank_ups: int = 0
    capped: bool = False
    advanced_blocked: bool = False
    award: Decimal = ZERO
    events: tuple[ProgressionEvent, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        return self.record != self.previous


def uses_to_increase_rank(rank: Any, rules: RulesConfig | None = None) -> int:
    """Uses needed to go from ``rank`` to ``rank + 1``: 5 + 5 * rank."""
    rules = rules or DEFAULT_RULES
    return rules.uses_base + non_negative_int(rank) * rules.uses_per_rank


def award_for(outcome: OutcomeKind | str | None, rules: RulesConfig | None = None) -> Decimal:
    """Progress granted by an outcome kind."""
    rules = rules or DEFAULT_RULES
    kind = OutcomeKind.parse(outcome)
    if kind is OutcomeKind.CRIT:
        return rules.crit_award
    if kind is OutcomeKind.SUCCESS:
        return rules.success_award
    return rules.fail_award


def coerce_record(record: SkillProgress | Mapping[str, Any] | None) -> SkillProgress:
    """Accept a record, a persisted mapping, or None (a fresh record)."""
    if isinstance(record, SkillProgress):
        return record
    if record is None:
        return SkillProgress()
    if isinstance(record, Mapping):
        return SkillProgress(rank=record.get("rank"), progress=record.get("progress"))
    return SkillProgress()


def is_capped(record: SkillProgress | Mapping[str, Any] | None, tier: Tier | str | None) -> bool:
    return coerce_record(record).rank >= max_rank_for_tier(tier)


def is_advanced_unlocked(tier: Tier | str | None, rules: RulesConfig | None = None) -> bool:
    rules = rules or DEFAULT_RULES
    return tier_at_least(tier, rules.advanced_unlock_tier)


def uses_remaining(
    record: SkillProgress | Mapping[str, Any] | None,
    tier: Tier | str | None,
    rules: RulesConfig | None = None,
) -> Decimal | None:
    """Progress still needed for the next rank, or None when capped."""
    current = coerce_record(record)
    if is_capped(current, tier):
        return None
    return max(ZERO, uses_to_increase_rank(current.rank, rules) - current.progress)


def apply_outcome(
    record: SkillProgress | Mapping[str, Any] | None,
    outcome: OutcomeKind | str | None,
    tier: Tier | str | None,
    is_advanced: bool = False,
    rules: RulesConfig | None = None,
) -> OutcomeResult:
    """
    Apply one roll outcome to a skill record.

    Args:
        record: Current record (as loaded by the host)
        outcome: "success", "crit" or "fail"
        tier: Character's current tier key
        is_advanced: Whether the skill is an advanced skill
        rules: Rule constants (DEFAULT_RULES if omitted)

    Returns:
        OutcomeResult - never raises for bad numeric state
    """
    rules = rules or DEFAULT_RULES
    current = coerce_record(record)
    cap = max_rank_for_tier(tier)

    if is_advanced and not is_advanced_unlocked(tier, rules):
        logger.debug(
            f"Advanced skill blocked at tier {tier!r} "
            f"(unlocks at {rules.advanced_unlock_tier.value})"
        )
        return OutcomeResult(
            record=current,
            previous=current,
            capped=current.rank >= cap,
            advanced_blocked=True,
            events=(ProgressionEvent.ADVANCED_BLOCKED,),
        )

    if current.rank >= cap:
        return OutcomeResult(
            record=current,
            previous=current,
            capped=True,
            events=(ProgressionEvent.CAPPED,),
        )

    award = award_for(outcome, rules)
    rank = current.rank
    progress = current.progress + award
    rank_ups = 0

    while rank < cap:
        required = uses_to_increase_rank(rank, rules)
        if progress < required:
            break
        progress -= required
        rank += 1
        rank_ups += 1

    updated = SkillProgress(rank=rank, progress=progress)
    capped = rank >= cap

    events: list[ProgressionEvent] = []
    if rank_ups:
        events.append(ProgressionEvent.RANK_UP)
        logger.debug(f"Rank up x{rank_ups}: {current.rank} -> {rank} (cap {cap})")
        if capped:
            events.append(ProgressionEvent.CAP_REACHED)

    return OutcomeResult(
        record=updated,
        previous=current,
        rank_ups=rank_ups,
        capped=capped,
        award=award,
        events=tuple(events),
    )


def apply_outcomes(
    record: SkillProgress | Mapping[str, Any] | None,
    outcomes: Iterable[OutcomeKind | str | None],
    tier: Tier | str | None,
    is_advanced: bool = False,
    rules: RulesConfig | None = None,
) -> OutcomeResult:
    """
    Fold a sequence of outcomes through ``apply_outcome``.

    Rank-ups and awards are summed; ``capped`` and ``advanced_blocked``
    describe the last transition. An empty sequence returns the record
    unchanged.
    """
    start = coerce_record(record)
    result = OutcomeResult(record=start, previous=start, capped=is_capped(start, tier))
    rank_ups = 0
    award = ZERO
    events: list[ProgressionEvent] = []

    for outcome in outcomes:
        result = apply_outcome(result.record, outcome, tier, is_advanced, rules)
        rank_ups += result.rank_ups
        award += result.award
        events.extend(result.events)

    return OutcomeResult(
        record=result.record,
        previous=start,
        rank_ups=rank_ups,
        capped=result.capped,
        advanced_blocked=result.advanced_blocked,
        award=award,
        events=tuple(events),
    )
