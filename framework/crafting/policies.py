"""
Crafting policies - the house rules a table still has to pick.

Two crafting rules have no agreed value yet: how per-day mana costs
are rounded, and how big a batch is (and what it costs) once batch
crafting is allowed. Both are plugged in here instead of being
guessed at inside the helpers.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Protocol, runtime_checkable

from engine.core.numeric import parse_decimal
from framework.tiers import Tier


class ManaRoundingPolicy(str, Enum):
    """How fractional per-day mana is settled."""
    NONE = "none"        # keep the fraction
    FLOOR = "floor"
    CEIL = "ceil"
    NEAREST = "nearest"  # halves round up

    def apply(self, value: Decimal | float | int) -> Decimal:
        amount = parse_decimal(value)
        if self is ManaRoundingPolicy.FLOOR:
            return amount.to_integral_value(rounding=ROUND_FLOOR)
        if self is ManaRoundingPolicy.CEIL:
            return amount.to_integral_value(rounding=ROUND_CEILING)
        if self is ManaRoundingPolicy.NEAREST:
            return amount.to_integral_value(rounding=ROUND_HALF_UP)
        return amount

    @classmethod
    def parse(cls, value: "ManaRoundingPolicy | str | None") -> "ManaRoundingPolicy":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        return cls(str(value).strip().lower())


DEFAULT_MANA_ROUNDING = ManaRoundingPolicy.NONE


@runtime_checkable
class BatchPolicy(Protocol):
    """Batch size and cost for an eligible batch craft."""

    def batch_size(self, recipe_tier: Tier, crafting_skill_tier: Tier) -> int:
        ...

    def batch_cost(self, base_cost: Decimal, batch_size: int) -> Decimal:
        ...


class UnlockedBatchPolicy:
    """
    Placeholder used until a table settles the batch formula.

    Eligibility is known; size and cost are not. Asking for either
    raises so a host cannot silently craft batches under a made-up rule.
    """

    def batch_size(self, recipe_tier: Tier, crafting_skill_tier: Tier) -> int:
        raise NotImplementedError(
            "Batch size is not set by the rules; supply a BatchPolicy"
        )

    def batch_cost(self, base_cost: Decimal, batch_size: int) -> Decimal:
        raise NotImplementedError(
            "Batch cost is not set by the rules; supply a BatchPolicy"
        )
