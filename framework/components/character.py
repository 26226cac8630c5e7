"""
Character components - attributes and sub-attribute percentages.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import Field

from engine.core.component import Component, register_component
from engine.core.numeric import parse_decimal


class Attribute(str, Enum):
    """The three governing attributes."""
    BODY = "body"
    MIND = "mind"
    SOUL = "soul"


class SubAttribute(str, Enum):
    """Sub-attributes, three per attribute."""
    # Body
    MIGHT = "might"
    AGILITY = "agility"
    FORTITUDE = "fortitude"
    # Mind
    FOCUS = "focus"
    INSIGHT = "insight"
    WILLPOWER = "willpower"
    # Soul
    PRESENCE = "presence"
    MANIPULATION = "manipulation"
    RESOLVE = "resolve"

    @classmethod
    def parse(cls, value: "SubAttribute | str | None") -> "SubAttribute | None":
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


SUB_ATTRIBUTE_GROUPS: Mapping[Attribute, tuple[SubAttribute, ...]] = MappingProxyType({
    Attribute.BODY: (SubAttribute.MIGHT, SubAttribute.AGILITY, SubAttribute.FORTITUDE),
    Attribute.MIND: (SubAttribute.FOCUS, SubAttribute.INSIGHT, SubAttribute.WILLPOWER),
    Attribute.SOUL: (SubAttribute.PRESENCE, SubAttribute.MANIPULATION, SubAttribute.RESOLVE),
})


def attribute_of(sub: SubAttribute | str) -> Attribute | None:
    """Return the attribute a sub-attribute belongs to."""
    parsed = SubAttribute.parse(sub)
    for attribute, members in SUB_ATTRIBUTE_GROUPS.items():
        if parsed in members:
            return attribute
    return None


@register_component
class SubAttributes(Component):
    """
    Sub-attribute percentages for one character.

    Percentages drive mana pools (see framework.mana.pools) and grow
    with skill rank-ups and ability tier-ups.

    Attributes:
        might ... resolve: Current percentage per sub-attribute
    """
    might: float = Field(default=0.0, ge=0)
    agility: float = Field(default=0.0, ge=0)
    fortitude: float = Field(default=0.0, ge=0)
    focus: float = Field(default=0.0, ge=0)
    insight: float = Field(default=0.0, ge=0)
    willpower: float = Field(default=0.0, ge=0)
    presence: float = Field(default=0.0, ge=0)
    manipulation: float = Field(default=0.0, ge=0)
    resolve: float = Field(default=0.0, ge=0)

    def get(self, sub: SubAttribute | str) -> float:
        """Get a percentage (0.0 for an unknown sub-attribute)."""
        parsed = SubAttribute.parse(sub)
        if parsed is None:
            return 0.0
        return getattr(self, parsed.value)

    def add_percent(self, sub: SubAttribute | str, amount: float) -> float:
        """
        Add percentage points to a sub-attribute.

        Args:
            sub: Sub-attribute to raise
            amount: Percentage points (negative or malformed values add nothing)

        Returns:
            The new percentage
        """
        parsed = SubAttribute.parse(sub)
        if parsed is None:
            raise KeyError(f"Unknown sub-attribute: {sub!r}")
        gain = max(0.0, float(parse_decimal(amount)))
        # Rounded to kill float noise from bonuses like 1.75 * 0.5
        new_value = round(getattr(self, parsed.value) + gain, 6)
        setattr(self, parsed.value, new_value)
        return new_value

    def as_mapping(self) -> dict[SubAttribute, float]:
        return {sub: getattr(self, sub.value) for sub in SubAttribute}
