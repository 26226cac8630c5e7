"""
Mana type identifiers.

Four tiers, each a closed set fixed at import time:
- Force: the single averaged pool
- Base: nine primitive types, one per sub-attribute
- Hybrid: 32 types, each made from two base types
- Eldritch: types made from one hybrid and one added base type
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from framework.components.character import SubAttribute


class ManaTier(str, Enum):
    FORCE = "force"
    BASE = "base"
    HYBRID = "hybrid"
    ELDRITCH = "eldritch"

    @property
    def label(self) -> str:
        return self.value.title()


class BaseMana(str, Enum):
    ENHANCEMENT = "enhancement"
    WIND = "wind"
    EARTH = "earth"
    ASTRAL = "astral"
    LIGHT = "light"
    WATER = "water"
    FIRE = "fire"
    SHADOW = "shadow"
    NATURE = "nature"

    @property
    def label(self) -> str:
        return self.value.title()


class HybridMana(str, Enum):
    # Enhancement hybrids
    METAL = "metal"
    GALE = "gale"
    RADIANCE = "radiance"
    VOID = "void"
    INFERNO = "inferno"
    ARCANE = "arcane"
    DELUGE = "deluge"
    WILD = "wild"
    # Wind
    SAND = "sand"
    GLASS = "glass"
    ICE = "ice"
    LIGHTNING = "lightning"
    TEMPEST = "tempest"
    # Earth
    CRYSTAL = "crystal"
    MUD = "mud"
    OBSIDIAN = "obsidian"
    GROWTH = "growth"
    # Astral
    LIFE = "life"
    DEATH = "death"
    DREAM = "dream"
    IGNITION = "ignition"
    PULSE = "pulse"
    # Light
    RENEWAL = "renewal"
    RETRIBUTION = "retribution"
    JUDGEMENT = "judgement"
    HARMONY = "harmony"
    # Water
    STEAM = "steam"
    POISON = "poison"
    REGROWTH = "regrowth"
    # Fire
    RUIN = "ruin"
    SURGE = "surge"
    # Shadow
    BLIGHT = "blight"

    @property
    def label(self) -> str:
        return self.value.title()


class EldritchMana(str, Enum):
    # Crystal
    RESONANCE = "resonance"
    OVERCHARGE = "overcharge"
    NULL = "null"
    # Mud
    INERTIA = "inertia"
    QUAGMIRE = "quagmire"
    # Obsidian
    DISJUNCTION = "disjunction"
    SEVERANCE = "severance"
    # Growth
    OVERGROWTH = "overgrowth"
    # Steam
    SUSPENSION = "suspension"
    # Poison
    ENTROPY = "entropy"
    EXPOSURE = "exposure"
    CATALYST = "catalyst"
    CORROSION = "corrosion"
    NECROSIS = "necrosis"
    # Ignition
    MANDATE = "mandate"
    RECURSION = "recursion"
    CASCADE = "cascade"
    # Retribution
    REPRISAL = "reprisal"
    # Judgement
    DECREE = "decree"
    SENTENCE = "sentence"
    INJUNCTION = "injunction"
    PRECEDENT = "precedent"
    SANCTION = "sanction"
    # Ruin
    CATASTROPHE = "catastrophe"
    DEVASTATION = "devastation"
    SCOUR = "scour"
    # Blight
    STERILITY = "sterility"

    @property
    def label(self) -> str:
        return self.value.title()


ManaType = Union[BaseMana, HybridMana, EldritchMana]

# Locked: each sub-attribute feeds exactly one base type
SUB_ATTRIBUTE_TO_BASE_MANA: Mapping[SubAttribute, BaseMana] = MappingProxyType({
    SubAttribute.MIGHT: BaseMana.ENHANCEMENT,
    SubAttribute.AGILITY: BaseMana.WIND,
    SubAttribute.FORTITUDE: BaseMana.EARTH,
    SubAttribute.FOCUS: BaseMana.ASTRAL,
    SubAttribute.INSIGHT: BaseMana.LIGHT,
    SubAttribute.WILLPOWER: BaseMana.WATER,
    SubAttribute.PRESENCE: BaseMana.FIRE,
    SubAttribute.MANIPULATION: BaseMana.SHADOW,
    SubAttribute.RESOLVE: BaseMana.NATURE,
})

_TIER_ENUMS: tuple[tuple[ManaTier, type[Enum]], ...] = (
    (ManaTier.BASE, BaseMana),
    (ManaTier.HYBRID, HybridMana),
    (ManaTier.ELDRITCH, EldritchMana),
)


def normalize_identifier(value: object) -> str:
    """Lower-cased string form of an identifier (enum members use their value)."""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()


def parse_mana(value: object) -> ManaType | None:
    """Find the mana type for an identifier in any tier, or None."""
    key = normalize_identifier(value)
    for _, enum_cls in _TIER_ENUMS:
        try:
            return enum_cls(key)
        except ValueError:
            continue
    return None


def mana_tier_of(value: object) -> ManaTier | None:
    """Tier an identifier belongs to (``force`` itself maps to FORCE)."""
    key = normalize_identifier(value)
    if key == ManaTier.FORCE.value:
        return ManaTier.FORCE
    for tier, enum_cls in _TIER_ENUMS:
        if key in enum_cls._value2member_map_:
            return tier
    return None


def label_for(value: object) -> str:
    """Player-facing label for a tier or type; unknown identifiers echo back."""
    key = normalize_identifier(value)
    if key in ManaTier._value2member_map_:
        return ManaTier(key).label
    mana = parse_mana(key)
    if mana is None:
        return str(value)
    return mana.label
