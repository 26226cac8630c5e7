"""
Mana combination tables.

Base + Base -> Hybrid
Hybrid + Base -> Eldritch

Keys are order-independent: both identifiers are lower-cased, sorted
and joined, so (earth, enhancement) and (enhancement, earth) hit the
same entry no matter how the table was written. A pair with no entry
means no such type exists; lookups return None rather than raising.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterator, Mapping

from framework.mana.types import (
    BaseMana,
    EldritchMana,
    HybridMana,
    ManaType,
    normalize_identifier,
)

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = "|"


def pair_key(a: object, b: object) -> str:
    """Order-independent key for a pair of identifiers."""
    return PAIR_SEPARATOR.join(sorted((normalize_identifier(a), normalize_identifier(b))))


def _build(entries: list[tuple[object, object, ManaType]]) -> Mapping[str, ManaType]:
    table: dict[str, ManaType] = {}
    for a, b, result in entries:
        key = pair_key(a, b)
        if key in table:
            raise ValueError(f"Duplicate combination {key}: {table[key]} and {result}")
        table[key] = result
    return MappingProxyType(table)


B, H, E = BaseMana, HybridMana, EldritchMana

HYBRID_COMBOS: Mapping[str, HybridMana] = _build([
    # Enhancement + X
    (B.ENHANCEMENT, B.EARTH, H.METAL),
    (B.ENHANCEMENT, B.WIND, H.GALE),
    (B.ENHANCEMENT, B.LIGHT, H.RADIANCE),
    (B.ENHANCEMENT, B.SHADOW, H.VOID),
    (B.ENHANCEMENT, B.FIRE, H.INFERNO),
    (B.ENHANCEMENT, B.ASTRAL, H.ARCANE),
    (B.ENHANCEMENT, B.WATER, H.DELUGE),
    (B.ENHANCEMENT, B.NATURE, H.WILD),
    # Wind + X
    (B.WIND, B.EARTH, H.SAND),
    (B.WIND, B.ASTRAL, H.GLASS),
    (B.WIND, B.WATER, H.ICE),
    (B.WIND, B.FIRE, H.LIGHTNING),
    (B.WIND, B.NATURE, H.TEMPEST),
    # Earth + X
    (B.EARTH, B.ASTRAL, H.CRYSTAL),
    (B.EARTH, B.WATER, H.MUD),
    (B.EARTH, B.SHADOW, H.OBSIDIAN),
    (B.EARTH, B.NATURE, H.GROWTH),
    # Astral + X
    (B.ASTRAL, B.LIGHT, H.LIFE),
    (B.ASTRAL, B.SHADOW, H.DEATH),
    (B.ASTRAL, B.WATER, H.DREAM),
    (B.ASTRAL, B.FIRE, H.IGNITION),
    (B.ASTRAL, B.NATURE, H.PULSE),
    # Light + X
    (B.LIGHT, B.WATER, H.RENEWAL),
    (B.LIGHT, B.FIRE, H.RETRIBUTION),
    (B.LIGHT, B.SHADOW, H.JUDGEMENT),
    (B.LIGHT, B.NATURE, H.HARMONY),
    # Water + X
    (B.WATER, B.FIRE, H.STEAM),
    (B.WATER, B.SHADOW, H.POISON),
    (B.WATER, B.NATURE, H.REGROWTH),
    # Fire + X
    (B.FIRE, B.SHADOW, H.RUIN),
    (B.FIRE, B.NATURE, H.SURGE),
    # Shadow + Nature
    (B.SHADOW, B.NATURE, H.BLIGHT),
])

ELDRITCH_COMBOS: Mapping[str, EldritchMana] = _build([
    (H.CRYSTAL, B.WATER, E.RESONANCE),
    (H.CRYSTAL, B.FIRE, E.OVERCHARGE),
    (H.CRYSTAL, B.SHADOW, E.NULL),
    (H.MUD, B.ASTRAL, E.INERTIA),
    (H.MUD, B.NATURE, E.QUAGMIRE),
    (H.OBSIDIAN, B.ASTRAL, E.DISJUNCTION),
    (H.OBSIDIAN, B.NATURE, E.SEVERANCE),
    (H.GROWTH, B.WATER, E.OVERGROWTH),
    (H.STEAM, B.ASTRAL, E.SUSPENSION),
    (H.POISON, B.ASTRAL, E.ENTROPY),
    (H.POISON, B.LIGHT, E.EXPOSURE),
    (H.POISON, B.FIRE, E.CATALYST),
    (H.POISON, B.EARTH, E.CORROSION),
    (H.POISON, B.NATURE, E.NECROSIS),
    (H.IGNITION, B.LIGHT, E.MANDATE),
    (H.IGNITION, B.WATER, E.RECURSION),
    (H.IGNITION, B.WIND, E.CASCADE),
    (H.RETRIBUTION, B.ASTRAL, E.REPRISAL),
    (H.JUDGEMENT, B.ASTRAL, E.DECREE),
    (H.JUDGEMENT, B.FIRE, E.SENTENCE),
    (H.JUDGEMENT, B.WATER, E.INJUNCTION),
    (H.JUDGEMENT, B.WIND, E.PRECEDENT),
    (H.JUDGEMENT, B.EARTH, E.SANCTION),
    (H.RUIN, B.ASTRAL, E.CATASTROPHE),
    (H.RUIN, B.LIGHT, E.DEVASTATION),
    (H.RUIN, B.WATER, E.SCOUR),
    (H.BLIGHT, B.ASTRAL, E.STERILITY),
])

del B, H, E


def resolve_hybrid(base_a: object, base_b: object) -> HybridMana | None:
    """Hybrid made from two base types, or None if the pair has no hybrid."""
    return HYBRID_COMBOS.get(pair_key(base_a, base_b))


def resolve_eldritch(hybrid: object, added_base: object) -> EldritchMana | None:
    """Eldritch type made from a hybrid plus a base type, or None."""
    return ELDRITCH_COMBOS.get(pair_key(hybrid, added_base))


def resolve_composite(a: object, b: object) -> HybridMana | EldritchMana | None:
    """
    Resolve the next-tier type for any pair.

    Base pairs resolve through the hybrid table, hybrid + base pairs
    through the eldritch table. Anything else (mismatched tiers,
    unknown identifiers) has no entry and yields None.
    """
    key = pair_key(a, b)
    result = HYBRID_COMBOS.get(key) or ELDRITCH_COMBOS.get(key)
    if result is None:
        logger.debug(f"No combination for {key}")
    return result


def hybrid_recipe(hybrid: HybridMana | str) -> tuple[BaseMana, BaseMana] | None:
    """The two base types that make a hybrid."""
    target = normalize_identifier(hybrid)
    for key, result in HYBRID_COMBOS.items():
        if result.value == target:
            a, b = key.split(PAIR_SEPARATOR)
            return BaseMana(a), BaseMana(b)
    return None


def eldritch_recipe(eldritch: EldritchMana | str) -> tuple[HybridMana, BaseMana] | None:
    """The hybrid and added base type that make an eldritch type."""
    target = normalize_identifier(eldritch)
    for key, result in ELDRITCH_COMBOS.items():
        if result.value != target:
            continue
        first, second = key.split(PAIR_SEPARATOR)
        if first in HybridMana._value2member_map_:
            return HybridMana(first), BaseMana(second)
        return HybridMana(second), BaseMana(first)
    return None


def eldritch_options(hybrid: HybridMana | str) -> Iterator[tuple[BaseMana, EldritchMana]]:
    """Yield (added base, eldritch result) for every eldritch a hybrid can become."""
    for base in BaseMana:
        result = resolve_eldritch(hybrid, base)
        if result is not None:
            yield base, result
