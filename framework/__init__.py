"""
Rules Framework module.

Provides the tabletop rules built on top of the engine:
- Tiers (the shared ten-step proficiency order)
- Config (locked rule constants, JSON overrides)
- Components (data-only, Pydantic models)
- Mana (base/hybrid/eldritch types, pool formulas)
- Progression (skills, ranks, rank caps)
- Crafting (downtime points, gates, mastery)
"""
