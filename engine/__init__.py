"""
Rules Engine

Shared plumbing for the tabletop rules core: Pydantic records, a typed
event bus, parse-or-zero numeric helpers and schema-checked data
loading.

Quick Start:
    from framework.mana import pool_from_percent, resolve_hybrid
    from framework.progression import SkillProgress, apply_outcome

    pool_from_percent(37)                  # 70
    resolve_hybrid("earth", "enhancement") # HybridMana.METAL

    result = apply_outcome(SkillProgress(rank=0, progress=4), "crit", "novice")
    result.record                          # rank=1, progress=1
"""

__version__ = "0.1.0"
__author__ = "Developer"

from engine.core import (
    Component,
    register_component,
    EventBus,
    Event,
    parse_decimal,
    non_negative_int,
)
from engine.resources.database import Database, DataValidationError

__all__ = [
    # Core
    "Component",
    "register_component",
    "EventBus",
    "Event",
    "parse_decimal",
    "non_negative_int",
    # Resources
    "Database",
    "DataValidationError",
]
