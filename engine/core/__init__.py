"""
Core engine module.

Exports:
- Component, register_component: Record base and serialization registry
- EventBus, Event: Event system
- parse_decimal, non_negative_int, ...: Parse-or-zero numeric helpers
"""

from engine.core.component import (
    Component,
    register_component,
    get_component_type,
    get_all_component_types,
    dump_component,
    load_component,
)
from engine.core.events import EventBus, Event, EventHandler
from engine.core.numeric import (
    ZERO,
    parse_decimal,
    non_negative_decimal,
    floor_int,
    non_negative_int,
)

__all__ = [
    # Components
    "Component",
    "register_component",
    "get_component_type",
    "get_all_component_types",
    "dump_component",
    "load_component",
    # Events
    "EventBus",
    "Event",
    "EventHandler",
    # Numeric
    "ZERO",
    "parse_decimal",
    "non_negative_decimal",
    "floor_int",
    "non_negative_int",
]
