"""
Component base class for rules records.

Components are data containers. The rules themselves live in plain
functions (mana formulas, the advancement state machine) that take
components in and hand new components back. This keeps:
- Transitions pure and easy to test
- Serialization trivial (the host owns persistence)
- Validation in one place (Pydantic)

Usage:
    @register_component
    class SkillProgress(Component):
        rank: int = 0
        progress: Decimal = Decimal(0)

    data = dump_component(record)      # {"type": "SkillProgress", "data": {...}}
    record = load_component(data)
"""

from __future__ import annotations

from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all rules records.

    Components use Pydantic for:
    - Automatic validation
    - JSON serialization
    - Default values

    Subclasses that represent a snapshot of state (rather than a
    sheet the host edits) should set ``frozen=True`` in their config.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid',
    )

    # Component type name (used for serialization)
    _type_name: ClassVar[str] = ""

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__

    def clone(self, **changes: Any) -> Component:
        """Create a deep copy of this component, optionally with changes."""
        return self.model_copy(update=changes, deep=True)


# Registry of component types for deserialization
_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """
    Decorator to register a component type.

    Usage:
        @register_component
        class SubAttributes(Component):
            might: float = 0.0
    """
    type_name = cls.get_type_name()
    _component_registry[type_name] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)


def get_all_component_types() -> dict[str, type[Component]]:
    """Get all registered component types."""
    return _component_registry.copy()


def dump_component(component: Component) -> dict[str, Any]:
    """Serialize a component to a JSON-safe dict tagged with its type name."""
    return {
        "type": component.get_type_name(),
        "data": component.model_dump(mode="json"),
    }


def load_component(payload: Mapping[str, Any]) -> Component:
    """
    Rebuild a component from ``dump_component`` output.

    Raises:
        KeyError: If the type name is not registered
    """
    type_name = payload["type"]
    cls = get_component_type(type_name)
    if cls is None:
        raise KeyError(f"Unknown component type: {type_name}")
    return cls.model_validate(payload.get("data", {}))
