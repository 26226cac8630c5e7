"""
Rules Components - data-only records.

All components are Pydantic models containing only data.
Rules live in plain functions, not in components.
"""

from framework.components.character import (
    Attribute,
    SubAttribute,
    SubAttributes,
    SUB_ATTRIBUTE_GROUPS,
    attribute_of,
)

__all__ = [
    "Attribute",
    "SubAttribute",
    "SubAttributes",
    "SUB_ATTRIBUTE_GROUPS",
    "attribute_of",
]
