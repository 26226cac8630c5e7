"""
Resources module - schema-checked JSON rules data.
"""

from engine.resources.database import Database, DataValidationError

__all__ = ["Database", "DataValidationError"]
