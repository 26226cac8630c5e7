"""
Rules configuration.

The locked constants the advancement rules read at call time. One
frozen instance, ``DEFAULT_RULES``, is shared process-wide; hosts that
run a variant ruleset load their own from a JSON file:

    rules = load_rules_config("house_rules.json")
    apply_outcome(record, "success", "novice", rules=rules)

When no path is given, ``PROGRESSION_RULES_PATH`` is consulted before
falling back to the defaults.
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from engine.resources.database import Database
from framework.tiers import ABILITY_ATTR_MOD, TIER_ORDER, Tier

logger = logging.getLogger(__name__)

RULES_PATH_ENV = "PROGRESSION_RULES_PATH"

RULES_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Progression rules override",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "success_award": {"type": "number", "minimum": 0},
        "crit_award": {"type": "number", "minimum": 0},
        "fail_award": {"type": "number", "minimum": 0},
        "advanced_unlock_tier": {"enum": [tier.value for tier in TIER_ORDER]},
        "uses_base": {"type": "integer", "minimum": 1},
        "uses_per_rank": {"type": "integer", "minimum": 0},
        "ability_attr_mod": {"type": "number", "minimum": 0},
        "crafting_attr_rate_mod": {"type": "number", "minimum": 0},
    },
}


class RulesConfig(BaseModel):
    """
    Locked rule constants.

    Attributes:
        success_award: Progress granted by a success
        crit_award: Progress granted by a critical
        fail_award: Progress granted by a failure (five failures = one success)
        advanced_unlock_tier: Tier a character needs before advanced skills advance
        uses_base: Uses needed to go from rank 0 to rank 1
        uses_per_rank: Extra uses needed per rank already held
        ability_attr_mod: Fraction of the tier modifier granted per ability tier-up
        crafting_attr_rate_mod: Attribute advancement rate for crafting/research skills
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    success_award: Decimal = Decimal("1")
    crit_award: Decimal = Decimal("2")
    fail_award: Decimal = Decimal("0.2")
    advanced_unlock_tier: Tier = Tier.APPRENTICE
    uses_base: int = 5
    uses_per_rank: int = 5
    ability_attr_mod: float = ABILITY_ATTR_MOD
    crafting_attr_rate_mod: float = 0.5

    @field_validator("success_award", "crit_award", "fail_award", mode="before")
    @classmethod
    def _float_to_exact_decimal(cls, value: Any) -> Any:
        # Decimal(0.2) would carry the binary expansion
        if isinstance(value, float):
            return Decimal(repr(value))
        return value


DEFAULT_RULES = RulesConfig()


def load_rules_config(
    path: Path | str | None = None,
    database: Database | None = None,
) -> RulesConfig:
    """
    Load a rules override file on top of the defaults.

    Args:
        path: JSON file to load. None checks PROGRESSION_RULES_PATH.
        database: Loader to use (a fresh one rooted at the cwd by default)

    Returns:
        DEFAULT_RULES when no file is configured, else the merged config

    Raises:
        DataValidationError: If the file is unreadable or fails the schema
    """
    if path is None:
        path = os.environ.get(RULES_PATH_ENV) or None
    if path is None:
        return DEFAULT_RULES

    db = database or Database()
    if db.get_schema("rules") is None:
        db.register_schema("rules", RULES_SCHEMA)

    overrides = db.load_document(path, "rules")
    config = RulesConfig(**{**DEFAULT_RULES.model_dump(), **overrides})
    logger.info(f"Rules overrides applied: {sorted(overrides)}")
    return config
