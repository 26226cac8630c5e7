"""
Skill tracker - one character's skill records and sub-attributes.

Wraps the pure advancement transitions for hosts that want the whole
loop handled: look up the skill, apply the outcome, store the record,
raise the governing sub-attribute and announce what happened.

Outcomes for the same skill are applied one at a time; different
skills may advance from different threads.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional

from engine.core.component import dump_component, load_component
from engine.core.events import EventBus
from framework.components.character import SubAttribute, SubAttributes
from framework.config import DEFAULT_RULES, RulesConfig
from framework.progression.advancement import (
    OutcomeKind,
    OutcomeResult,
    ProgressionEvent,
    SkillProgress,
    apply_outcome,
    uses_remaining,
)
from framework.progression.skills import SkillDefinition, SkillManager
from framework.tiers import Tier, ability_tier_up_bonus, skill_rank_up_bonus


class SkillTracker:
    """
    Tracks skill progression for a single character.

    Usage:
        tracker = SkillTracker(skill_manager, tier="novice")
        tracker.add_skill("smithing")
        result = tracker.record_outcome("smithing", "success")
        tracker.sub_attributes.might
    """

    def __init__(
        self,
        skill_manager: SkillManager,
        tier: Tier | str = Tier.NORMAL,
        sub_attributes: Optional[SubAttributes] = None,
        event_bus: Optional[EventBus] = None,
        rules: Optional[RulesConfig] = None,
    ):
        self.skill_manager = skill_manager
        self.sub_attributes = sub_attributes or SubAttributes()
        self.event_bus = event_bus
        self.rules = rules or DEFAULT_RULES
        self.logger = logging.getLogger(__name__)

        self._tier = Tier.NORMAL
        self.tier = tier

        self._records: dict[str, SkillProgress] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._sheet_lock = threading.Lock()
        # Handlers may record outcomes themselves
        self._bus_lock = threading.RLock()

    @property
    def tier(self) -> Tier:
        return self._tier

    @tier.setter
    def tier(self, value: Tier | str) -> None:
        parsed = Tier.parse(value)
        if parsed is None:
            self.logger.warning(f"Unknown tier {value!r}; using {Tier.NORMAL.value}")
            parsed = Tier.NORMAL
        self._tier = parsed

    # Records

    def add_skill(self, skill_id: str) -> SkillProgress:
        """Associate a skill with the character (rank 0, progress 0)."""
        self.skill_manager.require_skill(skill_id)
        with self._lock_for(skill_id):
            record = self._records.get(skill_id)
            if record is None:
                record = SkillProgress()
                self._records[skill_id] = record
            return record

    def get_record(self, skill_id: str) -> Optional[SkillProgress]:
        return self._records.get(skill_id)

    def get_rank(self, skill_id: str) -> int:
        record = self._records.get(skill_id)
        return record.rank if record else 0

    @property
    def records(self) -> dict[str, SkillProgress]:
        return dict(self._records)

    def uses_remaining(self, skill_id: str):
        """Progress still needed for the next rank, None when capped."""
        return uses_remaining(self._records.get(skill_id), self._tier, self.rules)

    # Transitions

    def record_outcome(self, skill_id: str, outcome: OutcomeKind | str) -> OutcomeResult:
        """
        Apply a roll outcome to a skill.

        Args:
            skill_id: Skill rolled (must be registered with the manager)
            outcome: "success", "crit" or "fail"

        Returns:
            The transition result

        Raises:
            KeyError: If the skill id is unknown
        """
        skill = self.skill_manager.require_skill(skill_id)
        tier = self._tier

        with self._lock_for(skill_id):
            record = self._records.get(skill_id) or SkillProgress()
            result = apply_outcome(record, outcome, tier, skill.is_advanced, self.rules)
            self._records[skill_id] = result.record

        bonus = self._apply_rank_up_bonus(skill, result, tier)
        self._publish(skill, result, tier, bonus)
        return result

    def record_ability_tier_up(self, sub: SubAttribute | str, tier: Tier | str | None = None) -> float:
        """
        Apply the sub-attribute bonus for one ability tier-up.

        Returns:
            Percentage points added
        """
        tier = Tier.parse(tier) or self._tier
        bonus = ability_tier_up_bonus(tier, self.rules.ability_attr_mod)
        with self._sheet_lock:
            new_value = self.sub_attributes.add_percent(sub, bonus)

        if self.event_bus:
            with self._bus_lock:
                self.event_bus.publish(
                    ProgressionEvent.ABILITY_TIER_UP,
                    sub_attribute=SubAttribute.parse(sub),
                    tier=Tier.parse(tier),
                    attribute_bonus=bonus,
                    value=new_value,
                )
        return bonus

    def _apply_rank_up_bonus(self, skill: SkillDefinition, result: OutcomeResult, tier: Tier) -> float:
        if not result.rank_ups or skill.governs is None:
            return 0.0

        bonus = result.rank_ups * skill_rank_up_bonus(tier, skill.effective_rate_mod(self.rules))
        with self._sheet_lock:
            self.sub_attributes.add_percent(skill.governs, bonus)
        self.logger.debug(f"{skill.id} +{result.rank_ups} rank(s): {skill.governs.value} +{bonus}%")
        return bonus

    def _publish(self, skill: SkillDefinition, result: OutcomeResult, tier: Tier, bonus: float) -> None:
        if not self.event_bus:
            return
        with self._bus_lock:
            for event_type in result.events:
                self.event_bus.publish(
                    event_type,
                    skill_id=skill.id,
                    rank=result.record.rank,
                    rank_ups=result.rank_ups,
                    tier=tier,
                    sub_attribute=skill.governs,
                    attribute_bonus=bonus,
                )

    def _lock_for(self, skill_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(skill_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[skill_id] = lock
            return lock

    # Persistence hand-off

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe state for the host to persist."""
        return {
            "tier": self._tier.value,
            "sub_attributes": dump_component(self.sub_attributes),
            "skills": {
                skill_id: dump_component(record)
                for skill_id, record in self._records.items()
            },
        }

    def restore(self, data: Mapping[str, Any]) -> None:
        """
        Replace state from ``snapshot`` output.

        Records for skills the manager does not know are dropped with a
        warning.
        """
        self.tier = data.get("tier", Tier.NORMAL.value)

        sheet = data.get("sub_attributes")
        if sheet:
            restored = load_component(sheet)
            if isinstance(restored, SubAttributes):
                self.sub_attributes = restored

        records: dict[str, SkillProgress] = {}
        for skill_id, payload in data.get("skills", {}).items():
            if skill_id not in self.skill_manager:
                self.logger.warning(f"Dropping record for unknown skill: {skill_id}")
                continue
            record = load_component(payload)
            if isinstance(record, SkillProgress):
                records[skill_id] = record

        self._records = records
        self.logger.info(f"Restored {len(records)} skill records at tier {self._tier.value}")
