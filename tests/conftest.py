import os
import sys
import pytest

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()

@pytest.fixture
def rules():
    """The default rule constants."""
    from framework.config import DEFAULT_RULES
    return DEFAULT_RULES

@pytest.fixture
def skill_manager(tmp_path):
    """SkillManager seeded with the crafting skills, rooted at tmp_path."""
    from framework.progression.skills import SkillManager
    return SkillManager(data_path=tmp_path)

@pytest.fixture
def tracker(skill_manager, event_bus):
    """Novice-tier SkillTracker publishing on the event_bus fixture."""
    from framework.progression.tracker import SkillTracker
    return SkillTracker(skill_manager, tier="novice", event_bus=event_bus)
