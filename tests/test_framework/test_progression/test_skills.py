import pytest
import json
from framework.components.character import Attribute, SubAttribute
from framework.config import RulesConfig
from framework.progression.skills import (
    SkillManager,
    SkillDefinition,
    SkillCategory,
    CRAFTING_SKILLS,
)

def write_skills(path, skills):
    with open(path / "skills.json", "w") as f:
        json.dump({"skills": skills}, f)

def test_default_crafting_skills(skill_manager):
    expected = {
        "smithing": SubAttribute.MIGHT,
        "alchemy": SubAttribute.INSIGHT,
        "textiles": SubAttribute.INSIGHT,
        "cooking": SubAttribute.FORTITUDE,
        "jeweler": SubAttribute.FOCUS,
        "engineering": SubAttribute.INSIGHT,
        "recipe_research": SubAttribute.FOCUS,
    }
    for skill_id, sub in expected.items():
        assert skill_manager.get_skill(skill_id).governs is sub
    assert len(skill_manager) == len(CRAFTING_SKILLS) + 1

def test_crafting_and_research_advance_at_half_rate(skill_manager):
    assert skill_manager.get_skill("smithing").effective_rate_mod() == 0.5
    assert skill_manager.get_skill("recipe_research").effective_rate_mod() == 0.5

def test_rate_mod_follows_rules():
    skill = SkillDefinition("cooking", "Cooking", category=SkillCategory.CRAFTING)
    assert skill.effective_rate_mod(RulesConfig(crafting_attr_rate_mod=0.25)) == 0.25

def test_general_skill_full_rate():
    skill = SkillDefinition("athletics", "Athletics", governs=SubAttribute.AGILITY)
    assert skill.effective_rate_mod() == 1.0
    assert skill.attribute is Attribute.BODY

def test_explicit_rate_mod_wins():
    skill = SkillDefinition("odd", "Odd", category=SkillCategory.CRAFTING, attr_rate_mod=0.75)
    assert skill.effective_rate_mod() == 0.75

def test_require_skill(skill_manager):
    assert skill_manager.require_skill("alchemy").name == "Alchemy"
    with pytest.raises(KeyError):
        skill_manager.require_skill("juggling")
    assert skill_manager.get_skill("juggling") is None

def test_skills_governing(skill_manager):
    ids = {s.id for s in skill_manager.skills_governing("insight")}
    assert ids == {"alchemy", "textiles", "engineering"}
    assert skill_manager.skills_governing("bogus") == []

def test_get_skills_by_category(skill_manager):
    research = skill_manager.get_skills_by_category(SkillCategory.RESEARCH)
    assert [s.id for s in research] == ["recipe_research"]

def test_load_skills(tmp_path):
    write_skills(tmp_path, [
        {"id": "athletics", "name": "Athletics", "governs": "agility"},
        {"id": "rituals", "name": "Rituals", "category": "general",
         "governs": "resolve", "is_advanced": True},
    ])
    manager = SkillManager(data_path=tmp_path, include_defaults=False)

    assert manager.load_skills() == 2
    assert manager.get_skill("athletics").governs is SubAttribute.AGILITY
    assert manager.get_skill("rituals").is_advanced is True
    assert "smithing" not in manager

def test_invalid_skill_entries_are_skipped(tmp_path):
    write_skills(tmp_path, [
        {"id": "athletics", "name": "Athletics"},
        {"id": "broken"},
        {"id": "weird", "name": "Weird", "governs": "luck"},
    ])
    manager = SkillManager(data_path=tmp_path, include_defaults=False)

    assert manager.load_skills() == 1
    assert "athletics" in manager
    assert "broken" not in manager
    assert "weird" not in manager

def test_missing_skills_file(skill_manager):
    assert skill_manager.load_skills("nope.json") == 0

def test_loaded_skill_replaces_default(tmp_path):
    write_skills(tmp_path, [
        {"id": "smithing", "name": "Smithing", "category": "CRAFTING",
         "governs": "fortitude"},
    ])
    manager = SkillManager(data_path=tmp_path)
    manager.load_skills()

    assert manager.get_skill("smithing").governs is SubAttribute.FORTITUDE
    assert manager.get_skill("smithing").category is SkillCategory.CRAFTING
