"""Tests for gear suggestions."""

from pob_advisor.models.gear import GEAR_SLOTS
from pob_advisor.suggesters.gear_suggester import (
    SLOT_PRIORITY,
    check_empty_slots,
    check_gear_quality,
    check_jewelry_upgrades,
    check_life_es_gear,
    check_resistance_gear,
    suggest_gear_improvements,
)

from tests.factories import CI, capped_stats, item, make_analysis, make_build, stats


# ---------------------------------------------------------------------------
# Empty slots
# ---------------------------------------------------------------------------


def test_priority_covers_every_slot_once():
    assert sorted(SLOT_PRIORITY) == sorted(GEAR_SLOTS)


def test_every_empty_slot_is_critical():
    suggestions = check_empty_slots(make_build())
    assert len(suggestions) == 15
    assert {s.priority for s in suggestions} == {"critical"}
    assert suggestions[0].description == "Empty gear slot: Ring1"
    assert suggestions[-1].description == "Empty gear slot: Flask5"
    assert suggestions[0].specific_action == "Fill Ring1 with an appropriate item for your build"


def test_equipped_slots_are_not_reported():
    build = make_build(items=(item("Ring1", "Ring"), item("Flask1", "Life Flask")))
    descriptions = [s.description for s in check_empty_slots(build)]
    assert len(descriptions) == 13
    assert "Empty gear slot: Ring1" not in descriptions
    assert "Empty gear slot: Flask1" not in descriptions


# ---------------------------------------------------------------------------
# Resistances and pools
# ---------------------------------------------------------------------------


def test_uncapped_resistances():
    build = make_build(stat_values=stats(Fire_Resistance=40, Cold_Resistance=75, Lightning_Resistance=0))
    suggestions = check_resistance_gear(build)
    assert [(s.priority, s.description) for s in suggestions] == [
        ("critical", "Increase fire resistance (35% more needed)"),
        ("critical", "Increase lightning resistance (75% more needed)"),
        ("important", "Increase chaos resistance (60% more recommended)"),
    ]
    assert suggestions[0].expected_impact == (
        "Reaches 75% fire resistance cap, reducing fire damage taken by 140%"
    )
    assert suggestions[1].specific_action == (
        "Find Rings/Amulet/Boots with 75%+ lightning resistance (prioritize high elemental resist gear)"
    )


def test_chaos_inoculation_skips_chaos_resistance():
    build = make_build(keystones=(CI,), stat_values=capped_stats(Chaos_Resistance=-60))
    assert check_resistance_gear(build) == []


def test_life_from_nothing_improves_significantly():
    (suggestion,) = check_life_es_gear(make_build())
    assert suggestion.priority == "critical"
    assert suggestion.description == "Increase maximum life (5000 more needed to reach 5000)"
    assert suggestion.specific_action == (
        "Upgrade 3 gear slots with +625+ life affixes (target: +70+ life per slot)"
    )
    assert suggestion.expected_impact.endswith("improving survivability significantly")


def test_life_improvement_percentage():
    (suggestion,) = check_life_es_gear(make_build(stat_values=stats(Life=2500)))
    assert suggestion.description == "Increase maximum life (2500 more needed to reach 5000)"
    assert suggestion.expected_impact.endswith("improving survivability by 100%")
    assert check_life_es_gear(make_build(stat_values=stats(Life=4000))) == []


def test_chaos_inoculation_energy_shield_is_critical():
    build = make_build(keystones=(CI,), stat_values=stats(Life=1, Energy_Shield=3000))
    (suggestion,) = check_life_es_gear(build)
    assert suggestion.priority == "critical"
    assert suggestion.description == "Increase maximum energy shield (3000 more needed to reach 6000)"
    assert suggestion.expected_impact.endswith("by 100%")


def test_hybrid_energy_shield_is_important():
    build = make_build(stat_values=stats(Life=5000, Energy_Shield=2500))
    (suggestion,) = check_life_es_gear(build)
    assert suggestion.priority == "important"
    assert suggestion.description == "Increase maximum energy shield (1500 more needed to reach 4000)"
    assert suggestion.specific_action.startswith("Upgrade 3 gear slots with +188+ ES affixes")
    assert suggestion.expected_impact.endswith("by 60%")
    assert check_life_es_gear(make_build(stat_values=stats(Life=5000, Energy_Shield=1000))) == []


# ---------------------------------------------------------------------------
# Item quality
# ---------------------------------------------------------------------------


def test_weapon_and_body_base_upgrades():
    build = make_build(
        items=(
            item("Weapon1", "Driftwood Wand"),
            item("BodyArmour", "Tabula Rasa", base_type="Simple Robe"),
        )
    )
    suggestions = check_gear_quality(build, make_analysis(offense="low"))
    assert [s.description for s in suggestions] == [
        "Upgrade weapon for higher damage output",
        "Upgrade body armor to higher tier base",
    ]
    assert check_gear_quality(make_build(), make_analysis(offense="low")) == []


def test_ring_and_amulet_affixes():
    build = make_build(
        items=(
            item("Ring1", "Good Ring", "+80 to maximum Life", "+40% to Fire Resistance"),
            item("Ring2", "Life Ring", "+80 to maximum Life"),
            item("Amulet", "Plain Amulet", "+30 to Strength"),
        )
    )
    suggestions = check_jewelry_upgrades(build)
    assert [(s.priority, s.description) for s in suggestions] == [
        ("important", "Upgrade Ring 2 with better affixes"),
        ("optional", "Upgrade amulet with damage affixes"),
    ]


def test_damage_amulet_is_fine():
    build = make_build(items=(item("Amulet", "Amulet", "Damage Penetrates 10% Elemental Resistances"),))
    assert check_jewelry_upgrades(build) == []


def test_sparse_build_gear_suggestions():
    suggestions = suggest_gear_improvements(make_build(level=1), make_analysis(offense="low"))
    descriptions = [s.description for s in suggestions]
    assert len(descriptions) == 15 + 3 + 1 + 1
    assert descriptions[15:] == [
        "Increase fire resistance (75% more needed)",
        "Increase cold resistance (75% more needed)",
        "Increase lightning resistance (75% more needed)",
        "Increase chaos resistance (60% more recommended)",
        "Increase maximum life (5000 more needed to reach 5000)",
    ]
