"""Tests for the JSON payload converters."""

import json

import pytest

from pob_advisor.models.errors import BuildCodeError, ErrorCode
from pob_advisor.models.gear import GEAR_SLOTS
from pob_advisor.service.payloads import (
    analysis_from_payload,
    analysis_payload,
    build_from_payload,
    build_payload,
    character_from_payload,
    gear_from_payload,
    skill_from_payload,
    stat_from_payload,
    suggestion_payload,
)
from pob_advisor.suggesters.aggregator import suggest_improvements

from tests.factories import CI, item, make_analysis, make_build, skill, stats


def _build():
    return make_build(
        keystones=(CI,),
        skills=(skill("Spark", "Spell Echo Support", main=True),),
        items=(item("Ring1", "Coral Ring", "+40 to maximum Life"),),
        stat_values=stats(Life=1, Energy_Shield=7000),
    )


# ---------------------------------------------------------------------------
# Outgoing
# ---------------------------------------------------------------------------


def test_build_payload_shape():
    payload = build_payload(_build())
    assert set(payload) == {
        "buildId", "version", "gameVersion", "character", "skills",
        "passives", "gear", "stats", "parsedAt",
    }
    assert payload["character"] == {"class": "Witch", "ascendancy": None, "level": 90, "league": None}
    assert payload["skills"][0] == {
        "id": "skill-1",
        "skillName": "Spark",
        "gemLevel": 20,
        "quality": 0,
        "supports": [{"name": "Spell Echo Support", "gemLevel": 20, "quality": 20}],
        "linkCount": 2,
        "isMainSkill": True,
    }
    assert payload["passives"]["totalPoints"] == 1
    assert payload["passives"]["keystones"] == [
        {"id": "16226", "name": "Chaos Inoculation", "effect": "Maximum Life becomes 1"}
    ]
    assert payload["passives"]["version"] == "unknown"
    assert [g["slot"] for g in payload["gear"]] == list(GEAR_SLOTS)
    ring = payload["gear"][GEAR_SLOTS.index("Ring1")]
    assert ring["itemName"] == "Coral Ring"
    assert ring["affixes"] == [
        {"type": "explicit", "text": "+40 to maximum Life", "value": 40, "unparsed": False}
    ]
    assert payload["stats"][1] == {"name": "Energy Shield", "value": 7000.0, "source": "explicit"}


def test_payloads_are_json_serializable():
    build = _build()
    analysis = make_analysis(weaknesses=("Low life pool (1) - vulnerable to burst damage",))
    suggestions = suggest_improvements(build, analysis)
    json.dumps(build_payload(build))
    json.dumps(analysis_payload(analysis))
    json.dumps([suggestion_payload(s) for s in suggestions])


def test_suggestion_payload_keys():
    suggestion = suggest_improvements(make_build(), make_analysis())[0]
    assert set(suggestion_payload(suggestion)) == {
        "category", "priority", "description", "specificAction", "expectedImpact",
    }


# ---------------------------------------------------------------------------
# Incoming
# ---------------------------------------------------------------------------


def test_build_round_trips_through_payload():
    build = _build()
    assert build_from_payload(build_payload(build)) == build


def test_analysis_round_trips_through_payload():
    analysis = make_analysis(strengths=("Strong",), weaknesses=("Weak",), defense="tanky")
    assert analysis_from_payload(analysis_payload(analysis)) == analysis


def test_build_must_be_an_object():
    with pytest.raises(BuildCodeError) as excinfo:
        build_from_payload(["not", "a", "build"])
    assert excinfo.value.code is ErrorCode.MISSING_REQUIRED_FIELD
    assert excinfo.value.message == "build must be an object"
    assert excinfo.value.details == "got list"


def test_missing_build_fields_are_listed():
    payload = build_payload(make_build())
    del payload["gear"]
    del payload["stats"]
    with pytest.raises(BuildCodeError) as excinfo:
        build_from_payload(payload)
    assert excinfo.value.message == "build is missing required fields"
    assert excinfo.value.details == "gear, stats"


def test_wrong_sequence_type():
    payload = build_payload(make_build())
    payload["skills"] = {"skillName": "Spark"}
    with pytest.raises(BuildCodeError, match="build.skills must be a list"):
        build_from_payload(payload)


def test_gear_normalized_to_every_slot():
    slots = gear_from_payload([
        {"slot": "Belt", "itemName": "Stygian Vise"},
        {"slot": "Belt", "itemName": "Leather Belt"},
        {"slot": "Trinket", "itemName": "Charm"},
    ])
    assert [s.slot for s in slots] == list(GEAR_SLOTS)
    belt = slots[GEAR_SLOTS.index("Belt")]
    assert belt.item_name == "Stygian Vise"
    assert sum(1 for s in slots if not s.is_empty) == 1


def test_character_defaults_and_clamping():
    character = character_from_payload({"className": "Ranger", "level": 250})
    assert character.class_name == "Ranger"
    assert character.level == 100
    assert character_from_payload({"level": "x"}).class_name == "Witch"
    assert character_from_payload({"level": -5}).level == 1


def test_skill_defaults():
    setup = skill_from_payload({}, 2)
    assert setup.id == "skill-3"
    assert setup.skill_name == "Unknown"
    assert setup.gem_level == 1
    assert setup.supports == ()


def test_stat_value_coercion():
    assert stat_from_payload({"name": "Life", "value": "4200"}).value == 4200.0
    assert stat_from_payload({"name": "Life", "value": None}).value == 0.0


def test_analysis_requires_fields():
    with pytest.raises(BuildCodeError) as excinfo:
        analysis_from_payload({"weaknesses": [], "playstyleType": "clear"})
    assert excinfo.value.code is ErrorCode.MISSING_REQUIRED_FIELD
    assert excinfo.value.details == "defensiveRating, offensiveRating"
