"""JSON payloads for builds, analyses and suggestions.

Field names are camelCase on the wire (``skillName``, ``isMainSkill``,
``defensiveRating``). Payloads coming back from callers are validated
just enough to rebuild the frozen models; anything structurally wrong is
reported as ``MissingRequiredField``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pob_advisor.models.analysis import BuildAnalysis, Suggestion
from pob_advisor.models.build import (
    DEFAULT_CLASS,
    DEFAULT_GAME_VERSION,
    Character,
    Keystone,
    Notable,
    ParsedBuild,
    PassiveAllocation,
    SkillSetup,
    Stat,
    SupportGem,
)
from pob_advisor.models.errors import BuildCodeError, ErrorCode
from pob_advisor.models.gear import GEAR_SLOTS, Affix, GearSlot, empty_slot


BUILD_FIELDS = ("character", "skills", "passives", "gear", "stats")
ANALYSIS_FIELDS = ("weaknesses", "playstyleType", "defensiveRating", "offensiveRating")


def _missing(message: str, details: str = "") -> BuildCodeError:
    return BuildCodeError(ErrorCode.MISSING_REQUIRED_FIELD, message, details)


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise _missing(f"{where} must be an object", f"got {type(value).__name__}")
    return value


def _sequence(value: Any, where: str) -> list:
    if not isinstance(value, (list, tuple)):
        raise _missing(f"{where} must be a list", f"got {type(value).__name__}")
    return list(value)


def _require(data: Mapping[str, Any], fields: tuple[str, ...], where: str) -> None:
    missing = [name for name in fields if name not in data]
    if missing:
        raise _missing(f"{where} is missing required fields", ", ".join(missing))


def _int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _text(value: Any, default: str = "") -> str:
    return default if value is None else str(value)


# -- outgoing ---------------------------------------------------------------


def character_payload(character: Character) -> dict[str, Any]:
    return {
        "class": character.class_name,
        "ascendancy": character.ascendancy,
        "level": character.level,
        "league": character.league,
    }


def skill_payload(skill: SkillSetup) -> dict[str, Any]:
    return {
        "id": skill.id,
        "skillName": skill.skill_name,
        "gemLevel": skill.gem_level,
        "quality": skill.quality,
        "supports": [
            {"name": s.name, "gemLevel": s.gem_level, "quality": s.quality}
            for s in skill.supports
        ],
        "linkCount": skill.link_count,
        "isMainSkill": skill.is_main_skill,
    }


def passives_payload(passives: PassiveAllocation) -> dict[str, Any]:
    return {
        "totalPoints": passives.total_points,
        "nodes": list(passives.nodes),
        "keystones": [{"id": k.id, "name": k.name, "effect": k.effect} for k in passives.keystones],
        "notables": [{"id": n.id, "name": n.name, "effect": n.effect} for n in passives.notables],
        "version": passives.tree_version,
    }


def gear_payload(slot: GearSlot) -> dict[str, Any]:
    return {
        "slot": slot.slot,
        "itemName": slot.item_name,
        "baseType": slot.base_type,
        "itemClass": slot.item_class,
        "affixes": [
            {"type": a.kind, "text": a.text, "value": a.value, "unparsed": a.unparsed}
            for a in slot.affixes
        ],
        "implicit": slot.implicit,
        "corrupted": slot.corrupted,
        "influences": list(slot.influences),
    }


def build_payload(build: ParsedBuild) -> dict[str, Any]:
    return {
        "buildId": build.build_id,
        "version": build.version,
        "gameVersion": build.game_version,
        "character": character_payload(build.character),
        "skills": [skill_payload(s) for s in build.skills],
        "passives": passives_payload(build.passives),
        "gear": [gear_payload(g) for g in build.gear],
        "stats": [{"name": s.name, "value": s.value, "source": s.source} for s in build.stats],
        "parsedAt": build.parsed_at,
    }


def analysis_payload(analysis: BuildAnalysis) -> dict[str, Any]:
    return {
        "strengths": list(analysis.strengths),
        "weaknesses": list(analysis.weaknesses),
        "playstyleType": analysis.playstyle_type,
        "defensiveRating": analysis.defensive_rating,
        "offensiveRating": analysis.offensive_rating,
        "analyzedAt": analysis.analyzed_at,
    }


def suggestion_payload(suggestion: Suggestion) -> dict[str, Any]:
    return {
        "category": suggestion.category,
        "priority": suggestion.priority,
        "description": suggestion.description,
        "specificAction": suggestion.specific_action,
        "expectedImpact": suggestion.expected_impact,
    }


# -- incoming ---------------------------------------------------------------


def character_from_payload(data: Any) -> Character:
    data = _mapping(data, "build.character")
    return Character(
        class_name=_text(data.get("class") or data.get("className"), DEFAULT_CLASS),
        ascendancy=data.get("ascendancy") or None,
        level=min(max(_int(data.get("level"), 1), 1), 100),
        league=data.get("league") or None,
    )


def skill_from_payload(data: Any, index: int) -> SkillSetup:
    data = _mapping(data, f"build.skills[{index}]")
    supports = []
    for support in _sequence(data.get("supports", []), f"build.skills[{index}].supports"):
        support = _mapping(support, f"build.skills[{index}].supports[]")
        supports.append(SupportGem(
            name=_text(support.get("name"), "Unknown"),
            gem_level=_int(support.get("gemLevel"), 1),
            quality=_int(support.get("quality"), 0),
        ))
    return SkillSetup(
        id=_text(data.get("id"), f"skill-{index + 1}"),
        skill_name=_text(data.get("skillName"), "Unknown"),
        gem_level=_int(data.get("gemLevel"), 1),
        quality=_int(data.get("quality"), 0),
        supports=tuple(supports),
        is_main_skill=bool(data.get("isMainSkill", False)),
    )


def _named_nodes(values: Any, where: str, node_type: type) -> tuple:
    nodes = []
    for value in _sequence(values, where):
        value = _mapping(value, f"{where}[]")
        nodes.append(node_type(
            id=_text(value.get("id")),
            name=_text(value.get("name")),
            effect=_text(value.get("effect")),
        ))
    return tuple(nodes)


def passives_from_payload(data: Any) -> PassiveAllocation:
    data = _mapping(data, "build.passives")
    nodes = _sequence(data.get("nodes", []), "build.passives.nodes")
    return PassiveAllocation(
        nodes=tuple(str(node) for node in nodes),
        keystones=_named_nodes(data.get("keystones", []), "build.passives.keystones", Keystone),
        notables=_named_nodes(data.get("notables", []), "build.passives.notables", Notable),
        tree_version=_text(data.get("version"), "unknown"),
    )


def gear_slot_from_payload(data: Any) -> GearSlot:
    data = _mapping(data, "build.gear[]")
    affixes = []
    for affix in _sequence(data.get("affixes", []), "build.gear[].affixes"):
        affix = _mapping(affix, "build.gear[].affixes[]")
        value = affix.get("value")
        affixes.append(Affix(
            kind=_text(affix.get("type"), "explicit"),
            text=_text(affix.get("text")),
            value=None if value is None else _int(value, 0),
            unparsed=bool(affix.get("unparsed", value is None)),
        ))
    return GearSlot(
        slot=_text(data.get("slot")),
        item_name=_text(data.get("itemName"), "Empty"),
        base_type=_text(data.get("baseType")),
        item_class=_text(data.get("itemClass")),
        affixes=tuple(affixes),
        implicit=data.get("implicit"),
        corrupted=bool(data.get("corrupted", False)),
        influences=tuple(str(i) for i in _sequence(data.get("influences", []), "build.gear[].influences")),
    )


def gear_from_payload(data: Any) -> tuple[GearSlot, ...]:
    """All fifteen slots in order; slots absent from the payload come back empty."""
    by_slot: dict[str, GearSlot] = {}
    for entry in _sequence(data, "build.gear"):
        slot = gear_slot_from_payload(entry)
        if slot.slot in GEAR_SLOTS and slot.slot not in by_slot:
            by_slot[slot.slot] = slot
    return tuple(by_slot.get(name) or empty_slot(name) for name in GEAR_SLOTS)


def stat_from_payload(data: Any) -> Stat:
    data = _mapping(data, "build.stats[]")
    return Stat(
        name=_text(data.get("name")),
        value=_float(data.get("value")),
        source=_text(data.get("source"), "explicit"),
    )


def build_from_payload(data: Any) -> ParsedBuild:
    data = _mapping(data, "build")
    _require(data, BUILD_FIELDS, "build")
    return ParsedBuild(
        build_id=_text(data.get("buildId")),
        version=_text(data.get("version")),
        game_version=_text(data.get("gameVersion"), DEFAULT_GAME_VERSION),
        character=character_from_payload(data["character"]),
        skills=tuple(
            skill_from_payload(skill, i)
            for i, skill in enumerate(_sequence(data["skills"], "build.skills"))
        ),
        passives=passives_from_payload(data["passives"]),
        gear=gear_from_payload(data["gear"]),
        stats=tuple(stat_from_payload(s) for s in _sequence(data["stats"], "build.stats")),
        parsed_at=_text(data.get("parsedAt")),
    )


def analysis_from_payload(data: Any) -> BuildAnalysis:
    data = _mapping(data, "analysis")
    _require(data, ANALYSIS_FIELDS, "analysis")
    return BuildAnalysis(
        strengths=tuple(str(s) for s in _sequence(data.get("strengths", []), "analysis.strengths")),
        weaknesses=tuple(str(w) for w in _sequence(data["weaknesses"], "analysis.weaknesses")),
        playstyle_type=_text(data["playstyleType"]),
        defensive_rating=_text(data["defensiveRating"]),
        offensive_rating=_text(data["offensiveRating"]),
        analyzed_at=_text(data.get("analyzedAt")),
    )
