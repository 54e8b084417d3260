"""Gear suggestions: empty slots, resist caps, life/ES, weapon and jewelry."""

from __future__ import annotations

import math
import re

from pob_advisor.analyzers.offensive import round_half_up
from pob_advisor.analyzers.stat_lookup import (
    format_number,
    has_chaos_inoculation,
    life_and_es,
    resistances,
)
from pob_advisor.models.analysis import BuildAnalysis, Suggestion
from pob_advisor.models.build import ParsedBuild
from pob_advisor.models.gear import FLASK_SLOTS, GearSlot


RESIST_CAP = 75
CHAOS_RESIST_TARGET = 60
LIFE_FLOOR = 4000
LIFE_TARGET = 5000
ES_TARGET = 4000
CI_ES_TARGET = 6000
ES_BUILD_THRESHOLD = 2000
LIFE_SLOTS = 8

# Defensive upgrade order; flasks follow in slot order.
SLOT_PRIORITY = (
    "Ring1",
    "Ring2",
    "Amulet",
    "Helmet",
    "Boots",
    "Gloves",
    "Belt",
    "BodyArmour",
    "Weapon1",
    "Weapon2",
    *FLASK_SLOTS,
)

LOW_TIER_BODY_BASES = ("quilted jacket", "common coat", "garb", "robe")
HIGH_LIFE_ROLL = re.compile(r"\+([7-9][0-9]|1[0-9][0-9]) to maximum life", re.IGNORECASE)
HIGH_RESIST_ROLL = re.compile(r"\+([3-9][0-9])% to (fire|cold|lightning) resistance", re.IGNORECASE)


def _gear(priority: str, description: str, action: str, impact: str) -> Suggestion:
    return Suggestion(
        category="gear",
        priority=priority,
        description=description,
        specific_action=action,
        expected_impact=impact,
    )


def _improvement(current: float, target: float) -> str:
    if current <= 0:
        return "significantly"
    return f"by {round_half_up((target - current) / current * 100)}%"


def _equipped(build: ParsedBuild, slot: str) -> GearSlot | None:
    entry = build.gear_slot(slot)
    if entry is None or entry.is_empty:
        return None
    return entry


def check_empty_slots(build: ParsedBuild) -> list[Suggestion]:
    suggestions = []
    for slot in SLOT_PRIORITY:
        entry = build.gear_slot(slot)
        if entry is None or entry.is_empty:
            suggestions.append(_gear(
                "critical",
                f"Empty gear slot: {slot}",
                f"Fill {slot} with an appropriate item for your build",
                "Missing gear slot significantly reduces stats and defenses",
            ))
    return suggestions


def check_resistance_gear(build: ParsedBuild) -> list[Suggestion]:
    suggestions = []
    res = resistances(build)
    for element in ("fire", "cold", "lightning"):
        value = res[element]
        if value >= RESIST_CAP:
            continue
        needed = format_number(RESIST_CAP - value)
        suggestions.append(_gear(
            "critical",
            f"Increase {element} resistance ({needed}% more needed)",
            f"Find Rings/Amulet/Boots with {needed}%+ {element} resistance "
            "(prioritize high elemental resist gear)",
            f"Reaches 75% {element} resistance cap, reducing {element} damage taken by "
            f"{round_half_up((RESIST_CAP - value) * 4)}%",
        ))

    if res["chaos"] < CHAOS_RESIST_TARGET and not has_chaos_inoculation(build):
        needed = format_number(CHAOS_RESIST_TARGET - res["chaos"])
        suggestions.append(_gear(
            "important",
            f"Increase chaos resistance ({needed}% more recommended)",
            "Find Amulet/Rings with chaos resistance or craft on gear",
            "Increases chaos resistance toward 60%, reducing chaos damage taken",
        ))
    return suggestions


def check_life_es_gear(build: ParsedBuild) -> list[Suggestion]:
    suggestions = []
    life, energy_shield = life_and_es(build)
    ci = has_chaos_inoculation(build)

    if not ci and life < LIFE_FLOOR:
        needed = LIFE_TARGET - life
        per_slot = math.ceil(needed / LIFE_SLOTS)
        suggestions.append(_gear(
            "critical",
            f"Increase maximum life ({format_number(needed)} more needed to reach {LIFE_TARGET})",
            f"Upgrade {min(3, math.ceil(per_slot / 30))} gear slots with +{per_slot}+ life affixes "
            "(target: +70+ life per slot)",
            f"Increases life pool to {LIFE_TARGET}+, improving survivability "
            f"{_improvement(life, LIFE_TARGET)}",
        ))

    if ci or energy_shield > ES_BUILD_THRESHOLD:
        target = CI_ES_TARGET if ci else ES_TARGET
        if energy_shield < target:
            needed = target - energy_shield
            per_slot = math.ceil(needed / LIFE_SLOTS)
            suggestions.append(_gear(
                "critical" if ci else "important",
                f"Increase maximum energy shield ({format_number(needed)} more needed to reach {target})",
                f"Upgrade {min(3, math.ceil(per_slot / 50))} gear slots with +{per_slot}+ ES affixes "
                "(prioritize high ES base types)",
                f"Increases energy shield to {target}+, improving survivability "
                f"{_improvement(energy_shield, target)}",
            ))
    return suggestions


def check_gear_quality(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    suggestions = []
    if analysis.offensive_rating == "low":
        if _equipped(build, "Weapon1") or _equipped(build, "Weapon2"):
            suggestions.append(_gear(
                "important",
                "Upgrade weapon for higher damage output",
                "Find weapon with higher base DPS and elemental damage prefixes",
                "Weapon base damage scales all damage, increasing total DPS by 30-50%",
            ))

    body = _equipped(build, "BodyArmour")
    if body is not None and body.base_type:
        base = body.base_type.lower()
        if any(tier in base for tier in LOW_TIER_BODY_BASES):
            suggestions.append(_gear(
                "important",
                "Upgrade body armor to higher tier base",
                "Find body armor with higher base defenses (Glorious Plate, Varnished Coat, etc.)",
                "Higher tier bases provide significantly more armor/ES/evasion",
            ))
    return suggestions


def check_jewelry_upgrades(build: ParsedBuild) -> list[Suggestion]:
    suggestions = []
    for slot, label in (("Ring1", "Ring 1"), ("Ring2", "Ring 2")):
        ring = _equipped(build, slot)
        if ring is None:
            continue
        high_life = any(HIGH_LIFE_ROLL.search(a.text) for a in ring.affixes)
        high_resist = any(HIGH_RESIST_ROLL.search(a.text) for a in ring.affixes)
        if not (high_life and high_resist):
            suggestions.append(_gear(
                "important",
                f"Upgrade {label} with better affixes",
                f"Find {label} with high life (+70+) and elemental resistances (+35%+ each)",
                "Rings are excellent sources of life and resistances",
            ))

    amulet = _equipped(build, "Amulet")
    if amulet is not None:
        texts = [a.text.lower() for a in amulet.affixes]
        if not any("damage" in t or "penetration" in t for t in texts):
            suggestions.append(_gear(
                "optional",
                "Upgrade amulet with damage affixes",
                "Find amulet with elemental damage, spell damage, or penetration",
                "Amulet can provide significant damage boosts",
            ))
    return suggestions


def suggest_gear_improvements(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    return [
        *check_empty_slots(build),
        *check_resistance_gear(build),
        *check_life_es_gear(build),
        *check_gear_quality(build, analysis),
        *check_jewelry_upgrades(build),
    ]
