"""Offensive rating (low / moderate / high / extreme) and damage type.

DPS is taken from an explicit "DPS"/"damage per second" stat when the
build has one. Otherwise it is a rough estimate, not a simulation:

    dps = (1000 + 10 * added) * (1 + increased / 100) * more * level_mult

``added`` averages "Adds X to Y ... Damage" gear rolls, ``increased`` sums
"N% increased ... damage" rolls, ``more`` multiplies gear "N% more" rolls
with 1.2 per damage-flavoured support and 1.4 per support named "more",
and ``level_mult`` is 1 + (level - 1) * 0.05.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from pob_advisor.analyzers.keywords import DAMAGE_TYPES, ELEMENTS, count_damage_types
from pob_advisor.analyzers.stat_lookup import first_stat_containing, iter_affixes
from pob_advisor.models.build import ParsedBuild


ADDED_DAMAGE = re.compile(r"(\d+)\s*to\s*(\d+)\s*\w*\s*damage", re.IGNORECASE)
INCREASED = re.compile(r"(\d+)%\s*increased", re.IGNORECASE)
MORE = re.compile(r"(\d+)%\s*more", re.IGNORECASE)

DAMAGE_SUPPORT_WORDS = ("damage", "melee", "attack", "spell", "elemental")
DAMAGE_SUPPORT_MULTIPLIER = 1.2
MORE_SUPPORT_MULTIPLIER = 1.4

# (upper bound, rating); anything at or above the last bound is "extreme".
DPS_THRESHOLDS = (
    (100_000, "low"),
    (500_000, "moderate"),
    (1_000_000, "high"),
)

_RATING_NOTES = {
    "extreme": "Extreme DPS output - very high damage build",
    "high": "High DPS - strong offensive capability",
    "moderate": "Moderate DPS - average damage output",
    "low": "Low DPS - damage output may need improvement",
}

_TYPE_NOTES = {
    "Elemental": "Elemental damage: benefits from elemental penetration and resistance lowering",
    "Chaos": "Chaos damage: bypasses energy shield, effective against many enemies",
    "Physical": "Physical damage: can be mitigated by armor, consider adding elemental conversion",
}


@dataclass(slots=True)
class OffensiveAnalysis:
    rating: str
    estimated_dps: int
    damage_type: str
    damage_sources: list[str] = field(default_factory=list)
    details: list[str] = field(default_factory=list)


def identify_damage_type(build: ParsedBuild) -> str:
    counts = count_damage_types(build)
    best_type, best_count = "unknown", 0.0
    for damage_type in DAMAGE_TYPES:
        count = counts.get(damage_type, 0.0)
        if count > best_count:
            best_type, best_count = damage_type, count

    elemental = sum(counts.get(e, 0.0) for e in ELEMENTS)
    if elemental >= 2 and elemental == best_count:
        return "Elemental"
    return best_type


def estimate_dps(build: ParsedBuild) -> int:
    explicit = first_stat_containing(build.stats, "dps", "damage per second")
    if explicit is not None:
        return round_half_up(explicit)

    added = 0.0
    increased = 0
    more = 1.0
    for affix in iter_affixes(build):
        text = affix.text.lower()
        if "added" in text and ("damage" in text or "attacks" in text):
            match = ADDED_DAMAGE.search(text)
            if match:
                added += (int(match.group(1)) + int(match.group(2))) / 2
        if "increased" in text and "damage" in text:
            match = INCREASED.search(text)
            if match:
                increased += int(match.group(1))
        if "% more" in text:
            match = MORE.search(text)
            if match:
                more *= 1 + int(match.group(1)) / 100

    for skill in build.skills:
        for support in skill.supports:
            name = support.name.lower()
            if any(word in name for word in DAMAGE_SUPPORT_WORDS):
                more *= DAMAGE_SUPPORT_MULTIPLIER
            if "more" in name:
                more *= MORE_SUPPORT_MULTIPLIER

    base = 1000 + added * 10
    level_multiplier = 1 + (build.character.level - 1) * 0.05
    return round_half_up(base * (1 + increased / 100) * more * level_multiplier)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify_offense(dps: float) -> str:
    for bound, rating in DPS_THRESHOLDS:
        if dps < bound:
            return rating
    return "extreme"


def identify_damage_sources(build: ParsedBuild) -> list[str]:
    sources = []
    for skill in build.skills:
        if not skill.is_main_skill:
            continue
        supports = ", ".join(s.name for s in skill.supports)
        sources.append(f"{skill.skill_name} (supported by: {supports})" if supports else skill.skill_name)
    if not sources:
        sources = [skill.skill_name for skill in build.skills]
    return sources


def format_dps(dps: float) -> str:
    if dps >= 1_000_000:
        return f"{dps / 1_000_000:.2f}M"
    return f"{dps / 1000:.0f}k"


def analyze_offense(build: ParsedBuild) -> OffensiveAnalysis:
    damage_type = identify_damage_type(build)
    dps = estimate_dps(build)
    rating = classify_offense(dps)
    sources = identify_damage_sources(build)

    details = [
        f"Estimated DPS: {format_dps(dps)}",
        f"Primary damage type: {damage_type}",
    ]
    if sources:
        details.append(f"Main damage source(s): {', '.join(sources[:2])}")
    details.append(_RATING_NOTES[rating])
    if damage_type in _TYPE_NOTES:
        details.append(_TYPE_NOTES[damage_type])

    return OffensiveAnalysis(
        rating=rating,
        estimated_dps=dps,
        damage_type=damage_type,
        damage_sources=sources,
        details=details,
    )
