"""Defensive rating: glass_cannon, moderate, tanky or uber_viable.

Effective life is energy shield for Chaos Inoculation builds and the
larger of life and energy shield otherwise. Ratings are checked from the
top down and the first match wins:

    uber_viable   effective life > 5000, all elemental res >= 75,
                  armour or evasion > 10000
    tanky         effective life > 4000, all elemental res >= 75
    moderate      effective life > 2500, lowest elemental res >= 50
    glass_cannon  everything else
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pob_advisor.analyzers.stat_lookup import (
    ES_AFFIX,
    LIFE_AFFIX,
    format_number,
    has_chaos_inoculation,
    iter_affixes,
    stat_named,
)
from pob_advisor.models.build import ParsedBuild


RESIST_CAP = 75

_RATING_NOTES = {
    "uber_viable": "Build capable of uber boss fights with high defenses",
    "tanky": "Strong defensive layers for endgame content",
    "moderate": "Moderate defenses - may struggle in hard content",
    "glass_cannon": "Low defenses - relies on offense or avoidance",
}


@dataclass(slots=True)
class DefensiveStats:
    life: float = 0.0
    energy_shield: float = 0.0
    fire_resist: float = 0.0
    cold_resist: float = 0.0
    lightning_resist: float = 0.0
    chaos_resist: float = 0.0
    armour: float = 0.0
    evasion: float = 0.0

    @property
    def min_elemental_resist(self) -> float:
        return min(self.fire_resist, self.cold_resist, self.lightning_resist)

    @property
    def resists_capped(self) -> bool:
        return self.min_elemental_resist >= RESIST_CAP


@dataclass(slots=True)
class DefensiveAnalysis:
    rating: str
    stats: DefensiveStats
    chaos_inoculation: bool = False
    details: list[str] = field(default_factory=list)

    @property
    def effective_life(self) -> float:
        return effective_life(self.stats, self.chaos_inoculation)


def extract_defensive_stats(build: ParsedBuild) -> DefensiveStats:
    stats = build.stats
    result = DefensiveStats(
        life=stat_named(stats, "life", "maximum life"),
        energy_shield=stat_named(stats, "energy shield", "maximum energy shield"),
        fire_resist=stat_named(stats, "fire resistance", "fire resist"),
        cold_resist=stat_named(stats, "cold resistance", "cold resist"),
        lightning_resist=stat_named(stats, "lightning resistance", "lightning resist"),
        chaos_resist=stat_named(stats, "chaos resistance", "chaos resist"),
        armour=stat_named(stats, "armor", "armour", "base armour"),
        evasion=stat_named(stats, "evasion", "evasion rating"),
    )

    # Best effort when the build carries no numbers: sum flat gear rolls.
    if result.life == 0 or result.energy_shield == 0:
        gear_life = gear_es = 0
        for affix in iter_affixes(build):
            life_match = LIFE_AFFIX.search(affix.text)
            if life_match:
                gear_life += int(life_match.group(1))
            es_match = ES_AFFIX.search(affix.text)
            if es_match:
                gear_es += int(es_match.group(1))
        if result.life == 0:
            result.life = float(gear_life)
        if result.energy_shield == 0:
            result.energy_shield = float(gear_es)
    return result


def effective_life(stats: DefensiveStats, chaos_inoculation: bool) -> float:
    if chaos_inoculation:
        return stats.energy_shield
    return max(stats.life, stats.energy_shield)


def classify_defense(stats: DefensiveStats, chaos_inoculation: bool) -> str:
    pool = effective_life(stats, chaos_inoculation)
    if pool > 5000 and stats.resists_capped and (stats.armour > 10000 or stats.evasion > 10000):
        return "uber_viable"
    if pool > 4000 and stats.resists_capped:
        return "tanky"
    if pool > 2500 and stats.min_elemental_resist >= 50:
        return "moderate"
    return "glass_cannon"


def _details(stats: DefensiveStats, rating: str, chaos_inoculation: bool) -> list[str]:
    details = []
    life = format_number(stats.life)
    es = format_number(stats.energy_shield)

    if chaos_inoculation:
        details.append(f"Chaos Inoculation: {es} Energy Shield (chaos immune)")
    else:
        line = f"Life: {life}"
        if stats.life > 0:
            line += " (primary defense)"
        if stats.energy_shield > 0:
            line += f", {es} Energy Shield"
        details.append(line)

    if stats.resists_capped:
        details.append("All elemental resistances capped at 75%")
    else:
        uncapped = [
            f"{label} ({format_number(value)}%)"
            for label, value in (
                ("Fire", stats.fire_resist),
                ("Cold", stats.cold_resist),
                ("Lightning", stats.lightning_resist),
            )
            if value < RESIST_CAP
        ]
        details.append(f"Uncapped resistances: {', '.join(uncapped)}")

    if stats.chaos_resist > 0:
        capped = " (capped)" if stats.chaos_resist >= RESIST_CAP else ""
        details.append(f"Chaos resistance: {format_number(stats.chaos_resist)}%{capped}")
    elif not chaos_inoculation:
        details.append("No chaos resistance (vulnerable to chaos damage)")

    if stats.armour > 5000:
        details.append(f"High armor ({format_number(stats.armour)}): Good physical damage reduction")
    if stats.evasion > 5000:
        details.append(f"High evasion ({format_number(stats.evasion)}): Good chance to avoid attacks")

    details.append(_RATING_NOTES[rating])
    return details


def analyze_defense(build: ParsedBuild) -> DefensiveAnalysis:
    chaos_inoculation = has_chaos_inoculation(build)
    stats = extract_defensive_stats(build)
    rating = classify_defense(stats, chaos_inoculation)
    return DefensiveAnalysis(
        rating=rating,
        stats=stats,
        chaos_inoculation=chaos_inoculation,
        details=_details(stats, rating, chaos_inoculation),
    )
