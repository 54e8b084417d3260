"""Reading stat values out of a build, and filling in missing ones.

Two lookup styles are used by the analyzers: exact canonical names
("maximum life") for the defensive rating, and substring matches
("fire resist") for the detectors and suggesters. In both, when several
stats match, the last one wins.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import replace

from pob_advisor.models.build import ParsedBuild, Stat
from pob_advisor.models.gear import Affix


CHAOS_INOCULATION = "chaos inoculation"
CHAOS_INOCULATION_ID = "16226"

LIFE_AFFIX = re.compile(r"(\d+)\s*to\s*maximum life", re.IGNORECASE)
ES_AFFIX = re.compile(r"(\d+)\s*to\s*maximum energy shield", re.IGNORECASE)
MOVEMENT_AFFIX = re.compile(r"(\d+)%?\s*increased\s*movement\s*speed", re.IGNORECASE)

MOVEMENT_STAT_NAMES = ("movement speed", "move speed")


def format_number(value: float) -> str:
    """Render 4000.0 as "4000" and 12.5 as "12.5"."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def stat_named(stats: tuple[Stat, ...], *names: str) -> float:
    """Value of the last stat whose lowercase name is one of ``names``."""
    value = 0.0
    for stat in stats:
        if stat.name.lower() in names:
            value = stat.value
    return value


def stat_containing(
    stats: tuple[Stat, ...],
    fragment: str,
    *,
    exclude: str | None = None,
) -> float:
    """Value of the last stat whose name contains ``fragment``."""
    value = 0.0
    for stat in stats:
        lowered = stat.name.lower()
        if fragment in lowered and (exclude is None or exclude not in lowered):
            value = stat.value
    return value


def first_stat_containing(stats: tuple[Stat, ...], *fragments: str) -> float | None:
    for stat in stats:
        lowered = stat.name.lower()
        if any(f in lowered for f in fragments):
            return stat.value
    return None


def resistances(build: ParsedBuild) -> dict[str, float]:
    return {
        element: stat_containing(build.stats, f"{element} resist")
        for element in ("fire", "cold", "lightning", "chaos")
    }


def life_and_es(build: ParsedBuild) -> tuple[float, float]:
    """(life, energy shield) using the loose name match the detectors share."""
    life = stat_containing(build.stats, "life", exclude="regen")
    energy_shield = stat_containing(build.stats, "energy shield")
    return life, energy_shield


def iter_affixes(build: ParsedBuild) -> Iterator[Affix]:
    for slot in build.gear:
        yield from slot.affixes


def sum_affix_matches(build: ParsedBuild, pattern: re.Pattern) -> int:
    total = 0
    for affix in iter_affixes(build):
        match = pattern.search(affix.text)
        if match:
            total += int(match.group(1))
    return total


def movement_speed(build: ParsedBuild, *, from_gear: bool = True) -> float:
    """Movement speed stat, else the sum of gear "increased movement speed" affixes."""
    explicit = first_stat_containing(build.stats, *MOVEMENT_STAT_NAMES)
    if explicit is not None:
        return explicit
    return float(sum_affix_matches(build, MOVEMENT_AFFIX)) if from_gear else 0.0


def has_chaos_inoculation(build: ParsedBuild) -> bool:
    return build.passives.has_keystone(CHAOS_INOCULATION, CHAOS_INOCULATION_ID)


def estimate_missing_stats(build: ParsedBuild) -> ParsedBuild:
    """Add estimated Life / Energy Shield stats from gear when the build lacks them.

    Life is approximated as 38 + 12 per level plus "+N to maximum Life"
    affixes; energy shield as the sum of "+N to maximum Energy Shield"
    affixes. Nothing is added when the gear contributes nothing.
    """
    names = {stat.name.lower() for stat in build.stats}
    added: list[Stat] = []

    if not names & {"life", "maximum life"}:
        gear_life = sum_affix_matches(build, LIFE_AFFIX)
        if gear_life > 0:
            base_life = 38 + build.character.level * 12
            added.append(Stat(name="Life", value=float(base_life + gear_life), source="estimated"))

    if not names & {"energy shield", "maximum energy shield"}:
        gear_es = sum_affix_matches(build, ES_AFFIX)
        if gear_es > 0:
            added.append(Stat(name="Energy Shield", value=float(gear_es), source="estimated"))

    if not added:
        return build
    return replace(build, stats=build.stats + tuple(added))
