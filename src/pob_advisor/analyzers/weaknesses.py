"""Weakness detection: missing defensive layers, offense gaps, utility gaps."""

from __future__ import annotations

from dataclasses import dataclass, field

from pob_advisor.analyzers.stat_lookup import (
    first_stat_containing,
    format_number,
    has_chaos_inoculation,
    iter_affixes,
    life_and_es,
    resistances,
    stat_containing,
)
from pob_advisor.models.build import ParsedBuild


LOW_LIFE = 3000
LOW_ENERGY_SHIELD = 2000
RESIST_CAP = 75
LOW_CHAOS_RESIST = 0
LOW_MOVEMENT_SPEED = 15
LOW_MITIGATION = 2000

NO_WEAKNESSES = "No obvious weaknesses detected - well-rounded build"

SINGLE_ELEMENT_WORDS = ("fire", "cold", "lightning", "chaos", "physical")
CURSES = (
    "blasphemy",
    "curse on hit",
    "vulnerability",
    "elemental weakness",
    "frostbite",
    "conductivity",
    "flammability",
    "despair",
    "enfeeble",
    "temporal chains",
    "punishment",
)
MOVEMENT_SKILLS = (
    "flicker strike",
    "flame dash",
    "lightning dash",
    "whirling blades",
    "shield charge",
    "leap slam",
    "blink arrow",
    "dash",
)
GUARD_SKILLS = ("steelskin", "guardian", "molten shell", "immortal call", "arctic armour")


@dataclass(slots=True)
class WeaknessDetection:
    defenses: list[str] = field(default_factory=list)
    offenses: list[str] = field(default_factory=list)
    utilities: list[str] = field(default_factory=list)

    @property
    def weaknesses(self) -> list[str]:
        found = self.defenses + self.offenses + self.utilities
        return found or [NO_WEAKNESSES]


def detect_defensive_weaknesses(build: ParsedBuild) -> list[str]:
    weaknesses = []
    res = resistances(build)
    life, energy_shield = life_and_es(build)
    armour = 0.0
    for stat in build.stats:
        if "armour" in stat.name.lower() or "armor" in stat.name.lower():
            armour = stat.value
    evasion = stat_containing(build.stats, "evasion")
    ci = has_chaos_inoculation(build)

    if not ci and life < LOW_LIFE:
        weaknesses.append(f"Low life pool ({format_number(life)}) - vulnerable to burst damage")
    elif ci and energy_shield < LOW_ENERGY_SHIELD:
        weaknesses.append(f"Low energy shield ({format_number(energy_shield)}) for CI build")

    for element in ("fire", "cold", "lightning"):
        value = res[element]
        if value < RESIST_CAP:
            weaknesses.append(
                f"Uncapped {element} resistance ({format_number(value)}% - "
                f"need {format_number(RESIST_CAP - value)}% more)"
            )

    if not ci and res["chaos"] <= LOW_CHAOS_RESIST:
        weaknesses.append(
            f"No chaos resistance ({format_number(res['chaos'])}%) - vulnerable to chaos damage"
        )

    if armour < LOW_MITIGATION and evasion < LOW_MITIGATION and not ci:
        weaknesses.append("Low armor and evasion - poor physical damage mitigation")

    has_block = has_suppression = False
    for affix in iter_affixes(build):
        text = affix.text.lower()
        if "block" in text and "%" in text:
            has_block = True
        if "suppress" in text and "spell" in text:
            has_suppression = True
    if not has_block and not has_suppression and armour < 5000:
        weaknesses.append("No block or spell suppression - relies solely on life/ES")
    return weaknesses


def detect_offensive_weaknesses(build: ParsedBuild) -> list[str]:
    weaknesses = []
    seen_types: list[str] = []
    for skill in build.skills:
        name = skill.skill_name.lower()
        for word in SINGLE_ELEMENT_WORDS:
            if word in name and word not in seen_types:
                seen_types.append(word)
    if len(seen_types) == 1:
        weaknesses.append(
            f"Single-element damage ({seen_types[0]}) - struggles against resistant enemies"
        )

    for skill in build.skills:
        if skill.is_main_skill and skill.link_count < 5:
            weaknesses.append(
                f"Main skill in {skill.link_count}-link (recommend 6-link for max damage)"
            )

    main = build.main_skill
    if main is not None and main.supports:
        names = [s.name.lower() for s in main.supports]
        if not any("damage" in n or "more" in n for n in names):
            weaknesses.append("Main skill lacks damage support gems")

    dps = first_stat_containing(build.stats, "dps", "damage per second") or 0.0
    if 0 < dps < 100_000:
        weaknesses.append(f"Low DPS ({dps / 1000:.0f}k) - clear speed will be slow")
    return weaknesses


def detect_utility_weaknesses(build: ParsedBuild) -> list[str]:
    weaknesses = []
    gem_names = [
        name.lower()
        for skill in build.skills
        for name in (skill.skill_name, *(s.name for s in skill.supports))
    ]
    skill_names = [skill.skill_name.lower() for skill in build.skills]

    if not any(any(c in name for c in CURSES) for name in gem_names):
        weaknesses.append("No curse setup - missing enemy debuff potential")

    has_movement = any(any(m in name for m in MOVEMENT_SKILLS) for name in skill_names)
    if not has_movement:
        weaknesses.append("No movement skill - poor mobility")

    speed = first_stat_containing(build.stats, "movement speed", "move speed") or 0.0
    if not has_movement and speed < LOW_MOVEMENT_SPEED:
        weaknesses.append(f"Low movement speed ({format_number(speed)}%) - slow clear speed")

    if not any(any(g in name for g in GUARD_SKILLS) for name in skill_names):
        weaknesses.append("No guard skill - vulnerable to burst damage")

    stat_names = [stat.name.lower() for stat in build.stats]
    has_regen = any("regen" in n and ("life" in n or "energy shield" in n) for n in stat_names)
    has_leech = any("leech" in n for n in stat_names)
    if not has_regen and not has_leech:
        weaknesses.append("No life/ES regeneration or leech - poor sustain")
    return weaknesses


def detect_weaknesses(build: ParsedBuild) -> WeaknessDetection:
    return WeaknessDetection(
        defenses=detect_defensive_weaknesses(build),
        offenses=detect_offensive_weaknesses(build),
        utilities=detect_utility_weaknesses(build),
    )
