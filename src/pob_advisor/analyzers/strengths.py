"""Strength detection: keystones, defenses, offenses and utilities.

Each detector returns its findings in the order they are checked; the
analysis lists them keystones first, then defenses, offenses, utilities.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pob_advisor.analyzers.stat_lookup import (
    first_stat_containing,
    format_number,
    iter_affixes,
    life_and_es,
    resistances,
)
from pob_advisor.models.build import ParsedBuild


KEYSTONE_STRENGTHS = {
    "Chaos Inoculation": "Chaos immunity from Chaos Inoculation",
    "Mind Over Matter": "Mind Over Matter - 30% of damage taken from Mana before Life",
    "Eldritch Battery": "Eldritch Battery - Energy Shield protects Mana",
    "Iron Reflexes": "Iron Reflexes - All Evasion converted to Armor",
    "Elemental Overload": "Elemental Overload - 40% more elemental damage for less crit",
    "Point Blank": "Point Blank - Close-range projectile damage bonus",
    "Phase Acrobatics": "Phase Acrobatics - 30% chance to dodge spells",
    "Acrobatics": "Acrobatics - 30% chance to dodge attacks",
    "Resolute Technique": "Resolute Technique - Hits can't be evaded",
    "Unwavering Stance": "Unwavering Stance - Cannot be stunned",
    "Vaal Pact": "Vaal Pact - Instant life leech",
    "Ghost Reaver": "Ghost Reaver - Energy Shield leech instead of Life",
}

# Abbreviations only match a whole name or id; "ci" is a substring of too many names.
KEYSTONE_ABBREVIATIONS = {
    "ci": KEYSTONE_STRENGTHS["Chaos Inoculation"],
    "mom": KEYSTONE_STRENGTHS["Mind Over Matter"],
}

BLOCK_CHANCE = re.compile(r"\+(\d+)%? (?:block chance|chance to block)", re.IGNORECASE)
SPELL_SUPPRESSION = re.compile(r"\+([1-9][0-9])% chance to suppress spell damage", re.IGNORECASE)
HIGH_ARMOUR = re.compile(r"\+([5-9][0-9][0-9]|1[0-9][0-9][0-9]) to armour", re.IGNORECASE)
HIGH_EVASION = re.compile(r"\+([5-9][0-9][0-9]|1[0-9][0-9][0-9]) to evasion rating", re.IGNORECASE)
CRIT_MULTIPLIER = re.compile(r"\+(\d+)%? to critical strike multiplier", re.IGNORECASE)
INCREASED_DAMAGE = re.compile(r"\+?(\d+)% increased (?:damage|attack damage|spell damage)", re.IGNORECASE)
MORE_DAMAGE = re.compile(r"\+?(\d+)% more (?:damage|attack damage|spell damage)", re.IGNORECASE)

DAMAGE_SUPPORT_WORDS = ("damage", "attack", "spell", "elemental", "multistrike")
MOVEMENT_SKILLS = (
    "flicker strike",
    "flame dash",
    "lightning dash",
    "whirling blades",
    "shield charge",
    "leap slam",
    "blink arrow",
)
CURSE_SUPPORTS = ("blasphemy", "curse on hit", "aura")
AURA_SUPPORTS = ("aura", "banner", "herald")
REGEN_STATS = ("life regeneration", "life regen", "energy shield regeneration", "es regen")
LEECH_STATS = ("life leech", "energy shield leech", "mana leech")


@dataclass(slots=True)
class StrengthDetection:
    keystones: list[str] = field(default_factory=list)
    defenses: list[str] = field(default_factory=list)
    offenses: list[str] = field(default_factory=list)
    utilities: list[str] = field(default_factory=list)

    @property
    def strengths(self) -> list[str]:
        return self.keystones + self.defenses + self.offenses + self.utilities


def detect_keystones(build: ParsedBuild) -> list[str]:
    found = []
    for keystone in build.passives.keystones:
        name = keystone.name.lower()
        description = KEYSTONE_ABBREVIATIONS.get(name) or KEYSTONE_ABBREVIATIONS.get(keystone.id.lower())
        if description is None:
            description = next(
                (text for key, text in KEYSTONE_STRENGTHS.items() if key.lower() in name),
                None,
            )
        if description is not None:
            found.append(description)
        elif keystone.name:
            found.append(f"Keystone: {keystone.name}")
    return found


def detect_defensive_strengths(build: ParsedBuild) -> list[str]:
    strengths = []
    res = resistances(build)
    elements = [("Fire", res["fire"]), ("Cold", res["cold"]), ("Lightning", res["lightning"])]
    capped = [label for label, value in elements if value >= 75]
    if len(capped) == 3:
        strengths.append("75% all elemental resistances (capped)")
    elif capped:
        strengths.append(f"{', '.join(capped)} resistance capped at 75%")
    if res["chaos"] >= 60:
        strengths.append(f"High chaos resistance ({format_number(res['chaos'])}%)")

    life, energy_shield = life_and_es(build)
    if life > 5000:
        strengths.append(f"Very high life pool ({format_number(life)})")
    elif life > 3500:
        strengths.append(f"High life pool ({format_number(life)})")
    if energy_shield > 5000:
        strengths.append(f"Very high energy shield ({format_number(energy_shield)})")
    elif energy_shield > 3500:
        strengths.append(f"High energy shield ({format_number(energy_shield)})")

    max_block = 0
    suppression = 0
    for affix in iter_affixes(build):
        block = BLOCK_CHANCE.search(affix.text)
        if block:
            max_block = max(max_block, int(block.group(1)))
        suppress = SPELL_SUPPRESSION.search(affix.text)
        if suppress:
            suppression = max(suppression, int(suppress.group(1)))
        if HIGH_ARMOUR.search(affix.text) and "High armor from gear" not in strengths:
            strengths.append("High armor from gear")
        if HIGH_EVASION.search(affix.text) and "High evasion from gear" not in strengths:
            strengths.append("High evasion from gear")

    if max_block >= 75:
        strengths.append("Maximum block chance (75%)")
    elif max_block >= 50:
        strengths.append(f"High block chance ({max_block}%)")
    if suppression >= 80:
        strengths.append("High spell suppression chance")
    return strengths


def detect_offensive_strengths(build: ParsedBuild) -> list[str]:
    strengths = []
    damage_supports = sum(
        1
        for skill in build.skills
        for support in skill.supports
        if any(word in support.name.lower() for word in DAMAGE_SUPPORT_WORDS)
    )
    if damage_supports >= 5:
        strengths.append("Many damage support gems (high damage output)")

    more_count = 0
    high_increased = 0
    for affix in iter_affixes(build):
        if MORE_DAMAGE.search(affix.text):
            more_count += 1
        increased = INCREASED_DAMAGE.search(affix.text)
        if increased and int(increased.group(1)) >= 50:
            high_increased += 1
        crit = CRIT_MULTIPLIER.search(affix.text)
        if crit and int(crit.group(1)) >= 30:
            note = "High critical strike multiplier from gear"
            if note not in strengths:
                strengths.append(note)

    if more_count >= 2:
        strengths.append("Multiple 'more damage' modifiers")
    if high_increased >= 3:
        strengths.append("Many high-value increased damage modifiers")

    for skill in build.skills:
        if skill.is_main_skill and skill.link_count >= 6:
            strengths.append(f"6-link main skill ({skill.skill_name})")
            break
    return strengths


def detect_utility_strengths(build: ParsedBuild) -> list[str]:
    strengths = []
    speed = first_stat_containing(build.stats, "movement speed", "move speed") or 0.0
    if speed > 30:
        strengths.append(f"High movement speed ({format_number(speed)}%)")
    elif speed > 15:
        strengths.append(f"Moderate movement speed ({format_number(speed)}%)")

    has_movement = any(
        any(ms in skill.skill_name.lower() for ms in MOVEMENT_SKILLS) for skill in build.skills
    )
    support_names = [s.name.lower() for skill in build.skills for s in skill.supports]
    has_curse = any(any(c in name for c in CURSE_SUPPORTS) for name in support_names)
    has_aura = any(any(a in name for a in AURA_SUPPORTS) for name in support_names)

    if has_movement:
        strengths.append("Movement skill for mobility")
    if has_curse:
        strengths.append("Curse setup for debuffing enemies")
    if has_aura:
        strengths.append("Aura setup for buffs")

    stat_names = [stat.name.lower() for stat in build.stats]
    if any(any(r in name for r in REGEN_STATS) for name in stat_names):
        strengths.append("Health/ES regeneration for sustain")
    if any(any(l in name for l in LEECH_STATS) for name in stat_names):
        strengths.append("Life/ES leech for sustain")
    return strengths


def detect_strengths(build: ParsedBuild) -> StrengthDetection:
    return StrengthDetection(
        keystones=detect_keystones(build),
        defenses=detect_defensive_strengths(build),
        offenses=detect_offensive_strengths(build),
        utilities=detect_utility_strengths(build),
    )
