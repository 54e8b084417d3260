"""Utility suggestions: curses, movement and guard skills, mobility, flasks."""

from __future__ import annotations

from pob_advisor.analyzers.stat_lookup import MOVEMENT_STAT_NAMES, first_stat_containing
from pob_advisor.models.analysis import BuildAnalysis, Suggestion
from pob_advisor.models.build import ParsedBuild


CURSE_SKILLS = (
    "elemental weakness",
    "frostbite",
    "flammability",
    "conductivity",
    "vulnerability",
    "despair",
    "enfeeble",
    "temporal chains",
    "punishment",
    "assassin's mark",
    "warlord's mark",
    "poacher's mark",
    "proj. weakness",
    "burning ground",
    "vortex",
    "sin",
)
BLASPHEMY_CURSE_SETUP = "Blasphemy Support + curse skill in 4-link (Blasphemy, curse, curse, Enhance)"

# (skill name fragments, curse); the last matching skill decides.
CURSE_BY_DAMAGE = (
    (("fire", "burn", "ignite"), "Flammability"),
    (("cold", "freeze", "chill"), "Frostbite"),
    (("lightning", "shock"), "Conductivity"),
    (("chaos", "poison"), "Despair"),
    (("physical", "bleed"), "Vulnerability"),
)
DEFAULT_CURSE = "Elemental Weakness"

MOVEMENT_SKILLS = (
    "flame dash",
    "lightning dash",
    "flicker strike",
    "whirling blades",
    "shield charge",
    "leap slam",
    "blink arrow",
    "phase run",
)
MELEE_BASES = ("sword", "axe", "mace", "dagger", "claw")
BOW_CLASSES = ("ranger", "huntress")

GUARD_SKILLS = (
    "steelskin",
    "molten shell",
    "immortal call",
    "arctic armour",
    "guardian",
    "vigilant strike",
)

STRONG_DEFENSE = ("tanky", "uber_viable")
CLEAR_MOVEMENT_SPEED = 20


def _utility(priority: str, description: str, action: str, impact: str) -> Suggestion:
    return Suggestion(
        category="utility",
        priority=priority,
        description=description,
        specific_action=action,
        expected_impact=impact,
    )


def _skill_names(build: ParsedBuild) -> list[str]:
    return [skill.skill_name.lower() for skill in build.skills]


def suggested_curse(build: ParsedBuild) -> str:
    curse = DEFAULT_CURSE
    for name in _skill_names(build):
        for fragments, candidate in CURSE_BY_DAMAGE:
            if any(f in name for f in fragments):
                curse = candidate
                break
    return curse


def check_missing_curse(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    has_curse = any(any(c in name for c in CURSE_SKILLS) for name in _skill_names(build))
    has_blasphemy = any(
        "blasphemy" in support.name.lower()
        for skill in build.skills
        for support in skill.supports
    )

    if not has_curse:
        return [_utility(
            "important" if analysis.offensive_rating == "low" else "optional",
            "Add curse setup for damage amplification",
            f"Add {suggested_curse(build)} curse with Blasphemy Support in 3-4 link",
            "Curses increase enemy damage taken by 30-40%, significantly boosting DPS",
        )]
    if not has_blasphemy:
        return [_utility(
            "optional",
            "Consider Blasphemy Support for aura-cursing",
            BLASPHEMY_CURSE_SETUP,
            "Applies curse automatically in aura, improving clear speed",
        )]
    return []


def suggested_movement_skill(build: ParsedBuild) -> str:
    bases = [slot.base_type.lower() for slot in build.gear if not slot.is_empty]
    melee = any(any(m in base for m in MELEE_BASES) for base in bases)
    shield = any("shield" in base for base in bases)
    class_name = build.character.class_name.lower()
    if melee and shield:
        return "Shield Charge"
    if melee:
        return "Leap Slam"
    if any(c in class_name for c in BOW_CLASSES):
        return "Blink Arrow"
    return "Flame Dash"


def check_missing_movement_skill(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    if any(any(m in name for m in MOVEMENT_SKILLS) for name in _skill_names(build)):
        return []
    return [_utility(
        "important" if analysis.playstyle_type == "clear" else "optional",
        "Add movement skill for mobility",
        f"Add {suggested_movement_skill(build)} in 3-link with Faster Casting and Arcane Surge "
        "(if applicable)",
        "Significantly improves clear speed and bossing ability",
    )]


def check_missing_guard_skill(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    if any(any(g in name for g in GUARD_SKILLS) for name in _skill_names(build)):
        return []
    if analysis.defensive_rating in STRONG_DEFENSE:
        return []

    skill, reason = "Steelskin", "Provides burst damage protection"
    if analysis.playstyle_type == "clear":
        skill, reason = "Molten Shell", "Provides explosion damage and armor"
    elif analysis.defensive_rating == "glass_cannon":
        skill, reason = "Immortal Call", "Provides physical immunity duration"
    return [_utility(
        "important",
        "Add guard skill for burst damage protection",
        f"Add {skill} in 3-link with Increased Duration and Second Wind",
        f"{reason}, preventing one-shot deaths",
    )]


def check_missing_mobility_utilities(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    suggestions = []
    clearing = analysis.playstyle_type == "clear"
    speed = first_stat_containing(build.stats, *MOVEMENT_STAT_NAMES) or 0.0
    if speed < CLEAR_MOVEMENT_SPEED and clearing:
        suggestions.append(_utility(
            "optional",
            "Increase movement speed for better clear speed",
            "Find boots with +25%+ movement speed and use Quartz Flask or Fortitude buff",
            "Increases clear speed by 20-30%",
        ))

    names = _skill_names(build)
    has_phasing = any("phasing" in n or "phantom" in n for n in names)
    has_fortify = any("fortify" in n or "fortification" in n for n in names)
    if not has_phasing and clearing:
        suggestions.append(_utility(
            "optional",
            "Consider phasing utility for enemy evasion",
            "Use Quicksilver Flask of Phasing or Phase Run gem",
            "Prevents enemy hits while moving, improving clear speed",
        ))
    if not has_fortify and analysis.defensive_rating != "tanky":
        suggestions.append(_utility(
            "important",
            "Add Fortification for damage reduction",
            "Link Fortify to movement skill or use Fortification support",
            "Reduces hit damage taken by 20%, significantly improving survivability",
        ))
    return suggestions


def check_flask_upgrades(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    flasks = [slot.item_name.lower() for slot in build.gear if slot.is_flask and not slot.is_empty]
    if not flasks:
        return [_utility(
            "important",
            "Use utility flasks for buffs and defenses",
            "Equip 5 flasks: Quicksilver, Divine, Granite, Quartz, and life/mana flask",
            "Flasks provide massive temporary buffs during mapping",
        )]

    suggestions = []
    not_tanky = analysis.defensive_rating != "tanky"
    if not any("quicksilver" in f for f in flasks) and analysis.playstyle_type == "clear":
        suggestions.append(_utility(
            "optional",
            "Use Quicksilver Flask for movement speed",
            "Replace one flask with Quicksilver Flask of Adrenaline",
            "Increases movement speed by 20-40% during flask effect",
        ))
    if not any("divine" in f for f in flasks) and not_tanky:
        suggestions.append(_utility(
            "optional",
            "Use Divine Life Flask for instant recovery",
            "Replace one flask with Divine Life Flask of Staunching/Heat",
            "Instantly recovers large portion of life, preventing deaths",
        ))
    if not any("granite" in f for f in flasks) and not_tanky:
        suggestions.append(_utility(
            "optional",
            "Use Granite Flask for physical mitigation",
            "Replace one flask with Granite Flask of Iron Skin",
            "Increases armor by 6000+, reducing physical damage taken",
        ))
    return suggestions


def suggest_utility_improvements(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    return [
        *check_missing_curse(build, analysis),
        *check_missing_movement_skill(build, analysis),
        *check_missing_guard_skill(build, analysis),
        *check_missing_mobility_utilities(build, analysis),
        *check_flask_upgrades(build, analysis),
    ]
