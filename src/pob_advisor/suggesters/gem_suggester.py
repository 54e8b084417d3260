"""Gem setup suggestions: missing supports, clashing supports, links, levels."""

from __future__ import annotations

from dataclasses import dataclass

from pob_advisor.models.analysis import BuildAnalysis, Suggestion
from pob_advisor.models.build import ParsedBuild, SkillSetup


MAX_LINKS = 6
LEVEL_UP_BELOW = 18
QUALITY_UP_BELOW = 15

# Keyed by a fragment of the active skill name; first match wins.
CRITICAL_SUPPORTS = {
    "kinetic blast": ("multistrike", "greater multiple projectiles", "elemental damage", "controlled destruction"),
    "tornado shot": ("greater multiple projectiles", "chain", "elemental damage", "vicious projectiles"),
    "spark": ("arcane potency", "controlled destruction", "greater multiple projectiles", "spell cascade"),
    "ice spear": ("greater multiple projectiles", "elemental damage", "controlled destruction", "hypothermia"),
    "lightning arrow": ("greater multiple projectiles", "chain", "elemental damage", "vicious projectiles"),
}
DEFAULT_ATTACK_SUPPORTS = ("multistrike", "melee splash", "elemental damage with attacks", "ruthless")
DEFAULT_SPELL_SUPPORTS = ("controlled destruction", "elemental damage", "greater multiple projectiles", "efficacy")
ATTACK_WORDS = ("attack", "strike", "slam")


@dataclass(frozen=True, slots=True)
class SupportClash:
    gems: tuple[str, ...]
    reason: str
    alternative: str


INEFFICIENT_COMBINATIONS = (
    SupportClash(
        gems=("elemental damage with attacks", "physical to lightning"),
        reason="Reduces physical damage without enough added lightning",
        alternative="replace Physical to Lightning with Added Fire or Melee Physical Damage",
    ),
    SupportClash(
        gems=("controlled destruction", "elemental focus"),
        reason="Cannot shock/freeze/ignite with both supports",
        alternative="choose one based on build needs (more damage vs ailments)",
    ),
    SupportClash(
        gems=("multiple projectiles", "lesser multiple projectiles"),
        reason="Redundant projectile supports",
        alternative="replace LMP with GMP or a damage support",
    ),
)


def _gem(priority: str, description: str, action: str, impact: str) -> Suggestion:
    return Suggestion(
        category="gems",
        priority=priority,
        description=description,
        specific_action=action,
        expected_impact=impact,
    )


def critical_supports_for(skill_name: str) -> tuple[str, ...]:
    lowered = skill_name.lower()
    for fragment, supports in CRITICAL_SUPPORTS.items():
        if fragment in lowered:
            return supports
    if any(word in lowered for word in ATTACK_WORDS):
        return DEFAULT_ATTACK_SUPPORTS
    return DEFAULT_SPELL_SUPPORTS


def _support_names(skill: SkillSetup) -> list[str]:
    return [support.name.lower() for support in skill.supports]


def check_critical_supports(build: ParsedBuild) -> list[Suggestion]:
    suggestions = []
    for skill in build.skills:
        if not skill.is_main_skill or skill.link_count >= MAX_LINKS:
            continue
        names = _support_names(skill)
        for support in critical_supports_for(skill.skill_name):
            if any(support in name for name in names):
                continue
            suggestions.append(_gem(
                "important",
                f"Add {support} to {skill.skill_name}",
                f"Insert {support} in {skill.skill_name} link "
                f"(available socket: {skill.link_count + 1}/{MAX_LINKS})",
                "Increases damage output significantly",
            ))
    return suggestions


def check_inefficient_combinations(build: ParsedBuild) -> list[Suggestion]:
    suggestions = []
    for skill in build.skills:
        names = _support_names(skill)
        for clash in INEFFICIENT_COMBINATIONS:
            if all(any(gem in name for name in names) for gem in clash.gems):
                suggestions.append(_gem(
                    "optional",
                    f"Inefficient support combination in {skill.skill_name}",
                    clash.alternative,
                    clash.reason,
                ))
    return suggestions


def check_link_count(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    if analysis.offensive_rating != "low":
        return []
    suggestions = []
    for skill in build.skills:
        if skill.is_main_skill and skill.link_count < 5:
            suggestions.append(_gem(
                "important",
                f"Upgrade {skill.skill_name} to higher link setup",
                f"Find {skill.skill_name} a {skill.link_count + 1}-link item "
                f"(current: {skill.link_count}-link)",
                "Each additional link adds a support gem, increasing damage by 20-50%",
            ))
    return suggestions


def check_gem_levels(build: ParsedBuild) -> list[Suggestion]:
    suggestions = []
    for skill in build.skills:
        if skill.is_main_skill and skill.gem_level < LEVEL_UP_BELOW:
            suggestions.append(_gem(
                "optional",
                f"Level up {skill.skill_name} gem",
                f"Gain experience to level {skill.skill_name} from {skill.gem_level} to 20",
                "Significant damage increase as gem levels add flat damage and multipliers",
            ))
        for support in skill.supports:
            if support.gem_level < LEVEL_UP_BELOW and support.quality < QUALITY_UP_BELOW:
                suggestions.append(_gem(
                    "optional",
                    f"Level up and quality {support.name}",
                    f"Gain experience to level {support.name} from {support.gem_level} to 20, "
                    "then use Gemcutter's for 20% quality",
                    "Higher gem levels increase support effectiveness by 10-30%",
                ))
    return suggestions


def suggest_gem_improvements(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    return [
        *check_critical_supports(build),
        *check_inefficient_combinations(build),
        *check_link_count(build, analysis),
        *check_gem_levels(build),
    ]
