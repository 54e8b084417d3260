"""Passive tree suggestions.

There is no tree graph to walk, so these are rules of thumb driven by the
point count, the analysis findings and a few stat thresholds.
"""

from __future__ import annotations

from pob_advisor.models.analysis import BuildAnalysis, Suggestion
from pob_advisor.models.build import ParsedBuild


PATHING_POINT_THRESHOLD = 90
MIN_NOTABLES = 8
ES_NOTABLE_THRESHOLD = 2000
CI_ES_THRESHOLD = 3000
MOM_MANA_THRESHOLD = 500
CRIT_MULTIPLIER_THRESHOLD = 150

STRONG_DEFENSE = ("tanky", "uber_viable")


def _passive(priority: str, description: str, action: str, impact: str) -> Suggestion:
    return Suggestion(
        category="passives",
        priority=priority,
        description=description,
        specific_action=action,
        expected_impact=impact,
    )


def _mentions(analysis: BuildAnalysis, *phrases: str) -> bool:
    return any(
        phrase in weakness.lower() for weakness in analysis.weaknesses for phrase in phrases
    )


def _has_stat_over(build: ParsedBuild, fragment: str, threshold: float) -> bool:
    return any(fragment in s.name.lower() and s.value > threshold for s in build.stats)


def check_inefficient_pathing(build: ParsedBuild) -> list[Suggestion]:
    passives = build.passives
    if passives.total_points <= PATHING_POINT_THRESHOLD or len(passives.notables) >= MIN_NOTABLES:
        return []
    return [_passive(
        "optional",
        "Consider pathing to more notable passives",
        "Allocate nearby notable clusters instead of small nodes",
        "Notables provide 2-3x the value of normal nodes, improving build efficiency",
    )]


def check_missing_defensives(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    if analysis.defensive_rating in STRONG_DEFENSE:
        return []
    suggestions = []
    if _mentions(analysis, "uncapped", "resistance"):
        suggestions.append(_passive(
            "critical",
            "Allocate resistance notables on passive tree",
            "Path to resistance clusters like Nullification, Elements, or Diamond Skin",
            "Increases resistances toward 75% cap, reducing elemental damage taken by 50%+",
        ))
    if _mentions(analysis, "low life", "life pool"):
        suggestions.append(_passive(
            "critical",
            "Allocate life notables on passive tree",
            "Path to life clusters like Written in Blood or Scion life wheel",
            "Increases maximum life by 30-40%, improving survivability significantly",
        ))
    if _has_stat_over(build, "energy shield", ES_NOTABLE_THRESHOLD):
        suggestions.append(_passive(
            "important",
            "Allocate energy shield notables",
            "Path to ES clusters like Arcane Focus, Psi, or Discipline and Training",
            "Increases maximum energy shield by 20-30%",
        ))
    return suggestions


def check_missing_keystones(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    suggestions = []
    keystones = build.passives
    if (_has_stat_over(build, "energy shield", CI_ES_THRESHOLD)
            and not keystones.has_keystone("chaos inoculation")):
        suggestions.append(_passive(
            "optional",
            "Consider Chaos Inoculation keystone",
            "Path to Chaos Inoculation on passive tree (requires 100% Intelligence)",
            "Grants chaos immunity, allowing you to ignore chaos resistance",
        ))
    if (_has_stat_over(build, "mana", MOM_MANA_THRESHOLD)
            and not keystones.has_keystone("mind over matter")
            and analysis.defensive_rating != "tanky"):
        suggestions.append(_passive(
            "important",
            "Consider Mind Over Matter keystone",
            "Path to Mind Over Matter on passive tree (requires Templar start)",
            "30% of damage taken from Mana before Life, increasing effective HP by 40%+",
        ))
    return suggestions


def check_offensive_upgrades(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    suggestions = []
    if analysis.offensive_rating == "low":
        suggestions.append(_passive(
            "important",
            "Allocate damage notables on passive tree",
            "Path to damage clusters matching your skill type (spell/attack/elemental)",
            "Increases DPS by 20-40%",
        ))
    if _has_stat_over(build, "critical", CRIT_MULTIPLIER_THRESHOLD):
        suggestions.append(_passive(
            "important",
            "Allocate critical strike multiplier notables",
            "Path to crit multiplier clusters like Assassination or Outlast",
            "Increases critical strike damage by 30-50%",
        ))
    return suggestions


def suggest_passive_improvements(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    return [
        *check_inefficient_pathing(build),
        *check_missing_defensives(build, analysis),
        *check_missing_keystones(build, analysis),
        *check_offensive_upgrades(build, analysis),
    ]
