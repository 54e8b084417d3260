"""Playstyle detection: clear, boss, hybrid or unknown."""

from __future__ import annotations

from dataclasses import dataclass, field

from pob_advisor.analyzers.keywords import BOSS_DAMAGE, CLEAR_SPEED, KeywordTable, score_keywords
from pob_advisor.analyzers.stat_lookup import format_number, movement_speed
from pob_advisor.models.build import ParsedBuild


AOE_SUPPORT_BONUS = 20
CONCENTRATED_EFFECT_PENALTY = 15


@dataclass(slots=True)
class PlaystyleDetection:
    type: str
    confidence: float
    clear_score: float = 0.0
    boss_score: float = 0.0
    indicators: list[str] = field(default_factory=list)
    reasoning: list[str] = field(default_factory=list)


def classify_playstyle(clear: float, boss: float, move_speed: float) -> tuple[str, float]:
    """(type, confidence) from the two scores; first matching rule wins."""
    if clear + boss < 1:
        return "unknown", 0.3
    if clear > boss * 1.5 and move_speed > 20:
        return "clear", 0.8
    if boss > clear * 1.5:
        return "boss", 0.8
    if abs(clear - boss) < 3:
        return "hybrid", 0.7
    if clear > boss:
        return "clear", 0.6
    return "boss", 0.6


def area_of_effect(build: ParsedBuild) -> int:
    total = 0
    for skill in build.skills:
        for support in skill.supports:
            name = support.name.lower()
            if "area of effect" in name or "increased aoe" in name:
                total += AOE_SUPPORT_BONUS
            if "concentrated effect" in name:
                total -= CONCENTRATED_EFFECT_PENALTY
    return total


def _supports_matching(build: ParsedBuild, table: KeywordTable) -> list[str]:
    names: list[str] = []
    for skill in build.skills:
        for support in skill.supports:
            lowered = support.name.lower()
            if any(k in lowered for k in table.gems) and support.name not in names:
                names.append(support.name)
    return names


def _indicators(build: ParsedBuild, move_speed: float, aoe: int) -> list[str]:
    indicators = []
    speed = format_number(move_speed)
    if move_speed > 30:
        indicators.append(f"High movement speed ({speed}%)")
    elif move_speed > 15:
        indicators.append(f"Moderate movement speed ({speed}%)")
    elif move_speed > 0:
        indicators.append(f"Low movement speed ({speed}%)")

    if aoe > 30:
        indicators.append(f"Large area of effect (+{aoe}%)")
    elif aoe < -10:
        indicators.append(f"Small area of effect ({aoe}%) - single target focus")

    clear_gems = _supports_matching(build, CLEAR_SPEED)
    if clear_gems:
        indicators.append(f"Clear speed gems: {', '.join(clear_gems[:3])}")
    boss_gems = _supports_matching(build, BOSS_DAMAGE)
    if boss_gems:
        indicators.append(f"Single-target gems: {', '.join(boss_gems[:3])}")
    return indicators


def _reasoning(kind: str, clear: float, boss: float) -> list[str]:
    if kind == "clear":
        return [
            f"Build focuses on clear speed (score: {clear:.1f}) over boss damage ({boss:.1f})",
            "Optimized for mapping and general content",
        ]
    if kind == "boss":
        return [
            f"Build focuses on single-target damage (score: {boss:.1f}) over clear speed ({clear:.1f})",
            "Optimized for boss fights and hard content",
        ]
    if kind == "hybrid":
        return [
            f"Build balances clear speed ({clear:.1f}) and boss damage ({boss:.1f})",
            "Capable of both mapping and bossing",
        ]
    return [
        "Insufficient indicators to determine playstyle",
        "Build may be incomplete or use unconventional mechanics",
    ]


def detect_playstyle(build: ParsedBuild) -> PlaystyleDetection:
    clear = score_keywords(build, CLEAR_SPEED).score
    boss = score_keywords(build, BOSS_DAMAGE).score
    move_speed = movement_speed(build)
    kind, confidence = classify_playstyle(clear, boss, move_speed)
    return PlaystyleDetection(
        type=kind,
        confidence=confidence,
        clear_score=clear,
        boss_score=boss,
        indicators=_indicators(build, move_speed, area_of_effect(build)),
        reasoning=_reasoning(kind, clear, boss),
    )
