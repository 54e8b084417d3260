"""Keyword tables and the scorer that reads them.

The classifiers recognise playstyle and damage type from substrings of
skill, support, passive and stat names. The substrings live here as
data; ``score_keywords`` is the only code that walks a build with them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pob_advisor.models.build import ParsedBuild


SKILL_WEIGHT = 2.0
SUPPORT_WEIGHT = 1.0
PASSIVE_WEIGHT = 1.0
STAT_WEIGHT = 0.5


@dataclass(frozen=True, slots=True)
class KeywordTable:
    name: str
    gems: tuple[str, ...]           # matched against skill and support names
    passives: tuple[str, ...]       # matched against notable names
    stats: tuple[str, ...]          # matched against stat names
    stat_threshold: float           # stat value must exceed this to count


@dataclass(slots=True)
class KeywordScore:
    score: float = 0.0
    matched: list[str] = field(default_factory=list)  # keywords, first match order


CLEAR_SPEED = KeywordTable(
    name="clear",
    gems=(
        "melee splash",
        "greater multiple projectiles",
        "lesser multiple projectiles",
        "chain",
        "pierce",
        "fork",
        "area of effect",
        "increased aoe",
        "ancestral call",
        "vicious projectiles",
    ),
    passives=(
        "area of effect",
        "movement speed",
        "attack speed",
        "cast speed",
        "cooldown recovery",
        "clear speed",
        "incursion",
        "delirium",
    ),
    stats=("movement speed", "attack speed", "cast speed", "area of effect", "radius"),
    stat_threshold=20,
)

BOSS_DAMAGE = KeywordTable(
    name="boss",
    gems=(
        "concentrated effect",
        "elemental focus",
        "controlled destruction",
        "single target",
        "brutality",
        "fire penetration",
        "cold penetration",
        "lightning penetration",
        "elemental penetration",
        "bane",
        "wither",
    ),
    passives=(
        "single target",
        "damage",
        "critical strike",
        "critical multiplier",
        "penetration",
        "spell damage",
        "attack damage",
        "projectile damage",
    ),
    stats=("critical strike chance", "critical strike multiplier", "penetration"),
    stat_threshold=30,
)

# Order matters: ties on count go to the type listed first.
DAMAGE_TYPES: dict[str, tuple[str, ...]] = {
    "Fire": ("fire", "burn", "ignite"),
    "Cold": ("cold", "freeze", "chill", "frostbite"),
    "Lightning": ("lightning", "shock", "arc"),
    "Chaos": ("chaos", "doom", "wither"),
    "Physical": ("physical", "bleed", "impale"),
    "Elemental": ("elemental", "elemental damage"),
}

ELEMENTS = ("Fire", "Cold", "Lightning")


def contains_any(text: str, keywords: tuple[str, ...] | list[str]) -> bool:
    lowered = text.lower()
    return any(k in lowered for k in keywords)


def score_keywords(build: ParsedBuild, table: KeywordTable) -> KeywordScore:
    """Score a build against one keyword table.

    Each keyword counts once across skills, supports and notables, at the
    weight of the first place it is found. Every stat above the table's
    threshold adds ``STAT_WEIGHT`` per keyword it contains.
    """
    result = KeywordScore()

    def _credit(name: str, keywords: tuple[str, ...], weight: float) -> None:
        lowered = name.lower()
        for keyword in keywords:
            if keyword in lowered and keyword not in result.matched:
                result.matched.append(keyword)
                result.score += weight

    for skill in build.skills:
        _credit(skill.skill_name, table.gems, SKILL_WEIGHT)
        for support in skill.supports:
            _credit(support.name, table.gems, SUPPORT_WEIGHT)

    for node in build.passives.notables:
        _credit(node.name, table.passives, PASSIVE_WEIGHT)

    for stat in build.stats:
        lowered = stat.name.lower()
        for keyword in table.stats:
            if keyword in lowered and stat.value > table.stat_threshold:
                result.score += STAT_WEIGHT

    return result


def count_damage_types(build: ParsedBuild) -> dict[str, float]:
    """Damage-type keyword hits: 1 per skill name hit, 0.5 per support hit."""
    counts: dict[str, float] = {}

    def _count(name: str, weight: float) -> None:
        lowered = name.lower()
        for damage_type, keywords in DAMAGE_TYPES.items():
            for keyword in keywords:
                if keyword in lowered:
                    counts[damage_type] = counts.get(damage_type, 0.0) + weight

    for skill in build.skills:
        _count(skill.skill_name, 1.0)
        for support in skill.supports:
            _count(support.name, 0.5)
    return counts
