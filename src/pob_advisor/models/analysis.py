"""Analysis and suggestion value objects.

Both are created fresh for every request and never cached.
"""

from dataclasses import dataclass, field


PLAYSTYLE_TYPES = ("clear", "boss", "hybrid", "unknown")
DEFENSIVE_RATINGS = ("glass_cannon", "moderate", "tanky", "uber_viable")
OFFENSIVE_RATINGS = ("low", "moderate", "high", "extreme")

# Category order doubles as the tie-break order when sorting suggestions.
SUGGESTION_CATEGORIES = ("gear", "passives", "gems", "utility")
PRIORITY_WEIGHT = {
    "critical": 3,
    "important": 2,
    "optional": 1,
}


@dataclass(frozen=True, slots=True)
class BuildAnalysis:
    strengths: tuple[str, ...] = field(default_factory=tuple)
    weaknesses: tuple[str, ...] = field(default_factory=tuple)
    playstyle_type: str = "unknown"
    defensive_rating: str = "glass_cannon"
    offensive_rating: str = "low"
    analyzed_at: str = ""           # ISO-8601 UTC


@dataclass(frozen=True, slots=True)
class Suggestion:
    category: str                   # gems | passives | gear | utility
    priority: str                   # critical | important | optional
    description: str
    specific_action: str
    expected_impact: str

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHT.get(self.priority, 0)
