"""Merge generator output into the final suggestion list.

Stages run in a fixed order and each returns a new list:

    rescore -> deduplicate -> sort -> cap

Rescoring promotes suggestions whose description names a critical
weakness and demotes ``important`` ones the build's ratings make less
pressing. Sorting is by priority, then category order, and is stable.
The per-category cap never drops a ``critical`` suggestion.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from pob_advisor.models.analysis import (
    SUGGESTION_CATEGORIES,
    BuildAnalysis,
    Suggestion,
)
from pob_advisor.models.build import ParsedBuild
from pob_advisor.suggesters.gear_suggester import suggest_gear_improvements
from pob_advisor.suggesters.gem_suggester import suggest_gem_improvements
from pob_advisor.suggesters.passive_suggester import suggest_passive_improvements
from pob_advisor.suggesters.utility_suggester import suggest_utility_improvements


DEFAULT_MAX_PER_CATEGORY = 5

CRITICAL_PHRASES = (
    "uncapped",
    "low life",
    "no chaos",
    "low energy shield",
    "vulnerable",
    "empty",
)
STRONG_DEFENSE = ("tanky", "uber_viable")

GENERATORS = (
    suggest_gem_improvements,
    suggest_passive_improvements,
    suggest_gear_improvements,
    suggest_utility_improvements,
)


def rescore(suggestion: Suggestion, analysis: BuildAnalysis) -> Suggestion:
    if suggestion.priority == "critical":
        return suggestion
    description = suggestion.description.lower()
    if any(phrase in description for phrase in CRITICAL_PHRASES):
        return replace(suggestion, priority="critical")
    if suggestion.priority != "important":
        return suggestion
    if suggestion.category in ("passives", "gear") and analysis.defensive_rating in STRONG_DEFENSE:
        return replace(suggestion, priority="optional")
    if suggestion.category == "gems" and analysis.offensive_rating == "extreme":
        return replace(suggestion, priority="optional")
    return suggestion


def rescore_all(suggestions: Iterable[Suggestion], analysis: BuildAnalysis) -> list[Suggestion]:
    return [rescore(s, analysis) for s in suggestions]


def deduplicate(suggestions: Iterable[Suggestion]) -> list[Suggestion]:
    seen: set[tuple[str, str]] = set()
    unique = []
    for suggestion in suggestions:
        key = (suggestion.category, suggestion.description)
        if key not in seen:
            seen.add(key)
            unique.append(suggestion)
    return unique


def _category_rank(category: str) -> int:
    try:
        return SUGGESTION_CATEGORIES.index(category)
    except ValueError:
        return len(SUGGESTION_CATEGORIES)


def sort_suggestions(suggestions: Iterable[Suggestion]) -> list[Suggestion]:
    return sorted(suggestions, key=lambda s: (-s.weight, _category_rank(s.category)))


def cap_per_category(
    suggestions: Iterable[Suggestion],
    max_per_category: int = DEFAULT_MAX_PER_CATEGORY,
) -> list[Suggestion]:
    """Keep at most ``max_per_category`` per category; criticals always stay and still count."""
    counts: dict[str, int] = {}
    kept = []
    for suggestion in suggestions:
        count = counts.get(suggestion.category, 0)
        if count < max_per_category or suggestion.priority == "critical":
            kept.append(suggestion)
            counts[suggestion.category] = count + 1
    return kept


def aggregate_suggestions(
    suggestions: Iterable[Suggestion],
    analysis: BuildAnalysis,
    max_per_category: int = DEFAULT_MAX_PER_CATEGORY,
) -> list[Suggestion]:
    staged = rescore_all(suggestions, analysis)
    staged = deduplicate(staged)
    staged = sort_suggestions(staged)
    return cap_per_category(staged, max_per_category)


def generate_suggestions(build: ParsedBuild, analysis: BuildAnalysis) -> list[Suggestion]:
    """Raw output of every generator, in generator order."""
    return [s for generator in GENERATORS for s in generator(build, analysis)]


def suggest_improvements(
    build: ParsedBuild,
    analysis: BuildAnalysis,
    max_per_category: int = DEFAULT_MAX_PER_CATEGORY,
) -> list[Suggestion]:
    return aggregate_suggestions(generate_suggestions(build, analysis), analysis, max_per_category)
