"""Tests for rescoring, de-duplication, ordering and capping of suggestions."""

import pytest

from pob_advisor.models.analysis import Suggestion
from pob_advisor.suggesters import aggregate_suggestions, suggest_improvements
from pob_advisor.suggesters.aggregator import (
    cap_per_category,
    deduplicate,
    rescore,
    sort_suggestions,
)

from tests.factories import make_analysis, make_build, skill


def _s(category: str, priority: str, description: str = "Do something") -> Suggestion:
    return Suggestion(
        category=category,
        priority=priority,
        description=description,
        specific_action="action",
        expected_impact="impact",
    )


# ---------------------------------------------------------------------------
# Rescoring
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "description",
    [
        "Fix uncapped resistances",
        "Low life everywhere",
        "Empty gear slot: Belt",
        "You are vulnerable to chaos",
        "No chaos protection",
    ],
)
def test_critical_phrases_promote(description):
    promoted = rescore(_s("utility", "optional", description), make_analysis())
    assert promoted.priority == "critical"
    assert promoted.description == description


def test_critical_is_never_changed():
    original = _s("gear", "critical", "Increase fire resistance")
    assert rescore(original, make_analysis(defense="uber_viable")) is original


def test_strong_defense_demotes_gear_and_passives():
    analysis = make_analysis(defense="tanky")
    assert rescore(_s("gear", "important"), analysis).priority == "optional"
    assert rescore(_s("passives", "important"), analysis).priority == "optional"
    assert rescore(_s("utility", "important"), analysis).priority == "important"
    assert rescore(_s("gems", "important"), analysis).priority == "important"


def test_extreme_offense_demotes_gems():
    analysis = make_analysis(offense="extreme")
    assert rescore(_s("gems", "important"), analysis).priority == "optional"
    assert rescore(_s("gear", "important"), analysis).priority == "important"


def test_rescore_does_not_mutate_input():
    original = _s("gear", "important")
    rescore(original, make_analysis(defense="tanky"))
    assert original.priority == "important"


# ---------------------------------------------------------------------------
# Dedupe, sort, cap
# ---------------------------------------------------------------------------


def test_deduplicate_keeps_first_per_category_and_description():
    first = _s("gear", "optional", "Same")
    result = deduplicate([first, _s("gear", "critical", "Same"), _s("utility", "optional", "Same")])
    assert result[0] is first
    assert [(s.category, s.priority) for s in result] == [("gear", "optional"), ("utility", "optional")]


def test_sort_by_priority_then_category_and_stable():
    items = [
        _s("utility", "important", "u1"),
        _s("gems", "critical", "g1"),
        _s("gear", "important", "a1"),
        _s("gear", "important", "a2"),
        _s("passives", "optional", "p1"),
        _s("gear", "critical", "a3"),
    ]
    assert [s.description for s in sort_suggestions(items)] == ["a3", "g1", "a1", "a2", "u1", "p1"]


def test_cap_keeps_every_critical():
    items = [_s("gear", "critical", f"c{i}") for i in range(7)] + [_s("gear", "important", "i0")]
    kept = cap_per_category(items, 5)
    assert [s.description for s in kept] == [f"c{i}" for i in range(7)]


def test_cap_counts_criticals_toward_limit():
    items = [_s("gear", "critical", "c0"), _s("gear", "critical", "c1")]
    items += [_s("gear", "important", f"i{i}") for i in range(6)]
    items += [_s("utility", "optional", f"u{i}") for i in range(3)]
    kept = cap_per_category(items, 5)
    assert [s.description for s in kept] == ["c0", "c1", "i0", "i1", "i2", "u0", "u1", "u2"]


def test_aggregate_is_idempotent():
    analysis = make_analysis(defense="tanky", offense="extreme")
    items = [
        _s("gems", "important", "Add support"),
        _s("gear", "optional", "Empty gear slot: Belt"),
        _s("gear", "important", "Upgrade ring"),
        _s("gear", "important", "Upgrade ring"),
        _s("utility", "important", "Utility tip"),
    ] + [_s("passives", "optional", f"Passive {i}") for i in range(8)]
    once = aggregate_suggestions(items, analysis)
    assert aggregate_suggestions(once, analysis) == once
    assert once[0].description == "Empty gear slot: Belt"
    assert sum(1 for s in once if s.category == "passives") == 5


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------


def test_sparse_build_suggestions():
    build = make_build(level=1, class_name="Marauder", skills=(skill("Cleave"),))
    analysis = make_analysis(
        weaknesses=(
            "Low life pool (0) - vulnerable to burst damage",
            "Uncapped fire resistance (0% - need 75% more)",
        ),
        defense="glass_cannon",
        offense="low",
    )
    suggestions = suggest_improvements(build, analysis)

    criticals = [s for s in suggestions if s.priority == "critical"]
    assert len([s for s in criticals if s.description.startswith("Empty gear slot")]) == 15
    assert suggestions[0].description == "Empty gear slot: Ring1"
    assert all(s.priority == "critical" for s in suggestions[: len(criticals)])
    assert not any(
        s.description == "Increase chaos resistance (60% more recommended)" for s in suggestions
    )
    life = next(s for s in suggestions if s.description.startswith("Increase maximum life"))
    assert life.expected_impact.endswith("significantly")
    assert sum(1 for s in suggestions if s.category == "utility") == 5
    assert len(suggestions) == 27
