"""Tests for passive tree suggestions."""

from pob_advisor.suggesters.passive_suggester import (
    check_inefficient_pathing,
    check_missing_defensives,
    check_missing_keystones,
    check_offensive_upgrades,
    suggest_passive_improvements,
)

from tests.factories import CI, MOM, make_analysis, make_build, stats


def _nodes(count: int) -> tuple[str, ...]:
    return tuple(str(1000 + i) for i in range(count))


def test_pathing_suggested_above_ninety_points():
    (suggestion,) = check_inefficient_pathing(make_build(nodes=_nodes(91)))
    assert suggestion.priority == "optional"
    assert suggestion.category == "passives"
    assert suggestion.description == "Consider pathing to more notable passives"
    assert check_inefficient_pathing(make_build(nodes=_nodes(90))) == []


def test_defensive_notables_follow_weaknesses():
    analysis = make_analysis(
        weaknesses=(
            "Low life pool (2100) - vulnerable to burst damage",
            "Uncapped cold resistance (40% - need 35% more)",
        ),
        defense="glass_cannon",
    )
    suggestions = check_missing_defensives(make_build(), analysis)
    assert [(s.priority, s.description) for s in suggestions] == [
        ("critical", "Allocate resistance notables on passive tree"),
        ("critical", "Allocate life notables on passive tree"),
    ]


def test_energy_shield_notables():
    build = make_build(stat_values=stats(Energy_Shield=2500))
    (suggestion,) = check_missing_defensives(build, make_analysis())
    assert suggestion.priority == "important"
    assert suggestion.description == "Allocate energy shield notables"


def test_strong_defense_skips_defensive_notables():
    analysis = make_analysis(weaknesses=("Low life pool (100) - vulnerable to burst damage",), defense="tanky")
    assert check_missing_defensives(make_build(stat_values=stats(Energy_Shield=9000)), analysis) == []
    analysis = make_analysis(weaknesses=analysis.weaknesses, defense="uber_viable")
    assert check_missing_defensives(make_build(), analysis) == []


def test_chaos_inoculation_for_energy_shield_builds():
    build = make_build(stat_values=stats(Energy_Shield=3500))
    (suggestion,) = check_missing_keystones(build, make_analysis())
    assert suggestion.description == "Consider Chaos Inoculation keystone"
    assert suggestion.priority == "optional"
    with_ci = make_build(keystones=(CI,), stat_values=stats(Energy_Shield=3500))
    assert check_missing_keystones(with_ci, make_analysis()) == []


def test_mind_over_matter_for_mana_builds():
    build = make_build(stat_values=stats(Mana=600))
    (suggestion,) = check_missing_keystones(build, make_analysis(defense="moderate"))
    assert suggestion.description == "Consider Mind Over Matter keystone"
    assert suggestion.priority == "important"
    assert check_missing_keystones(build, make_analysis(defense="tanky")) == []
    with_mom = make_build(keystones=(MOM,), stat_values=stats(Mana=600))
    assert check_missing_keystones(with_mom, make_analysis()) == []


def test_offensive_notables():
    build = make_build(stat_values=stats(Critical_Strike_Multiplier=320))
    suggestions = check_offensive_upgrades(build, make_analysis(offense="low"))
    assert [s.description for s in suggestions] == [
        "Allocate damage notables on passive tree",
        "Allocate critical strike multiplier notables",
    ]
    assert check_offensive_upgrades(make_build(), make_analysis(offense="high")) == []


def test_suggestions_in_check_order():
    build = make_build(nodes=_nodes(100), stat_values=stats(Energy_Shield=3200))
    analysis = make_analysis(weaknesses=("Uncapped fire resistance (0% - need 75% more)",), offense="low")
    assert [s.description for s in suggest_passive_improvements(build, analysis)] == [
        "Consider pathing to more notable passives",
        "Allocate resistance notables on passive tree",
        "Allocate energy shield notables",
        "Consider Chaos Inoculation keystone",
        "Allocate damage notables on passive tree",
    ]
