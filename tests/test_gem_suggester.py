"""Tests for gem setup suggestions."""

from pob_advisor.suggesters.gem_suggester import (
    DEFAULT_ATTACK_SUPPORTS,
    DEFAULT_SPELL_SUPPORTS,
    check_critical_supports,
    check_gem_levels,
    check_inefficient_combinations,
    check_link_count,
    critical_supports_for,
    suggest_gem_improvements,
)

from tests.factories import make_analysis, make_build, skill


def test_support_table_lookup():
    assert critical_supports_for("Kinetic Blast")[0] == "multistrike"
    assert critical_supports_for("Vaal Spark")[0] == "arcane potency"
    assert critical_supports_for("Heavy Strike") == DEFAULT_ATTACK_SUPPORTS
    assert critical_supports_for("Ground Slam") == DEFAULT_ATTACK_SUPPORTS
    assert critical_supports_for("Arc") == DEFAULT_SPELL_SUPPORTS


def test_missing_critical_supports_on_main_skill():
    build = make_build(skills=(skill("Spark", "Controlled Destruction Support", main=True),))
    suggestions = check_critical_supports(build)
    assert [s.description for s in suggestions] == [
        "Add arcane potency to Spark",
        "Add greater multiple projectiles to Spark",
        "Add spell cascade to Spark",
    ]
    assert {s.priority for s in suggestions} == {"important"}
    assert {s.category for s in suggestions} == {"gems"}
    assert suggestions[0].specific_action == "Insert arcane potency in Spark link (available socket: 3/6)"
    assert suggestions[0].expected_impact == "Increases damage output significantly"


def test_six_link_and_secondary_skills_are_skipped():
    six_link = skill("Spark", "A", "B", "C", "D", "E", main=True)
    secondary = skill("Arc", index=2)
    assert check_critical_supports(make_build(skills=(six_link, secondary))) == []


def test_clashing_supports():
    build = make_build(skills=(skill("Fireball", "Controlled Destruction", "Elemental Focus"),))
    (suggestion,) = check_inefficient_combinations(build)
    assert suggestion.priority == "optional"
    assert suggestion.description == "Inefficient support combination in Fireball"
    assert suggestion.specific_action == "choose one based on build needs (more damage vs ailments)"
    assert suggestion.expected_impact == "Cannot shock/freeze/ignite with both supports"


def test_link_upgrade_only_for_low_offense():
    build = make_build(skills=(skill("Cleave", "Ruthless", "Fortify", main=True),))
    (suggestion,) = check_link_count(build, make_analysis(offense="low"))
    assert suggestion.description == "Upgrade Cleave to higher link setup"
    assert suggestion.specific_action == "Find Cleave a 4-link item (current: 3-link)"
    assert check_link_count(build, make_analysis(offense="moderate")) == []


def test_gem_level_suggestions():
    main = skill(
        "Cleave",
        "Ruthless",
        main=True,
        level=15,
        support_level=10,
        support_quality=0,
    )
    polished = skill("Leap Slam", "Faster Attacks", index=2, support_level=10, support_quality=20)
    suggestions = check_gem_levels(make_build(skills=(main, polished)))
    assert [s.description for s in suggestions] == [
        "Level up Cleave gem",
        "Level up and quality Ruthless",
    ]
    assert suggestions[0].specific_action == "Gain experience to level Cleave from 15 to 20"
    assert {s.priority for s in suggestions} == {"optional"}


def test_suggestions_in_check_order():
    main = skill("Fireball", "Controlled Destruction", "Elemental Focus", main=True, level=12)
    suggestions = suggest_gem_improvements(make_build(skills=(main,)), make_analysis(offense="low"))
    descriptions = [s.description for s in suggestions]
    assert descriptions == [
        "Add elemental damage to Fireball",
        "Add greater multiple projectiles to Fireball",
        "Add efficacy to Fireball",
        "Inefficient support combination in Fireball",
        "Upgrade Fireball to higher link setup",
        "Level up Fireball gem",
    ]
