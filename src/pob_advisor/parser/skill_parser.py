"""Skill extraction from the <Skills> section.

PoB groups gems into socket groups:

    <Skills>
      <SkillSet id="1">
        <Skill mainActive="true" label="...">
          <Gem nameSpec="Spark" level="20" quality="20"/>
          <Gem nameSpec="Spell Echo" skillId="SupportSpellEcho" level="20"/>
        </Skill>
      </SkillSet>
    </Skills>

Each <Skill> becomes one SkillSetup; ids are assigned by position
("skill-1", "skill-2", ...). Gems typed "Support" (or with a Support*
skill id) are supports; the first other gem names the skill unless the
<Skill> carries its own ``name``.
"""

from xml.etree.ElementTree import Element

from pob_advisor.models.build import SkillSetup, SupportGem
from pob_advisor.parser.values import is_true, leading_int, optional_text


def _gem_name(gem: Element) -> str | None:
    return optional_text(gem.get("name")) or optional_text(gem.get("nameSpec"))


def _is_support(gem: Element) -> bool:
    if (gem.get("type") or "").strip().lower() == "support":
        return True
    return (gem.get("skillId") or gem.get("gemId") or "").startswith("Support")


def _gems(skill: Element) -> list[Element]:
    return skill.findall("Gem") + skill.findall("gems/Gem") + skill.findall("Gems/Gem")


def _active_gem(skill: Element) -> Element | None:
    explicit = skill.find("gem")
    if explicit is not None:
        return explicit
    for gem in _gems(skill):
        if not _is_support(gem):
            return gem
    return None


def parse_support(gem: Element) -> SupportGem:
    return SupportGem(
        name=_gem_name(gem) or "Unknown",
        gem_level=leading_int(gem.get("level"), 1),
        quality=leading_int(gem.get("quality"), 0),
    )


def parse_skill(skill: Element, index: int) -> SkillSetup:
    active = _active_gem(skill)
    sources = [e for e in (active, skill) if e is not None]

    name = None
    level = quality = None
    for source in sources:
        name = name or _gem_name(source)
        level = level if level is not None else source.get("level")
        quality = quality if quality is not None else source.get("quality")

    return SkillSetup(
        id=f"skill-{index + 1}",
        skill_name=name or "Unknown",
        gem_level=leading_int(level, 1),
        quality=leading_int(quality, 0),
        supports=tuple(parse_support(g) for g in _gems(skill) if _is_support(g)),
        is_main_skill=is_true(skill.get("mainActive")),
    )


def parse_skills(section: Element | None) -> list[SkillSetup]:
    if section is None:
        return []
    # iter() walks in document order, so skills inside <SkillSet> groups
    # keep their relative position.
    return [parse_skill(skill, i) for i, skill in enumerate(section.iter("Skill"))]
