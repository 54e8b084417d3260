"""Stat extraction from the <Stats> section.

    <Stats>
      <Stat name="Life" value="4821"/>
      <Stat name="Fire Resistance"><Value value="76"/></Stat>
      <Stat stat="TotalDPS">1250000</Stat>
    </Stats>

When the section is missing or holds no usable <Stat> entries, the six
canonical defensive stats are emitted at zero with "estimated"
provenance, so every build carries the same stat names.
"""

from xml.etree.ElementTree import Element

from pob_advisor.models.build import Stat
from pob_advisor.parser.values import leading_number, optional_text


CANONICAL_STATS = (
    "Life",
    "Energy Shield",
    "Fire Resistance",
    "Cold Resistance",
    "Lightning Resistance",
    "Chaos Resistance",
)


def default_stats() -> list[Stat]:
    return [Stat(name=name, value=0.0, source="estimated") for name in CANONICAL_STATS]


def _stat_value(entry: Element) -> float:
    for raw in (entry.get("value"), _nested_value(entry), entry.text):
        value = leading_number(raw)
        if value is not None:
            return value
    return 0.0


def _nested_value(entry: Element) -> str | None:
    nested = entry.find("Value")
    return nested.get("value") if nested is not None else None


def parse_stat(entry: Element) -> Stat | None:
    name = (
        optional_text(entry.get("name"))
        or optional_text(entry.get("stat"))
        or optional_text(entry.text)
    )
    if name is None:
        return None
    return Stat(name=name, value=_stat_value(entry), source="explicit")


def parse_stats(section: Element | None) -> list[Stat]:
    if section is None:
        return default_stats()
    stats = []
    for entry in section.iter("Stat"):
        stat = parse_stat(entry)
        if stat is not None:
            stats.append(stat)
    return stats or default_stats()
