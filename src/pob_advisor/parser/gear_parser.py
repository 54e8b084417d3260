"""Gear extraction from the <Gear> (or PoB's <Items>) section.

Two shapes are understood. Explicit items carry their slot and mods as
markup:

    <Gear>
      <Item slot="Helmet" baseType="Hubris Circlet" itemClass="Helmets">
        Mind Spiral
        <mods><mod str="+85 to maximum Life"/></mods>
      </Item>
    </Gear>

PoB's own export stores the item as text and assigns slots separately:

    <Items>
      <Item id="1">
        Rarity: RARE
        Mind Spiral
        Hubris Circlet
        Implicits: 1
        +12% to Fire Resistance
        +85 to maximum Life
        Corrupted
      </Item>
      <Slot name="Helmet" itemId="1"/>
    </Items>

The result always has the fifteen GEAR_SLOTS in order. The first item
assigned to a slot wins; items with no resolvable slot are dropped.
"""

import re
from xml.etree.ElementTree import Element

from pob_advisor.models.gear import (
    FLASK_SLOTS,
    GEAR_SLOTS,
    Affix,
    GearSlot,
    empty_slot,
)
from pob_advisor.parser.values import is_true, optional_text, text_of


INFLUENCES = (
    "Shaper",
    "Elder",
    "Crusader",
    "Hunter",
    "Redeemer",
    "Warlord",
    "Searing Exarch",
    "Eater of Worlds",
)

_SLOT_BY_KEY = {slot.lower(): slot for slot in GEAR_SLOTS}
_FIRST_INT = re.compile(r"-?\d+")
_IMPLICITS = re.compile(r"^Implicits:\s*(\d+)$", re.IGNORECASE)
_MOD_PREFIX = re.compile(r"^(\{[^}]*\})+")
_HEADER_LINE = re.compile(r"^[A-Za-z][A-Za-z ]*:\s")


def normalize_slot(raw: str | None) -> str | None:
    """Map "Body Armour", "ring 1", "Flask1" ... to a GEAR_SLOTS value."""
    if not raw:
        return None
    return _SLOT_BY_KEY.get(raw.replace(" ", "").lower())


def parse_affix(text: str, kind: str = "explicit") -> Affix:
    match = _FIRST_INT.search(text)
    value = int(match.group(0)) if match else None
    return Affix(kind=kind, text=text, value=value, unparsed=value is None)


# --- Item text blocks ---


class _ItemText:
    """Fields read from a PoB item text block."""

    __slots__ = ("name", "base_type", "implicits", "explicits", "corrupted", "influences")

    def __init__(self, text: str | None) -> None:
        self.name: str | None = None
        self.base_type = ""
        self.implicits: list[str] = []
        self.explicits: list[str] = []
        self.corrupted = False
        self.influences: list[str] = []

        lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
        if not lines:
            return

        rarity = None
        if lines[0].lower().startswith("rarity:"):
            rarity = lines.pop(0).split(":", 1)[1].strip().upper()
        if not lines:
            return

        self.name = lines[0]
        if rarity in {"RARE", "UNIQUE", "RELIC"} and len(lines) > 1 and not _HEADER_LINE.match(lines[1]):
            self.base_type = lines[1]

        implicit_at = next((i for i, line in enumerate(lines) if _IMPLICITS.match(line)), None)
        if implicit_at is None:
            self._scan_flags(lines)
            return

        count = int(_IMPLICITS.match(lines[implicit_at]).group(1))
        mods = lines[implicit_at + 1:]
        for position, line in enumerate(mods):
            if self._is_flag(line):
                continue
            cleaned = _MOD_PREFIX.sub("", line).strip()
            if not cleaned:
                continue
            if position < count:
                self.implicits.append(cleaned)
            else:
                self.explicits.append(cleaned)
        self._scan_flags(lines)

    def _is_flag(self, line: str) -> bool:
        lowered = line.lower()
        return lowered == "corrupted" or any(lowered == f"{inf.lower()} item" for inf in INFLUENCES)

    def _scan_flags(self, lines: list[str]) -> None:
        for line in lines:
            lowered = line.lower()
            if lowered == "corrupted":
                self.corrupted = True
            for influence in INFLUENCES:
                if lowered == f"{influence.lower()} item" and influence not in self.influences:
                    self.influences.append(influence)


# --- Markup items ---


def _markup_affixes(item: Element) -> list[Affix]:
    affixes = []
    for mod in item.findall("mods/mod") + item.findall("Mod"):
        text = text_of(mod.get("str")) or text_of(mod.text)
        if (mod.get("type") or "").lower() == "implicit":
            kind = "implicit"
        elif is_true(mod.get("corrupted")):
            kind = "corrupted-implicit"
        else:
            kind = "explicit"
        affixes.append(parse_affix(text, kind))
    return affixes


def _markup_influences(item: Element) -> list[str]:
    found = [part.strip() for part in (item.get("influences") or "").split(",") if part.strip()]
    for child in item.findall("Influence"):
        name = optional_text(child.text) or optional_text(child.get("name"))
        if name is not None:
            found.append(name)
    for influence in INFLUENCES:
        attr = influence.replace(" ", "")
        if is_true(item.get(attr)) or is_true(item.get(attr.lower())):
            found.append(influence)
    return found


def _direct_text(item: Element) -> str:
    # Only the item's own text, not the text of its <mods> children.
    return item.text or ""


def parse_item(item: Element, slot: str) -> GearSlot | None:
    block = _ItemText(_direct_text(item))
    name = optional_text(item.get("name")) or block.name
    if name is None:
        return None

    affixes = [parse_affix(t, "implicit") for t in block.implicits]
    affixes += [parse_affix(t) for t in block.explicits]
    affixes += _markup_affixes(item)

    implicit = optional_text(item.get("implicit"))
    if implicit is None:
        implicit = next((a.text for a in affixes if a.kind != "explicit"), None)

    influences: list[str] = []
    for influence in block.influences + _markup_influences(item):
        if influence not in influences:
            influences.append(influence)

    return GearSlot(
        slot=slot,
        item_name=name,
        base_type=optional_text(item.get("baseType")) or block.base_type,
        item_class=text_of(item.get("itemClass")),
        affixes=tuple(affixes),
        implicit=implicit,
        corrupted=is_true(item.get("corrupted")) or block.corrupted,
        influences=tuple(influences),
    )


# --- Slot assignment ---


def _slot_assignments(section: Element) -> dict[str, str]:
    """PoB <Slot name="Helmet" itemId="3"/> entries, keyed by item id."""
    by_item: dict[str, str] = {}
    for entry in section.iter("Slot"):
        slot = normalize_slot(entry.get("name"))
        item_id = text_of(entry.get("itemId"))
        if slot is not None and item_id and item_id != "0":
            by_item.setdefault(item_id, slot)
    return by_item


def _infer_slot(item: Element, taken: dict[str, GearSlot]) -> str | None:
    label = " ".join(
        filter(None, [item.get("name"), item.get("baseType"), _ItemText(_direct_text(item)).name])
    ).lower()
    if "flask" not in label:
        return None
    for slot in FLASK_SLOTS:
        if slot not in taken:
            return slot
    return None


def parse_gear(section: Element | None) -> list[GearSlot]:
    if section is None:
        return [empty_slot(slot) for slot in GEAR_SLOTS]

    slot_by_item = _slot_assignments(section)
    taken: dict[str, GearSlot] = {}
    for item in section.iter("Item"):
        slot = normalize_slot(item.get("slot"))
        if slot is None:
            slot = slot_by_item.get(text_of(item.get("id")))
        if slot is None:
            slot = _infer_slot(item, taken)
        if slot is None or slot in taken:
            continue
        parsed = parse_item(item, slot)
        if parsed is not None:
            taken[slot] = parsed

    return [taken.get(slot) or empty_slot(slot) for slot in GEAR_SLOTS]
