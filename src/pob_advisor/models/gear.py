"""Equipped gear: the fifteen fixed slots and the affixes on each item.

A build always carries every slot in ``GEAR_SLOTS`` order. Unequipped
slots hold an "Empty" placeholder instead of being omitted, so consumers
can index by slot without checking for missing entries.
"""

from dataclasses import dataclass, field


GEAR_SLOTS: tuple[str, ...] = (
    "Weapon1",
    "Weapon2",
    "Helmet",
    "BodyArmour",
    "Gloves",
    "Boots",
    "Amulet",
    "Ring1",
    "Ring2",
    "Belt",
    "Flask1",
    "Flask2",
    "Flask3",
    "Flask4",
    "Flask5",
)

FLASK_SLOTS: tuple[str, ...] = tuple(s for s in GEAR_SLOTS if s.startswith("Flask"))

EMPTY_ITEM_NAME = "Empty"

AFFIX_KINDS = ("explicit", "implicit", "corrupted-implicit")


@dataclass(frozen=True, slots=True)
class Affix:
    """One modifier line on an item."""
    kind: str                   # explicit | implicit | corrupted-implicit
    text: str                   # modifier text as shown in PoB
    value: int | None = None    # first integer in the text, if any
    unparsed: bool = False      # True when no number could be read from text


@dataclass(frozen=True, slots=True)
class GearSlot:
    slot: str
    item_name: str = EMPTY_ITEM_NAME
    base_type: str = ""         # e.g. "Glorious Plate"
    item_class: str = ""        # e.g. "Body Armour"
    affixes: tuple[Affix, ...] = field(default_factory=tuple)
    implicit: str | None = None
    corrupted: bool = False
    influences: tuple[str, ...] = field(default_factory=tuple)  # "Shaper", "Elder", ...

    @property
    def is_empty(self) -> bool:
        return self.item_name == EMPTY_ITEM_NAME

    @property
    def is_flask(self) -> bool:
        return self.slot in FLASK_SLOTS


def empty_slot(slot: str) -> GearSlot:
    """Placeholder for an unequipped slot."""
    return GearSlot(slot=slot)
