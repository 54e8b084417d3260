"""Tests for gear extraction: slot assignment, affixes, PoB item text."""

from xml.etree.ElementTree import fromstring

from pob_advisor.models.gear import GEAR_SLOTS
from pob_advisor.parser.gear_parser import normalize_slot, parse_affix, parse_gear


def _by_slot(section_xml: str):
    return {g.slot: g for g in parse_gear(fromstring(section_xml))}


def test_always_fifteen_unique_slots():
    for section in (None, fromstring("<Gear/>")):
        result = parse_gear(section)
        assert [g.slot for g in result] == list(GEAR_SLOTS)
        assert all(g.is_empty for g in result)


def test_slot_names_are_normalized():
    assert normalize_slot("Body Armour") == "BodyArmour"
    assert normalize_slot("ring 1") == "Ring1"
    assert normalize_slot("Flask3") == "Flask3"
    assert normalize_slot("Offhand") is None
    assert normalize_slot(None) is None


def test_markup_item_with_mods():
    gear = _by_slot(
        '<Gear><Item slot="Body Armour" baseType="Glorious Plate" itemClass="Body Armour"'
        ' corrupted="true" influences="Shaper, Elder">'
        "Kaom's Heart"
        '<mods><mod str="+500 to maximum Life"/><mod str="Has no Sockets" type="implicit"/></mods>'
        "</Item></Gear>"
    )
    body = gear["BodyArmour"]
    assert body.item_name == "Kaom's Heart"
    assert body.base_type == "Glorious Plate"
    assert body.item_class == "Body Armour"
    assert body.corrupted
    assert body.influences == ("Shaper", "Elder")
    assert [(a.kind, a.value) for a in body.affixes] == [("explicit", 500), ("implicit", None)]
    assert body.affixes[1].unparsed
    assert body.implicit == "Has no Sockets"


def test_first_item_wins_a_slot():
    gear = _by_slot(
        '<Gear><Item slot="Helmet" name="First"/><Item slot="Helmet" name="Second"/></Gear>'
    )
    assert gear["Helmet"].item_name == "First"


def test_unassignable_items_are_dropped():
    gear = _by_slot('<Gear><Item name="Mystery Box"/><Item slot="Quiver" name="Arrows"/></Gear>')
    assert all(g.is_empty for g in gear.values())


def test_flasks_fill_first_free_slot():
    gear = _by_slot(
        "<Gear>"
        '<Item slot="Flask1" name="Divine Life Flask"/>'
        '<Item name="Quicksilver Flask"/>'
        '<Item name="Granite Flask"/>'
        "</Gear>"
    )
    assert gear["Flask1"].item_name == "Divine Life Flask"
    assert gear["Flask2"].item_name == "Quicksilver Flask"
    assert gear["Flask3"].item_name == "Granite Flask"
    assert gear["Flask2"].is_flask


POB_ITEMS = """
<Items>
  <Item id="1">
Rarity: RARE
Mind Spiral
Hubris Circlet
Implicits: 1
{crafted}+12% to Fire Resistance
+85 to maximum Life
+40% to Cold Resistance
Corrupted
Hunter Item
  </Item>
  <Item id="2">
Rarity: UNIQUE
Tabula Rasa
Simple Robe
Implicits: 0
  </Item>
  <ItemSet id="1">
    <Slot name="Helmet" itemId="1"/>
    <Slot name="Body Armour" itemId="2"/>
    <Slot name="Gloves" itemId="0"/>
  </ItemSet>
</Items>
"""


def test_pob_item_text_and_slot_entries():
    gear = _by_slot(POB_ITEMS)
    helmet = gear["Helmet"]
    assert helmet.item_name == "Mind Spiral"
    assert helmet.base_type == "Hubris Circlet"
    assert [(a.kind, a.text) for a in helmet.affixes] == [
        ("implicit", "+12% to Fire Resistance"),
        ("explicit", "+85 to maximum Life"),
        ("explicit", "+40% to Cold Resistance"),
    ]
    assert helmet.implicit == "+12% to Fire Resistance"
    assert helmet.corrupted
    assert helmet.influences == ("Hunter",)

    body = gear["BodyArmour"]
    assert body.item_name == "Tabula Rasa"
    assert body.base_type == "Simple Robe"
    assert body.affixes == ()
    assert gear["Gloves"].is_empty


def test_affix_value_extraction():
    assert parse_affix("+85 to maximum Life").value == 85
    assert parse_affix("-10% to Chaos Resistance").value == -10
    unparsed = parse_affix("Cannot be Frozen")
    assert unparsed.value is None
    assert unparsed.unparsed
