"""Character extraction from the <Build> section.

    <Build className="Witch" ascendClassName="Necromancer" level="92"
           league="Settlers"/>

Older exports use ``class``/``ascendancy`` attributes or nest them in a
<MainSocket> child; all spellings are accepted.
"""

from xml.etree.ElementTree import Element

from pob_advisor.models.build import DEFAULT_CLASS, MAX_LEVEL, MIN_LEVEL, Character
from pob_advisor.parser.values import leading_int, optional_text


_NO_ASCENDANCY = {"none", ""}


def _first_attr(elements: list[Element], *names: str) -> str | None:
    for element in elements:
        for name in names:
            value = optional_text(element.get(name))
            if value is not None:
                return value
    return None


def parse_character(section: Element | None) -> Character:
    if section is None:
        return Character()

    sources = [section]
    main_socket = section.find("MainSocket")
    if main_socket is not None:
        sources.insert(0, main_socket)

    class_name = _first_attr(sources, "className", "class") or DEFAULT_CLASS
    ascendancy = _first_attr(sources, "ascendClassName", "ascendancyName", "ascendancy")
    if ascendancy is not None and ascendancy.lower() in _NO_ASCENDANCY:
        ascendancy = None

    level = leading_int(_first_attr([section] + sources, "level"), MIN_LEVEL)
    return Character(
        class_name=class_name,
        ascendancy=ascendancy,
        level=min(MAX_LEVEL, max(MIN_LEVEL, level)),
        league=_first_attr([section], "league"),
    )
