"""Structural parsing of the decoded PoB XML.

Layout of the document this module expects:

    <PathOfBuilding version="1.4.170" gameVersion="3.25.0">
        <Build .../>      character
        <Skills>...</Skills>
        <Tree>...</Tree>  passive tree
        <Gear>/<Items>    equipped items
        <Stats>...</Stats>
    </PathOfBuilding>

Build codes come from untrusted users, so the XML goes through
``defusedxml``; entity expansion and external references are rejected as
malformed input. Sections are the root's immediate children; a missing
section is not an error here, the extractors supply defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from xml.etree.ElementTree import Element, ParseError

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from pob_advisor.engine.config import MIN_POB_VERSION
from pob_advisor.models.build import DEFAULT_GAME_VERSION
from pob_advisor.models.errors import BuildCodeError, ErrorCode


ROOT_TAG = "PathOfBuilding"


@dataclass(slots=True)
class BuildDocument:
    """Parsed XML tree with section lookup by tag."""
    root: Element

    def section(self, name: str) -> Element | None:
        return self.root.find(name)

    @property
    def version(self) -> str | None:
        value = self.root.get("version")
        return value.strip() if value is not None else None

    @property
    def game_version(self) -> str:
        return (self.root.get("gameVersion") or "").strip() or DEFAULT_GAME_VERSION


def parse_document(text: str) -> BuildDocument:
    """Parse XML text and require a ``PathOfBuilding`` root."""
    try:
        root = ET.fromstring(text.lstrip("\ufeff"))
    except ParseError as exc:
        raise BuildCodeError(
            ErrorCode.MALFORMED_STRUCTURE,
            "Build XML could not be parsed",
            str(exc),
        ) from exc
    except DefusedXmlException as exc:
        raise BuildCodeError(
            ErrorCode.MALFORMED_STRUCTURE,
            "Build XML uses forbidden constructs",
            str(exc),
        ) from exc

    if root.tag != ROOT_TAG:
        raise BuildCodeError(
            ErrorCode.MALFORMED_STRUCTURE,
            f"Missing {ROOT_TAG} root element",
            f"found root <{root.tag}>",
        )
    return BuildDocument(root=root)


def check_version(document: BuildDocument, minimum: str = MIN_POB_VERSION) -> str:
    """Reject documents older than ``minimum``; returns the declared version.

    The comparison is plain string ordering, so "1.4.9" sorts above
    "1.4.170" and is accepted.
    """
    version = document.version
    if not version:
        raise BuildCodeError(ErrorCode.UNSUPPORTED_VERSION, "PoB version not specified")
    if version < minimum:
        raise BuildCodeError(
            ErrorCode.UNSUPPORTED_VERSION,
            f"PoB version {version} is not supported (minimum: {minimum})",
        )
    return version
