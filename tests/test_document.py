"""Tests for structural XML parsing and the version gate."""

import pytest

from pob_advisor.models.errors import BuildCodeError, ErrorCode
from pob_advisor.parser.document import check_version, parse_document

from tests.factories import pob_xml


def _version_error(xml: str, minimum: str = "1.4.170") -> BuildCodeError:
    with pytest.raises(BuildCodeError) as exc_info:
        check_version(parse_document(xml), minimum)
    return exc_info.value


def test_sections_are_found_by_tag():
    document = parse_document(pob_xml(body="<Skills/><Tree/>"))
    assert document.section("Build") is not None
    assert document.section("Skills") is not None
    assert document.section("Gear") is None


def test_game_version_defaults_when_absent():
    assert parse_document(pob_xml(game_version=None)).game_version == "3.25.0"
    assert parse_document(pob_xml(game_version="3.26.1")).game_version == "3.26.1"


def test_byte_order_mark_is_tolerated():
    document = parse_document("\ufeff" + pob_xml())
    assert document.version == "1.4.170"


def test_unparseable_xml_is_malformed():
    with pytest.raises(BuildCodeError) as exc_info:
        parse_document("<PathOfBuilding><Build></PathOfBuilding>")
    assert exc_info.value.code is ErrorCode.MALFORMED_STRUCTURE


def test_wrong_root_is_malformed():
    with pytest.raises(BuildCodeError) as exc_info:
        parse_document("<Build/>")
    assert exc_info.value.code is ErrorCode.MALFORMED_STRUCTURE
    assert "PathOfBuilding" in exc_info.value.message


def test_entity_declarations_are_malformed():
    xml = (
        '<!DOCTYPE PathOfBuilding [<!ENTITY a "aaaaaaaa">]>'
        '<PathOfBuilding version="1.4.170">&a;</PathOfBuilding>'
    )
    with pytest.raises(BuildCodeError) as exc_info:
        parse_document(xml)
    assert exc_info.value.code is ErrorCode.MALFORMED_STRUCTURE


def test_missing_version_is_unsupported():
    error = _version_error(pob_xml(version=None))
    assert error.code is ErrorCode.UNSUPPORTED_VERSION
    assert error.message == "PoB version not specified"


def test_minimum_version_is_accepted():
    assert check_version(parse_document(pob_xml(version="1.4.170"))) == "1.4.170"


def test_older_version_is_unsupported_and_names_minimum():
    error = _version_error(pob_xml(version="1.4.100"))
    assert error.code is ErrorCode.UNSUPPORTED_VERSION
    assert "1.4.170" in error.message


def test_version_comparison_is_lexicographic():
    # "1.4.9" sorts after "1.4.170" character by character.
    assert check_version(parse_document(pob_xml(version="1.4.9"))) == "1.4.9"
    assert _version_error(pob_xml(version="1.10.0")).code is ErrorCode.UNSUPPORTED_VERSION


def test_configured_minimum_is_used():
    error = _version_error(pob_xml(version="2.0.0"), minimum="2.1.0")
    assert "minimum: 2.1.0" in error.message
