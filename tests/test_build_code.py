"""Tests for the build code decoder (base64 + zlib layers)."""

import base64
import zlib

import pytest

from pob_advisor.models.errors import BuildCodeError, ErrorCode
from pob_advisor.parser.build_code import (
    decode_base64,
    decode_build_code,
    encode_build_code,
    inflate,
)


XML = '<PathOfBuilding version="1.4.170"/>'


def _raw_deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def test_decodes_standard_zlib_framing():
    assert decode_build_code(encode_build_code(XML)) == XML


def test_decodes_raw_deflate_framing():
    code = base64.b64encode(_raw_deflate(XML.encode())).decode()
    assert decode_build_code(code) == XML


def test_surrounding_whitespace_is_ignored():
    assert decode_build_code(f"  \n{encode_build_code(XML)}\n ") == XML


def test_missing_padding_is_restored():
    code = encode_build_code(XML).rstrip("=")
    assert decode_build_code(code) == XML


@pytest.mark.parametrize("code", ["", "   ", "\n\t"])
def test_empty_code_is_invalid_encoding(code):
    with pytest.raises(BuildCodeError) as exc_info:
        decode_base64(code)
    assert exc_info.value.code is ErrorCode.INVALID_ENCODING


@pytest.mark.parametrize("code", ["abc!def", "eNq-_abc", "has space inside"])
def test_characters_outside_alphabet_are_invalid_encoding(code):
    with pytest.raises(BuildCodeError) as exc_info:
        decode_base64(code)
    assert exc_info.value.code is ErrorCode.INVALID_ENCODING


def test_single_character_decodes_to_nothing():
    with pytest.raises(BuildCodeError) as exc_info:
        decode_base64("A")
    assert exc_info.value.code is ErrorCode.INVALID_ENCODING


def test_trailing_fragment_is_dropped():
    assert decode_base64("AAAAA") == b"\x00\x00\x00"
    assert decode_base64("AAAAAAAAA") == b"\x00" * 6


def test_trailing_fragment_fails_at_decompression():
    with pytest.raises(BuildCodeError) as exc_info:
        decode_build_code("AAAAA")
    assert exc_info.value.code is ErrorCode.DECOMPRESSION_FAILED


def test_padding_only_decodes_to_nothing():
    with pytest.raises(BuildCodeError) as exc_info:
        decode_base64("====")
    assert exc_info.value.code is ErrorCode.INVALID_ENCODING


def test_corrupt_payload_reports_both_framings():
    code = base64.b64encode(b"not compressed data at all").decode()
    with pytest.raises(BuildCodeError) as exc_info:
        decode_build_code(code)
    error = exc_info.value
    assert error.code is ErrorCode.DECOMPRESSION_FAILED
    assert "zlib" in error.details
    assert "raw deflate" in error.details


def test_empty_decompressed_payload_is_rejected():
    with pytest.raises(BuildCodeError) as exc_info:
        inflate(zlib.compress(b""))
    assert exc_info.value.code is ErrorCode.DECOMPRESSION_FAILED


def test_invalid_utf8_is_replaced_not_rejected():
    code = base64.b64encode(zlib.compress(b"<a>\xff</a>")).decode()
    assert decode_build_code(code) == "<a>\ufffd</a>"


def test_error_payload_shape():
    with pytest.raises(BuildCodeError) as exc_info:
        decode_base64("")
    payload = exc_info.value.to_dict()
    assert payload["code"] == "InvalidEncoding"
    assert set(payload) == {"code", "message", "details"}
