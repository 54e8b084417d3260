"""Decode a PoB build code into its XML text.

A build code is two layers wrapped around the XML document:

    base64( zlib-deflate( utf-8 XML ) )

PoB itself writes a standard zlib stream (2-byte header + adler32
trailer), but codes produced by other tools are sometimes bare deflate
streams. Both framings are tried, standard first.

The decoder is pure: no I/O and no size ceiling. Request size is limited
by the transport in front of it.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import zlib

from pob_advisor.models.errors import BuildCodeError, ErrorCode


logger = logging.getLogger(__name__)

_TRANSPORT_ALPHABET = re.compile(r"^[A-Za-z0-9+/=]+$")


def decode_base64(code: str) -> bytes:
    """Strip and base64-decode a build code, rejecting anything outside the alphabet."""
    stripped = code.strip() if isinstance(code, str) else ""
    if not stripped:
        raise BuildCodeError(ErrorCode.INVALID_ENCODING, "Build code is empty")
    if not _TRANSPORT_ALPHABET.match(stripped):
        raise BuildCodeError(
            ErrorCode.INVALID_ENCODING,
            "Build code contains characters outside the base64 alphabet",
        )

    # Padding is often lost when codes are pasted around; restore it. A lone
    # trailing character carries no whole byte and is dropped.
    body = stripped.rstrip("=")
    if len(body) % 4 == 1:
        body = body[:-1]
    body += "=" * (-len(body) % 4)
    try:
        data = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BuildCodeError(
            ErrorCode.INVALID_ENCODING,
            "Build code is not valid base64",
            str(exc),
        ) from exc

    if not data:
        raise BuildCodeError(ErrorCode.INVALID_ENCODING, "Build code decodes to zero bytes")
    return data


def inflate(data: bytes) -> bytes:
    """Inflate a zlib stream, falling back to raw deflate framing."""
    try:
        raw = zlib.decompress(data)
    except zlib.error as zlib_exc:
        logger.debug("zlib framing failed (%s); retrying as raw deflate", zlib_exc)
        try:
            raw = zlib.decompress(data, -zlib.MAX_WBITS)
        except zlib.error as deflate_exc:
            raise BuildCodeError(
                ErrorCode.DECOMPRESSION_FAILED,
                "Failed to decompress build code",
                f"zlib: {zlib_exc}; raw deflate: {deflate_exc}",
            ) from deflate_exc

    if not raw:
        raise BuildCodeError(
            ErrorCode.DECOMPRESSION_FAILED,
            "Build code decompressed to an empty payload",
        )
    return raw


def decode_build_code(code: str) -> str:
    """Return the XML text carried by a build code."""
    return inflate(decode_base64(code)).decode("utf-8", errors="replace")


def encode_build_code(xml: str) -> str:
    """Inverse of ``decode_build_code``; used by scripts and tests."""
    return base64.b64encode(zlib.compress(xml.encode("utf-8"))).decode("ascii")
