"""Lenient readers for attribute values in PoB XML.

PoB writes numbers and booleans as attribute strings, and hand-edited or
third-party exports are not always tidy ("90 ", "true", "1", "12.5%").
These helpers never raise; they fall back to the caller's default.
"""

import re

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def leading_int(raw: str | None, default: int) -> int:
    """Integer at the start of ``raw`` ("90abc" -> 90), else ``default``."""
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else default


def leading_number(raw: str | None) -> float | None:
    """Float at the start of ``raw``, or None when there is none."""
    if raw is None:
        return None
    match = _LEADING_NUMBER.match(raw)
    return float(match.group(1)) if match else None


def is_true(raw: str | None) -> bool:
    return raw is not None and raw.strip().lower() in {"true", "1", "yes"}


def text_of(raw: str | None) -> str:
    return raw.strip() if raw else ""


def optional_text(raw: str | None) -> str | None:
    value = text_of(raw)
    return value or None
