"""Formatting and collation helpers for ParkSettle summaries."""

from __future__ import annotations

import unicodedata
from typing import Any

__all__ = [
    "collation_key",
    "format_count_label",
    "format_currency",
    "format_duration",
]

_CURRENCY_SUFFIX = "원"
_COUNT_SUFFIX = "건"


def _script_rank(char: str) -> int:
    """Rank characters the way the Korean locale groups scripts.

    Separators and symbols sort first, then digits, then Hangul, then Han
    ideographs, then every other script (Latin included).
    """

    code = ord(char)
    if 0xAC00 <= code <= 0xD7A3 or 0x1100 <= code <= 0x11FF or 0x3130 <= code <= 0x318F:
        return 2
    if 0x4E00 <= code <= 0x9FFF or 0x3400 <= code <= 0x4DBF:
        return 3
    category = unicodedata.category(char)
    if category.startswith("N"):
        return 1
    if category.startswith("L"):
        return 4
    return 0


def collation_key(value: Any) -> tuple[tuple[tuple[int, str], ...], str]:
    """Return a sort key approximating ``ko-KR`` locale collation.

    Hangul syllables compare in code point order, which already matches
    dictionary order. Latin letters compare case-insensitively. The raw
    value breaks remaining ties so the ordering is total.
    """

    raw = "" if value is None else str(value)
    text = unicodedata.normalize("NFC", raw).casefold()
    return tuple((_script_rank(char), char) for char in text), raw


def format_currency(amount: float | int | None) -> str:
    """Format an amount the way ``Intl.NumberFormat('ko-KR')`` does, plus 원."""

    value = float(amount or 0.0)
    rounded = round(value, 3)
    if rounded == int(rounded):
        body = f"{int(rounded):,}"
    else:
        body = f"{rounded:,.3f}".rstrip("0").rstrip(".")
    return f"{body}{_CURRENCY_SUFFIX}"


def format_count_label(label: str, count: int) -> str:
    return f"{label} ({count}{_COUNT_SUFFIX})"


def format_duration(hours: float | None, custom_detail: str | None = None) -> str:
    """Render a stored duration, annotating free-entry values with the raw input."""

    value = float(hours or 0.0)
    text = str(int(value)) if value == int(value) else f"{value:g}"
    if custom_detail:
        return f"{text} ({custom_detail})"
    return text
