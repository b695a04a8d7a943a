"""Alphanumeric ("natural") ordering for object and map keys.

Keys are split into digit runs and text runs.  Digit runs compare by
numeric value and sort before text; text runs compare case-insensitively.
Keys that are equal at that level are ordered lowercase-first, then by the
raw string, so the order is total and stable:

    sort_alpha_num(["item10", "item2", "Item1"])  # ["Item1", "item2", "item10"]
"""

from __future__ import annotations

import re
from collections.abc import Iterable

__all__ = ["natural_key", "sort_alpha_num"]

# Capturing group: re.split keeps the digit runs at odd indices.
_DIGITS = re.compile(r"(\d+)")

_Chunk = tuple[int, int, str]


def natural_key(text: str) -> tuple[tuple[_Chunk, ...], tuple[bool, ...], str]:
    """Return a sort key implementing alphanumeric ordering for ``text``."""
    chunks: list[_Chunk] = []
    for index, part in enumerate(_DIGITS.split(text)):
        if not part:
            continue
        if index % 2:
            chunks.append((0, int(part), ""))
        else:
            chunks.append((1, 0, part.casefold()))
    # Lowercase sorts before uppercase when the keys differ only by case.
    case = tuple(char.isupper() for char in text)
    return tuple(chunks), case, text


def sort_alpha_num(keys: Iterable[str]) -> list[str]:
    """Return ``keys`` sorted in alphanumeric order."""
    return sorted(keys, key=natural_key)
