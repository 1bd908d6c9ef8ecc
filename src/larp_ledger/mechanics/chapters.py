"""Chapter codes and player numbers."""
from __future__ import annotations

import re

_CODE_RE = re.compile(r"^[A-Za-z]{2}$")


def validate_chapter_code(code: str) -> tuple[bool, str]:
    if not code or not _CODE_RE.match(code):
        return False, "Chapter code must be exactly two letters."
    return True, ""


def player_number(code: str, year: int, month: int, sequence: int) -> str:
    """Player number: chapter code, two-digit year, month, three-digit sequence.

    >>> player_number("th", 2025, 3, 7)
    'TH2503007'
    """
    if sequence < 1:
        raise ValueError(f"sequence must be positive, got {sequence}")
    return f"{code.upper()}{year % 100:02d}{month:02d}{sequence:03d}"
