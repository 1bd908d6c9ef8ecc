"""Tests for src/larp_ledger/mechanics/chapters.py."""
from __future__ import annotations

import pytest

from larp_ledger.mechanics.chapters import player_number, validate_chapter_code


class TestPlayerNumber:
    def test_format(self):
        assert player_number("TH", 2025, 10, 1) == "TH2510001"

    def test_uppercases_code(self):
        assert player_number("th", 2025, 3, 7) == "TH2503007"

    def test_sequence_must_be_positive(self):
        with pytest.raises(ValueError):
            player_number("TH", 2025, 3, 0)


class TestChapterCode:
    @pytest.mark.parametrize("code", ["TH", "ab"])
    def test_valid(self, code):
        assert validate_chapter_code(code)[0] is True

    @pytest.mark.parametrize("code", ["", "T", "THR", "T1"])
    def test_invalid(self, code):
        assert validate_chapter_code(code)[0] is False
