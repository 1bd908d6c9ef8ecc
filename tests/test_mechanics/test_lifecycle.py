"""Tests for src/larp_ledger/mechanics/lifecycle.py."""
from __future__ import annotations

import pytest

from larp_ledger.mechanics.lifecycle import (
    CharacterStatus,
    allows_economy,
    can_transition,
    status_of,
    validate_retirement,
)

S = CharacterStatus


class TestStatusOf:
    @pytest.mark.parametrize("is_active, is_retired, expected", [
        (True, False, S.ACTIVE),
        (False, False, S.INACTIVE),
        (False, True, S.RETIRED),
        (True, True, S.RETIRED),
    ])
    def test_flags(self, is_active, is_retired, expected):
        assert status_of(is_active, is_retired) == expected


class TestTransitions:
    @pytest.mark.parametrize("current, target", [
        (S.DRAFT, S.ACTIVE),
        (S.ACTIVE, S.INACTIVE),
        (S.INACTIVE, S.ACTIVE),
        (S.ACTIVE, S.RETIRED),
        (S.INACTIVE, S.RETIRED),
    ])
    def test_allowed(self, current, target):
        assert can_transition(current, target)[0] is True

    @pytest.mark.parametrize("target", [S.ACTIVE, S.INACTIVE, S.DRAFT])
    def test_retired_is_terminal(self, target):
        ok, reason = can_transition(S.RETIRED, target)
        assert ok is False
        assert "Retired" in reason

    def test_draft_cannot_retire(self):
        assert can_transition(S.DRAFT, S.RETIRED)[0] is False


class TestEconomy:
    def test_allowed_states(self):
        assert allows_economy(S.ACTIVE)
        assert allows_economy(S.INACTIVE)
        assert not allows_economy(S.RETIRED)
        assert not allows_economy(S.DRAFT)


class TestRetirement:
    def test_requires_reason(self):
        assert validate_retirement(S.ACTIVE, "  ")[0] is False

    def test_ok(self):
        assert validate_retirement(S.INACTIVE, "Moved away") == (True, "")

    def test_already_retired(self):
        assert validate_retirement(S.RETIRED, "again")[0] is False
