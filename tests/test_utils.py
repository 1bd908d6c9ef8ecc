"""Tests for src/larp_ledger/utils.py."""
from __future__ import annotations

import re

from larp_ledger.utils import now_iso, safe_json, safe_list


class TestSafeJson:
    def test_none_returns_empty_dict(self):
        assert safe_json(None) == {}

    def test_none_with_default(self):
        assert safe_json(None, []) == []

    def test_valid_json_string(self):
        assert safe_json('{"a": 1}') == {"a": 1}

    def test_invalid_json_string_with_default(self):
        assert safe_json("not json", {"fallback": True}) == {"fallback": True}

    def test_dict_passthrough(self):
        data = {"key": "value"}
        assert safe_json(data) is data


class TestSafeList:
    def test_json_array(self):
        assert safe_list('["bard", "mining"]') == ["bard", "mining"]

    def test_null_column(self):
        assert safe_list(None) == []

    def test_object_is_not_a_list(self):
        assert safe_list('{"a": 1}') == []

    def test_tuple(self):
        assert safe_list(("a", "b")) == ["a", "b"]


def test_now_iso_is_utc_seconds():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", now_iso())
