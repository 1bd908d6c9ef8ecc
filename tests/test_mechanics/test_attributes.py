"""Tests for src/larp_ledger/mechanics/attributes.py."""
from __future__ import annotations

import pytest

from larp_ledger.mechanics.attributes import (
    MAX_POINT_PRICE,
    attribute_cost,
    attribute_purchase_cost,
    attribute_steps,
    next_point_cost,
    point_price,
    step_reason,
)


class TestPointPrice:
    @pytest.mark.parametrize("value, expected", [
        (0, 1), (19, 1),
        (20, 2), (39, 2),
        (40, 3), (59, 3),
        (60, 4), (80, 5), (100, 6), (120, 7), (140, 8),
        (160, 9), (179, 9),
        (180, 10), (500, 10),
    ])
    def test_bands(self, value, expected):
        assert point_price(value) == expected

    def test_never_decreases(self):
        prices = [point_price(v) for v in range(0, 250)]
        assert prices == sorted(prices)
        assert max(prices) == MAX_POINT_PRICE


class TestAttributeCost:
    def test_zero_points_is_free(self):
        assert attribute_cost(57, 0) == 0

    @pytest.mark.parametrize("current, points, expected", [
        (10, 1, 1),
        (10, 3, 3),
        (19, 2, 3),
        (18, 4, 6),
        (39, 2, 5),
        (179, 2, 19),
        (200, 3, 30),
    ])
    def test_crossing_bands_prices_each_point(self, current, points, expected):
        assert attribute_cost(current, points) == expected

    def test_default_is_one_point(self):
        assert attribute_cost(45) == 3

    @pytest.mark.parametrize("current, a, b", [
        (0, 5, 30), (15, 10, 10), (38, 1, 50), (170, 20, 5),
    ])
    def test_split_purchases_cost_the_same(self, current, a, b):
        assert attribute_cost(current, a + b) == (
            attribute_cost(current, a) + attribute_cost(current + a, b)
        )

    def test_negative_value_rejected(self):
        with pytest.raises(ValueError):
            attribute_cost(-1, 1)

    def test_negative_points_rejected(self):
        with pytest.raises(ValueError):
            attribute_cost(10, -2)

    def test_next_point_cost(self):
        assert next_point_cost(19) == 1
        assert next_point_cost(20) == 2


class TestAttributePurchaseCost:
    def test_at_base_is_free(self):
        assert attribute_purchase_cost(10, 10, 10, 10) == 0

    def test_below_base_contributes_nothing(self):
        assert attribute_purchase_cost(15, 5, 12, 4) == 0

    def test_body_and_stamina_are_independent(self):
        assert attribute_purchase_cost(10, 10, 13, 10) == 3
        assert attribute_purchase_cost(10, 10, 10, 22) == 14
        assert attribute_purchase_cost(10, 10, 13, 22) == 17

    @pytest.mark.parametrize("base", [0, 10, 19, 20, 39, 179])
    @pytest.mark.parametrize("n", [0, 1, 5, 20])
    def test_equals_per_point_sum(self, base, n):
        expected = sum(attribute_cost(base + i, 1) for i in range(n))
        assert attribute_purchase_cost(base, base, base + n, base) == expected

    @pytest.mark.parametrize("base, current", [(8, 30), (15, 15), (5, 61), (12, 200)])
    def test_matches_bulk_cost(self, base, current):
        assert attribute_purchase_cost(base, 0, current, 0) == attribute_cost(base, current - base)


class TestAttributeSteps:
    def test_one_step_per_point(self):
        steps = list(attribute_steps("body", 18, 21))
        assert steps == [(18, 19, 1), (19, 20, 1), (20, 21, 2)]

    def test_no_steps_at_base(self):
        assert list(attribute_steps("stamina", 12, 12)) == []

    def test_unknown_attribute(self):
        with pytest.raises(ValueError):
            list(attribute_steps("strength", 10, 11))

    def test_step_reason(self):
        assert step_reason("body", 10, 11) == "Body increase: 10→11"
        assert step_reason("stamina", 5, 6) == "Stamina increase: 5→6"
