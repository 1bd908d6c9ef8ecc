"""Body/Stamina purchase costs: pure math, no I/O."""
from __future__ import annotations

from typing import Iterator

ATTRIBUTES = ("body", "stamina")

# (exclusive upper bound, price per point); values at or above the last bound cost MAX_POINT_PRICE
_PRICE_BANDS: tuple[tuple[int, int], ...] = (
    (20, 1),
    (40, 2),
    (60, 3),
    (80, 4),
    (100, 5),
    (120, 6),
    (140, 7),
    (160, 8),
    (180, 9),
)
MAX_POINT_PRICE = 10


def point_price(value: int) -> int:
    """XP price of raising an attribute from ``value`` to ``value + 1``."""
    for bound, price in _PRICE_BANDS:
        if value < bound:
            return price
    return MAX_POINT_PRICE


def attribute_cost(current_value: int, points: int = 1) -> int:
    """Total XP to buy ``points`` more points starting at ``current_value``.

    Each point is priced at the value the attribute has when that point is
    bought, so a purchase that crosses a band boundary is priced per band.

    Raises:
        ValueError: if either argument is negative.
    """
    if current_value < 0:
        raise ValueError(f"current_value must be non-negative, got {current_value}")
    if points < 0:
        raise ValueError(f"points must be non-negative, got {points}")
    total = 0
    for i in range(points):
        total += point_price(current_value + i)
    return total


def next_point_cost(current_value: int) -> int:
    """Price of the next single point; used to gate the increase action."""
    return attribute_cost(current_value, 1)


def _replay(base: int, current: int) -> int:
    if current <= base:
        return 0
    return sum(attribute_cost(v, 1) for v in range(base, current))


def attribute_purchase_cost(
    base_body: int, base_stamina: int, current_body: int, current_stamina: int
) -> int:
    """XP already spent to raise Body and Stamina from their heritage bases."""
    return _replay(base_body, current_body) + _replay(base_stamina, current_stamina)


def attribute_steps(attribute: str, base: int, current: int) -> Iterator[tuple[int, int, int]]:
    """Yield ``(from_value, to_value, cost)`` for every point bought above base."""
    if attribute not in ATTRIBUTES:
        raise ValueError(f"Unknown attribute: {attribute}")
    for v in range(base, current):
        yield v, v + 1, attribute_cost(v, 1)


def step_reason(attribute: str, from_value: int, to_value: int) -> str:
    """Ledger reason for a single attribute point, e.g. 'Body increase: 10→11'."""
    return f"{attribute.title()} increase: {from_value}→{to_value}"
