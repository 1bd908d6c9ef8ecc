"""Event attendance XP: pure math, no I/O."""
from __future__ import annotations

# (highest event count in tier, XP per event)
ATTENDANCE_TIERS: tuple[tuple[int, int], ...] = (
    (10, 6),
    (20, 5),
    (30, 4),
)
VETERAN_ATTENDANCE_XP = 3

MAX_XP_PURCHASES = 2
MAX_CANDLE_XP_PURCHASES = 2
XP_PER_PURCHASE = 1
CANDLES_PER_XP = 1


def attendance_xp(events_attended: int) -> int:
    """Base XP for an attended event, given the attended count including it."""
    for ceiling, xp in ATTENDANCE_TIERS:
        if events_attended <= ceiling:
            return xp
    return VETERAN_ATTENDANCE_XP


def validate_rsvp_purchases(xp_purchases: int, xp_candle_purchases: int) -> tuple[bool, str]:
    if not 0 <= xp_purchases <= MAX_XP_PURCHASES:
        return False, f"XP purchases must be between 0 and {MAX_XP_PURCHASES}."
    if not 0 <= xp_candle_purchases <= MAX_CANDLE_XP_PURCHASES:
        return False, f"Candle XP purchases must be between 0 and {MAX_CANDLE_XP_PURCHASES}."
    return True, ""


def purchased_xp(xp_purchases: int, xp_candle_purchases: int) -> int:
    return (xp_purchases + xp_candle_purchases) * XP_PER_PURCHASE


def candle_cost(xp_candle_purchases: int) -> int:
    return xp_candle_purchases * CANDLES_PER_XP


def attendance_reason(base_xp: int, bought_xp: int) -> str:
    return f"Event attendance ({base_xp} base XP + {bought_xp} purchased XP)"
