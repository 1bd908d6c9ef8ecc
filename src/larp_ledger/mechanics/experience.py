"""Experience budget math: derived totals for a character, no I/O."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from larp_ledger.mechanics.attributes import attribute_purchase_cost

STARTING_BUDGET = 25
CREATION_REASON = "Character creation"

# experience_entries.kind
ENTRY_AWARD = "award"
ENTRY_PURCHASE = "purchase"
ENTRY_REFUND = "refund"


@dataclass(frozen=True)
class ExperienceSummary:
    used_experience: int
    attribute_cost: int
    remaining: int
    available_experience: int

    @property
    def total_spent(self) -> int:
        return self.used_experience + self.attribute_cost

    @property
    def over_budget(self) -> bool:
        return self.remaining < 0


def summarize_experience(
    skill_costs: Iterable[int],
    base_body: int,
    base_stamina: int,
    current_body: int,
    current_stamina: int,
    starting_budget: int = STARTING_BUDGET,
) -> ExperienceSummary:
    """Aggregate skill and attribute spending against a starting budget.

    Advisory only: ``available_experience`` is clamped at zero, while
    ``remaining`` keeps the raw figure so callers can refuse an over-budget
    selection before committing it.
    """
    used = sum(skill_costs)
    attr = attribute_purchase_cost(base_body, base_stamina, current_body, current_stamina)
    remaining = starting_budget - used - attr
    return ExperienceSummary(
        used_experience=used,
        attribute_cost=attr,
        remaining=remaining,
        available_experience=max(0, remaining),
    )


def can_afford(cost: int, available: int) -> bool:
    """True when a purchase of ``cost`` fits in ``available`` XP."""
    return 0 <= cost <= available


def entry_kind(amount: int) -> str:
    return ENTRY_PURCHASE if amount < 0 else ENTRY_AWARD


def ledger_totals(entries: Iterable[tuple[int, str]]) -> tuple[int, int]:
    """Balance and total spent from ``(amount, kind)`` ledger rows.

    Debits add to the spent total and refunds take back from it, so a
    refunded purchase leaves no trace in ``total_spent``.

    Returns:
        (balance, total_spent)
    """
    balance = 0
    spent = 0
    for amount, kind in entries:
        balance += amount
        if amount < 0 or kind == ENTRY_REFUND:
            spent -= amount
    return balance, spent
