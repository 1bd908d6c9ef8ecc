"""Character lifecycle states and the transitions between them."""
from __future__ import annotations

from enum import Enum


class CharacterStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    RETIRED = "retired"


_TRANSITIONS: dict[CharacterStatus, frozenset[CharacterStatus]] = {
    CharacterStatus.DRAFT: frozenset({CharacterStatus.ACTIVE}),
    CharacterStatus.ACTIVE: frozenset({CharacterStatus.INACTIVE, CharacterStatus.RETIRED}),
    CharacterStatus.INACTIVE: frozenset({CharacterStatus.ACTIVE, CharacterStatus.RETIRED}),
    CharacterStatus.RETIRED: frozenset(),
}

_ECONOMY_STATES = frozenset({CharacterStatus.ACTIVE, CharacterStatus.INACTIVE})


def status_of(is_active: bool, is_retired: bool) -> CharacterStatus:
    """Map the persisted flags onto a lifecycle state."""
    if is_retired:
        return CharacterStatus.RETIRED
    return CharacterStatus.ACTIVE if is_active else CharacterStatus.INACTIVE


def can_transition(current: CharacterStatus, target: CharacterStatus) -> tuple[bool, str]:
    if target in _TRANSITIONS[current]:
        return True, ""
    if current == CharacterStatus.RETIRED:
        return False, "Retired characters cannot change status."
    return False, f"Cannot move a character from {current.value} to {target.value}."


def allows_economy(status: CharacterStatus) -> bool:
    """Whether purchases, awards and RSVPs are permitted in this state."""
    return status in _ECONOMY_STATES


def validate_retirement(status: CharacterStatus, reason: str) -> tuple[bool, str]:
    ok, why = can_transition(status, CharacterStatus.RETIRED)
    if not ok:
        return False, why
    if not reason or not reason.strip():
        return False, "A retirement reason is required."
    return True, ""
