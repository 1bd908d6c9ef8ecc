"""Second-archetype rules."""
from __future__ import annotations

from typing import Optional

SECOND_ARCHETYPE_COST = 50


def can_purchase_second_archetype(
    primary_id: str,
    current_second_id: Optional[str],
    target_id: str,
    available: int,
) -> tuple[bool, str]:
    """Check whether a character may buy ``target_id`` as a second archetype.

    Returns:
        (allowed, reason)
    """
    if current_second_id:
        return False, f"Character already has a second archetype ({current_second_id})."
    if target_id == primary_id:
        return False, "Second archetype must differ from the primary archetype."
    if available < SECOND_ARCHETYPE_COST:
        return False, (
            f"Second archetype costs {SECOND_ARCHETYPE_COST} XP "
            f"(available: {available})."
        )
    return True, "Meets requirements."


def archetype_reason(archetype_name: str) -> str:
    return f"Second archetype: {archetype_name}"
