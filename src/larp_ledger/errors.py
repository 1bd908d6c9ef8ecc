"""Business-rule failures raised by the service layer."""
from __future__ import annotations

from typing import Any


class LedgerError(Exception):
    """Base class. ``message`` is safe to show to a player or admin."""

    code = "ledger_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(LedgerError):
    code = "not_found"


class InsufficientExperienceError(LedgerError):
    code = "insufficient_experience"


class InsufficientCandlesError(LedgerError):
    code = "insufficient_candles"


class PrerequisiteNotMetError(LedgerError):
    code = "prerequisite_not_met"


class CharacterLockedError(LedgerError):
    """The character's lifecycle state forbids the requested change."""

    code = "character_locked"


class InvalidRequestError(LedgerError):
    code = "invalid_request"


class PermissionDeniedError(LedgerError):
    code = "forbidden"
