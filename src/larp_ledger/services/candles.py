from __future__ import annotations

import logging

from larp_ledger.errors import InsufficientCandlesError, InvalidRequestError, NotFoundError
from larp_ledger.models.ledger import CandleTransaction
from larp_ledger.storage.database import Database
from larp_ledger.storage.repos import CandleRepo

logger = logging.getLogger(__name__)


class CandleService:
    """Candles: the per-player currency admins hand out."""

    def __init__(self, db: Database) -> None:
        self.db = db
        self.repo = CandleRepo(db)

    def _validate(self, amount: int, reason: str) -> None:
        if amount <= 0:
            raise InvalidRequestError("Candle amount must be positive.")
        if not reason or not reason.strip():
            raise InvalidRequestError("A reason is required.")

    def balance(self, user_id: str) -> int:
        balance = self.repo.balance(user_id)
        if balance is None:
            raise NotFoundError(f"User {user_id} not found.")
        return balance

    def award(self, user_id: str, amount: int, reason: str, created_by: str) -> int:
        self._validate(amount, reason)
        with self.db.get_connection():
            self.balance(user_id)
            self.repo.credit(user_id, amount, reason.strip(), created_by)
        logger.info("Awarded %d candles to %s", amount, user_id)
        return self.balance(user_id)

    def spend(self, user_id: str, amount: int, reason: str, created_by: str) -> int:
        self._validate(amount, reason)
        with self.db.get_connection():
            held = self.balance(user_id)
            if self.repo.debit(user_id, amount, reason.strip(), created_by) is None:
                raise InsufficientCandlesError(
                    f"{amount} candles needed; {held} held.", {"cost": amount},
                )
        return self.balance(user_id)

    def history(self, user_id: str) -> list[CandleTransaction]:
        self.balance(user_id)
        return [CandleTransaction(**row) for row in self.repo.history(user_id)]
