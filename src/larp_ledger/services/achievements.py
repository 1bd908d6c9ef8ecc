from __future__ import annotations

import logging

from pydantic import ValidationError

from larp_ledger.errors import InvalidRequestError
from larp_ledger.mechanics.achievements import (
    RaritySettings,
    rarity_for_completion,
    validate_rarity_settings,
)
from larp_ledger.storage.database import Database
from larp_ledger.storage.repos import SettingsRepo

logger = logging.getLogger(__name__)

SETTINGS_KEY = "achievement_rarity_settings"


class AchievementSettingsService:
    def __init__(self, db: Database) -> None:
        self.repo = SettingsRepo(db)

    def get(self) -> RaritySettings:
        stored = self.repo.get(SETTINGS_KEY)
        if not stored:
            return RaritySettings()
        try:
            return RaritySettings(**stored)
        except ValidationError:
            logger.warning("Stored %s are invalid; using defaults", SETTINGS_KEY)
            return RaritySettings()

    def update(self, settings: RaritySettings | dict, updated_by: str) -> RaritySettings:
        """Replace the thresholds; invalid settings leave the stored ones untouched."""
        if isinstance(settings, dict):
            try:
                settings = RaritySettings(**{**self.get().model_dump(), **settings})
            except ValidationError as exc:
                raise InvalidRequestError("Invalid rarity settings.", {"errors": exc.errors(include_url=False, include_context=False)}) from exc
        ok, reason = validate_rarity_settings(settings)
        if not ok:
            raise InvalidRequestError(reason)
        self.repo.set(SETTINGS_KEY, settings.model_dump(), updated_by)
        return settings

    def rarity_for(self, completion_rate: float) -> str:
        return rarity_for_completion(completion_rate, self.get())
