from __future__ import annotations

from larp_ledger.storage.repos.candle_repo import CandleRepo
from larp_ledger.storage.repos.character_repo import CharacterRepo
from larp_ledger.storage.repos.event_repo import EventRepo
from larp_ledger.storage.repos.experience_repo import ExperienceRepo
from larp_ledger.storage.repos.reference_repo import ReferenceRepo
from larp_ledger.storage.repos.settings_repo import SettingsRepo
from larp_ledger.storage.repos.user_repo import UserRepo

__all__ = [
    "CandleRepo",
    "CharacterRepo",
    "EventRepo",
    "ExperienceRepo",
    "ReferenceRepo",
    "SettingsRepo",
    "UserRepo",
]
