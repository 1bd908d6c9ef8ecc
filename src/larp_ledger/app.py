"""Application bootstrap: config, database, reference data and services."""
from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_ENV = "LARP_LEDGER_CONFIG"
DB_ENV = "LARP_LEDGER_DB"
DEFAULT_DB_PATH = "data/ledger.db"
__version__ = "0.1.0"


def _load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load config.toml from the env override, an explicit path, or project root."""
    config_path = Path(
        path or os.getenv(CONFIG_ENV) or Path(__file__).parent.parent.parent / "config.toml"
    )
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


class LedgerApp:
    """Wires the storage layer, reference data and services together."""

    def __init__(self, config: dict[str, Any] | None = None, db_path: str | None = None):
        self.config = config if config is not None else _load_config()
        self.db_path = (
            db_path
            or os.getenv(DB_ENV)
            or self.config.get("storage", {}).get("db_path", DEFAULT_DB_PATH)
        )

        # Lazy-initialized components
        self._db = None
        self._reference = None
        self._characters = None
        self._events = None
        self._candles = None
        self._chapters = None
        self._achievements = None

    @property
    def content_dir(self) -> str | None:
        return self.config.get("content", {}).get("dir")

    @property
    def db(self):
        if self._db is None:
            from larp_ledger.storage.database import Database

            self._db = Database(self.db_path)
            self._db.initialize()
        return self._db

    @property
    def reference(self):
        """Reference snapshot from the database, seeding empty tables from the content."""
        if self._reference is None:
            from larp_ledger.content.loader import load_reference_data
            from larp_ledger.storage.repos import ReferenceRepo

            repo = ReferenceRepo(self.db)
            if repo.is_empty():
                logger.info("Reference tables are empty; seeding from content")
                repo.seed(load_reference_data(self.content_dir))
            self._reference = repo.load()
        return self._reference

    def seed(self) -> bool:
        """Copy the TOML content into the database if its tables are empty."""
        from larp_ledger.content.loader import load_reference_data
        from larp_ledger.storage.repos import ReferenceRepo

        seeded = ReferenceRepo(self.db).seed(load_reference_data(self.content_dir))
        self.reload_reference()
        return seeded

    def reload_reference(self) -> None:
        """Drop the cached snapshot so the next access re-reads it."""
        self._reference = None
        self._characters = None

    @property
    def characters(self):
        if self._characters is None:
            from larp_ledger.services.characters import CharacterService

            self._characters = CharacterService(self.db, self.reference)
        return self._characters

    @property
    def events(self):
        if self._events is None:
            from larp_ledger.services.events import EventService

            self._events = EventService(self.db)
        return self._events

    @property
    def candles(self):
        if self._candles is None:
            from larp_ledger.services.candles import CandleService

            self._candles = CandleService(self.db)
        return self._candles

    @property
    def chapters(self):
        if self._chapters is None:
            from larp_ledger.services.chapters import ChapterService

            self._chapters = ChapterService(self.db)
        return self._chapters

    @property
    def achievements(self):
        if self._achievements is None:
            from larp_ledger.services.achievements import AchievementSettingsService

            self._achievements = AchievementSettingsService(self.db)
        return self._achievements

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None
