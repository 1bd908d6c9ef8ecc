from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from larp_ledger.errors import InvalidRequestError, NotFoundError
from larp_ledger.mechanics.chapters import player_number, validate_chapter_code
from larp_ledger.models.user import Chapter, User
from larp_ledger.storage.database import Database
from larp_ledger.storage.repos import UserRepo
from larp_ledger.utils import now_iso

logger = logging.getLogger(__name__)


class ChapterService:
    """Chapters and player registration."""

    def __init__(self, db: Database) -> None:
        self.db = db
        self.users = UserRepo(db)

    def create_chapter(
        self, name: str, code: str, created_by: str, description: Optional[str] = None,
    ) -> Chapter:
        ok, reason = validate_chapter_code(code)
        if not ok:
            raise InvalidRequestError(reason)
        if not name or not name.strip():
            raise InvalidRequestError("Chapter name is required.")
        with self.db.get_connection():
            if self.users.get_chapter_by_code(code) is not None:
                raise InvalidRequestError(f"Chapter code {code.upper()} is already in use.")
            chapter = Chapter(
                name=name.strip(),
                code=code.upper(),
                description=description,
                created_by=created_by,
                created_at=now_iso(),
            )
            self.users.create_chapter(chapter.model_dump(exclude={"member_count"}))
        logger.info("Created chapter %s (%s)", chapter.name, chapter.code)
        return chapter

    def list_chapters(self) -> list[Chapter]:
        return [Chapter(**row) for row in self.users.list_chapters()]

    def get_chapter(self, chapter_id: str) -> Chapter:
        row = self.users.get_chapter(chapter_id)
        if row is None:
            raise NotFoundError(f"Chapter {chapter_id} not found.")
        return Chapter(**row)

    def get_user(self, user_id: str) -> User:
        row = self.users.get(user_id)
        if row is None:
            raise NotFoundError(f"User {user_id} not found.")
        return User(**row)

    def list_users(self) -> list[User]:
        return [User(**row) for row in self.users.list_all()]

    def chapter_members(self, chapter_id: str) -> list[User]:
        self.get_chapter(chapter_id)
        return [User(**row) for row in self.users.chapter_members(chapter_id)]

    def register_user(
        self,
        username: str,
        player_name: str,
        email: str,
        chapter_id: Optional[str] = None,
        is_admin: bool = False,
        title: Optional[str] = None,
        today: Optional[date] = None,
    ) -> User:
        """Create a user; members of a chapter get the next player number for this month."""
        if not username or not player_name or not email:
            raise InvalidRequestError("Username, player name and email are required.")
        today = today or date.today()
        with self.db.get_connection():
            if self.users.get_by_username(username) is not None:
                raise InvalidRequestError(f"Username {username} is taken.")
            number = None
            if chapter_id:
                chapter = self.get_chapter(chapter_id)
                prefix = f"{chapter.code}{today.year % 100:02d}{today.month:02d}"
                last = self.users.last_player_number(prefix)
                sequence = int(last[len(prefix):]) + 1 if last else 1
                number = player_number(chapter.code, today.year, today.month, sequence)
            user = User(
                username=username,
                player_name=player_name,
                email=email,
                player_number=number,
                title=title,
                chapter_id=chapter_id,
                is_admin=is_admin,
                created_at=now_iso(),
            )
            self.users.create(user.model_dump())
        logger.info("Registered %s (%s)", username, number or "no chapter")
        return user
