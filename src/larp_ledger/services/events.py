"""Events, RSVPs and attendance XP."""
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Optional

from larp_ledger.errors import (
    CharacterLockedError,
    InsufficientCandlesError,
    InsufficientExperienceError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
)
from larp_ledger.mechanics.attendance import (
    attendance_reason,
    attendance_xp,
    candle_cost,
    purchased_xp,
    validate_rsvp_purchases,
)
from larp_ledger.mechanics.lifecycle import allows_economy, status_of
from larp_ledger.models.event import Event, EventRsvp
from larp_ledger.storage.database import Database
from larp_ledger.storage.repos import CandleRepo, CharacterRepo, EventRepo, ExperienceRepo, UserRepo
from larp_ledger.utils import now_iso

logger = logging.getLogger(__name__)

_EDITABLE = frozenset({"name", "description", "event_date", "location", "is_active"})


def _check_date(value: str) -> str:
    try:
        date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        raise InvalidRequestError(f"Invalid event date: {value!r}") from None
    return value


class EventService:
    def __init__(self, db: Database) -> None:
        self.db = db
        self.events = EventRepo(db)
        self.characters = CharacterRepo(db)
        self.ledger = ExperienceRepo(db)
        self.candles = CandleRepo(db)
        self.users = UserRepo(db)

    # -- Events --

    def get_event(self, event_id: str) -> Event:
        row = self.events.get(event_id)
        if row is None:
            raise NotFoundError(f"Event {event_id} not found.")
        return Event(**row)

    def create_event(
        self,
        name: str,
        event_date: str,
        created_by: str,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Event:
        if not name or not name.strip():
            raise InvalidRequestError("Event name is required.")
        event = Event(
            name=name.strip(),
            event_date=_check_date(event_date),
            description=description,
            location=location,
            created_by=created_by,
            created_at=now_iso(),
        )
        self.events.create(event.model_dump())
        logger.info("Created event %s on %s", event.name, event.event_date)
        return event

    def update_event(self, event_id: str, **fields: Any) -> Event:
        self.get_event(event_id)
        unknown = set(fields) - _EDITABLE
        if unknown:
            raise InvalidRequestError(f"Cannot update: {', '.join(sorted(unknown))}")
        if "event_date" in fields:
            _check_date(fields["event_date"])
        if fields:
            self.events.update_fields(event_id, **fields)
        return self.get_event(event_id)

    def list_events(self, active_only: bool = False) -> list[Event]:
        return [Event(**row) for row in self.events.list_events(active_only)]

    def deactivate_event(self, event_id: str) -> Event:
        return self.update_event(event_id, is_active=False)

    # -- RSVPs --

    def get_rsvp(self, rsvp_id: str) -> EventRsvp:
        row = self.events.get_rsvp(rsvp_id)
        if row is None:
            raise NotFoundError(f"RSVP {rsvp_id} not found.")
        return EventRsvp(**row)

    def list_rsvps(self, event_id: str) -> list[EventRsvp]:
        self.get_event(event_id)
        return [EventRsvp(**row) for row in self.events.list_rsvps(event_id)]

    def rsvp(
        self,
        event_id: str,
        character_id: str,
        user_id: str,
        xp_purchases: int = 0,
        xp_candle_purchases: int = 0,
    ) -> EventRsvp:
        """Sign a character up for an event, paying candles for candle XP."""
        ok, reason = validate_rsvp_purchases(xp_purchases, xp_candle_purchases)
        if not ok:
            raise InvalidRequestError(reason)
        with self.db.get_connection():
            event = self.get_event(event_id)
            if not event.is_active:
                raise InvalidRequestError(f"{event.name} is not open for RSVPs.")
            character = self.characters.get(character_id)
            if character is None:
                raise NotFoundError(f"Character {character_id} not found.")
            if character["user_id"] != user_id:
                raise PermissionDeniedError("You can only RSVP with your own characters.")
            if not allows_economy(status_of(character["is_active"], character["is_retired"])):
                raise CharacterLockedError(f"{character['name']} is retired.")
            if self.events.find_rsvp(event_id, character_id) is not None:
                raise InvalidRequestError(f"{character['name']} has already RSVP'd to {event.name}.")

            now = now_iso()
            rsvp = EventRsvp(
                event_id=event_id,
                character_id=character_id,
                user_id=user_id,
                xp_purchases=xp_purchases,
                xp_candle_purchases=xp_candle_purchases,
                created_at=now,
                updated_at=now,
            )
            self.events.create_rsvp(rsvp.model_dump())
            candles = candle_cost(xp_candle_purchases)
            if candles and self.candles.debit(
                user_id, candles, f"XP purchase for {event.name}", user_id,
            ) is None:
                raise InsufficientCandlesError(
                    f"{candles} candles needed; {self.candles.balance(user_id) or 0} held.",
                    {"cost": candles},
                )
        logger.info("RSVP %s: %s -> %s", rsvp.id, character_id, event_id)
        return rsvp

    def cancel_rsvp(self, rsvp_id: str, requested_by: str) -> None:
        """Withdraw an RSVP, removing any XP it granted and refunding candles."""
        with self.db.get_connection():
            rsvp = self.get_rsvp(rsvp_id)
            requester = self.users.get(requested_by)
            if requester is None or (requester["id"] != rsvp.user_id and not requester["is_admin"]):
                raise PermissionDeniedError("Only the owner or an admin may cancel this RSVP.")
            self._remove_attendance_xp(rsvp)
            candles = candle_cost(rsvp.xp_candle_purchases)
            if candles:
                event = self.events.get(rsvp.event_id)
                self.candles.credit(
                    rsvp.user_id, candles,
                    f"Refund for cancelled RSVP to {event['name'] if event else rsvp.event_id}",
                    requested_by,
                )
            self.events.delete_rsvp(rsvp_id)
            self.ledger.refresh_totals(rsvp.character_id)
        logger.info("Cancelled RSVP %s", rsvp_id)

    def _remove_attendance_xp(self, rsvp: EventRsvp) -> None:
        linked = self.ledger.sum_for_rsvp(rsvp.id)
        if linked and self.ledger.balance(rsvp.character_id) - linked < 0:
            raise InsufficientExperienceError(
                "XP from this event has already been spent.", {"linked": linked},
            )
        self.ledger.delete_by_rsvp(rsvp.id)

    def mark_attendance(self, rsvp_id: str, attended: bool, admin_user_id: str) -> EventRsvp:
        """Record whether the character showed up.

        Attending writes one ledger row linked to the RSVP (base XP by the
        character's attendance count plus any XP bought). Marking again is a
        no-op; a no-show removes the linked row.
        """
        with self.db.get_connection():
            rsvp = self.get_rsvp(rsvp_id)
            character = self.characters.get(rsvp.character_id)
            if character is None:
                raise NotFoundError(f"Character {rsvp.character_id} not found.")
            if attended:
                if self.ledger.sum_for_rsvp(rsvp_id) == 0:
                    if not allows_economy(status_of(character["is_active"], character["is_retired"])):
                        raise CharacterLockedError(f"{character['name']} is retired.")
                    previous = self.events.attended_count(rsvp.character_id)
                    if rsvp.attended:
                        previous -= 1
                    base = attendance_xp(previous + 1)
                    bought = purchased_xp(rsvp.xp_purchases, rsvp.xp_candle_purchases)
                    self.ledger.append(
                        rsvp.character_id, base + bought, attendance_reason(base, bought),
                        admin_user_id, event_id=rsvp.event_id, rsvp_id=rsvp_id,
                    )
                    logger.info("Attendance for %s: %d + %d XP", rsvp.character_id, base, bought)
            else:
                self._remove_attendance_xp(rsvp)
            self.events.set_attended(rsvp_id, attended)
            self.ledger.refresh_totals(rsvp.character_id)
        return self.get_rsvp(rsvp_id)
