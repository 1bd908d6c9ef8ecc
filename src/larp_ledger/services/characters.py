"""Character creation and the XP economy around an existing character."""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional

from larp_ledger.errors import (
    CharacterLockedError,
    InsufficientExperienceError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
    PrerequisiteNotMetError,
)
from larp_ledger.mechanics.archetypes import (
    SECOND_ARCHETYPE_COST,
    archetype_reason,
    can_purchase_second_archetype,
)
from larp_ledger.mechanics.attendance import candle_cost
from larp_ledger.mechanics.attributes import (
    ATTRIBUTES,
    attribute_cost,
    attribute_purchase_cost,
    attribute_steps,
    next_point_cost,
    step_reason,
)
from larp_ledger.mechanics.experience import (
    CREATION_REASON,
    ENTRY_REFUND,
    STARTING_BUDGET,
    can_afford,
    summarize_experience,
)
from larp_ledger.mechanics.lifecycle import (
    CharacterStatus,
    allows_economy,
    can_transition,
    validate_retirement,
)
from larp_ledger.mechanics.skills import (
    SkillPrice,
    classify_skill,
    order_by_prerequisites,
    prerequisite_met,
)
from larp_ledger.models.character import Character, CharacterQuote, SkillQuote
from larp_ledger.models.ledger import ExperienceEntry
from larp_ledger.models.reference import ReferenceData
from larp_ledger.storage.database import Database
from larp_ledger.storage.repos import (
    CandleRepo,
    CharacterRepo,
    EventRepo,
    ExperienceRepo,
    UserRepo,
)
from larp_ledger.utils import now_iso

logger = logging.getLogger(__name__)


def skill_purchase_reason(skill_name: str) -> str:
    return f"Skill purchase: {skill_name}"


def skill_refund_reason(skill_name: str) -> str:
    return f"Skill refund: {skill_name}"


class CharacterService:
    """Every XP-moving operation on a character.

    Purchases run inside one ``get_connection`` block so the conditional
    ledger write, the character update and the cached totals refresh commit
    together or not at all.
    """

    def __init__(self, db: Database, reference: ReferenceData) -> None:
        self.db = db
        self.reference = reference
        self.characters = CharacterRepo(db)
        self.ledger = ExperienceRepo(db)
        self.events = EventRepo(db)
        self.users = UserRepo(db)
        self.candles = CandleRepo(db)

    # -- Lookups --

    def get(self, character_id: str) -> Character:
        row = self.characters.get(character_id)
        if row is None:
            raise NotFoundError(f"Character {character_id} not found.")
        return Character(**row)

    def list_for_user(self, user_id: str) -> list[Character]:
        return [Character(**row) for row in self.characters.list_by_user(user_id)]

    def list_all(self, include_retired: bool = True) -> list[Character]:
        return [Character(**row) for row in self.characters.list_all(include_retired)]

    def _require_economy(self, character: Character) -> None:
        if not allows_economy(character.status):
            raise CharacterLockedError(
                f"{character.name} is {character.status.value}; XP changes are not allowed."
            )

    def _price(self, character: Character, skill_id: str) -> SkillPrice:
        return classify_skill(
            skill_id,
            self.reference.heritage(character.heritage_id),
            self.reference.archetype(character.archetype_id),
            self.reference.archetype(character.second_archetype_id),
        )

    # -- Creation --

    def create_character(
        self,
        user_id: str,
        name: str,
        heritage_id: str,
        culture_id: str,
        archetype_id: str,
        body: Optional[int] = None,
        stamina: Optional[int] = None,
        skill_ids: Iterable[str] = (),
    ) -> Character:
        """Create a character and write its opening ledger rows.

        ``body`` and ``stamina`` default to the heritage base. The whole
        selection must fit the starting budget; nothing is written otherwise.
        """
        if self.users.get(user_id) is None:
            raise NotFoundError(f"User {user_id} not found.")
        if not name or not name.strip():
            raise InvalidRequestError("Character name is required.")

        heritage = self.reference.heritage(heritage_id)
        if heritage is None:
            raise InvalidRequestError(f"Unknown heritage: {heritage_id}")
        culture = self.reference.culture(culture_id)
        if culture is None:
            raise InvalidRequestError(f"Unknown culture: {culture_id}")
        if culture.heritage_id != heritage.id:
            raise InvalidRequestError(f"{culture.name} is not a {heritage.name} culture.")
        archetype = self.reference.archetype(archetype_id)
        if archetype is None:
            raise InvalidRequestError(f"Unknown archetype: {archetype_id}")

        body = heritage.body if body is None else body
        stamina = heritage.stamina if stamina is None else stamina
        if body < heritage.body or stamina < heritage.stamina:
            raise InvalidRequestError(
                f"{heritage.name} starts at Body {heritage.body} and Stamina "
                f"{heritage.stamina}; attributes cannot go below that."
            )

        requested = list(dict.fromkeys(skill_ids))
        unknown = [sid for sid in requested if self.reference.skill(sid) is None]
        if unknown:
            raise InvalidRequestError(f"Unknown skills: {', '.join(unknown)}", {"skills": unknown})
        ordered, blocked = order_by_prerequisites(requested, self.reference.skills)
        if blocked:
            names = ", ".join(self.reference.skill_name(s) for s in blocked)
            raise PrerequisiteNotMetError(
                f"Missing prerequisites for: {names}", {"skills": blocked}
            )

        prices = [classify_skill(sid, heritage, archetype) for sid in ordered]
        summary = summarize_experience(
            [p.cost for p in prices], heritage.body, heritage.stamina, body, stamina,
        )
        if summary.over_budget:
            raise InsufficientExperienceError(
                f"Selection costs {summary.total_spent} XP but only "
                f"{STARTING_BUDGET} XP is available.",
                {"used_experience": summary.used_experience,
                 "attribute_cost": summary.attribute_cost,
                 "remaining": summary.remaining},
            )

        now = now_iso()
        character_id = str(uuid.uuid4())
        with self.db.get_connection():
            self.characters.save({
                "id": character_id,
                "user_id": user_id,
                "name": name.strip(),
                "heritage_id": heritage.id,
                "culture_id": culture.id,
                "archetype_id": archetype.id,
                "second_archetype_id": None,
                "body": body,
                "stamina": stamina,
                "skills": ordered,
                "created_at": now,
                "updated_at": now,
            })
            self.ledger.append(character_id, STARTING_BUDGET, CREATION_REASON, user_id)
            for attribute, base, current in (
                ("body", heritage.body, body),
                ("stamina", heritage.stamina, stamina),
            ):
                for frm, to, cost in attribute_steps(attribute, base, current):
                    self.ledger.append(character_id, -cost, step_reason(attribute, frm, to), user_id)
            for price in prices:
                self.ledger.append(
                    character_id, -price.cost,
                    skill_purchase_reason(self.reference.skill_name(price.skill_id)), user_id,
                )
            self.ledger.refresh_totals(character_id)

        logger.info("Created character %s (%s) for user %s", name, character_id, user_id)
        return self.get(character_id)

    # -- Quotes --

    def quote(self, character_id: str) -> CharacterQuote:
        """Current price of every skill and the next attribute point."""
        character = self.get(character_id)
        available = self.ledger.balance(character_id)
        quotes = []
        for skill in sorted(self.reference.skills.values(), key=lambda s: s.name):
            price = self._price(character, skill.id)
            met, _ = prerequisite_met(skill, character.skills)
            quotes.append(SkillQuote(
                skill_id=skill.id,
                name=skill.name,
                tier=price.tier.value,
                cost=price.cost,
                learned=skill.id in character.skills,
                prerequisite_met=met,
                affordable=can_afford(price.cost, available),
            ))
        heritage = self.reference.heritage(character.heritage_id)
        base_body = heritage.body if heritage else character.body
        base_stamina = heritage.stamina if heritage else character.stamina
        ok, _ = can_purchase_second_archetype(
            character.archetype_id, character.second_archetype_id, "", available,
        )
        return CharacterQuote(
            character_id=character.id,
            experience=available,
            total_xp_spent=self.ledger.total_spent(character_id),
            attribute_cost=attribute_purchase_cost(
                base_body, base_stamina, character.body, character.stamina,
            ),
            next_body_cost=next_point_cost(character.body),
            next_stamina_cost=next_point_cost(character.stamina),
            second_archetype_available=ok,
            skills=quotes,
        )

    # -- Purchases --

    def purchase_skill(self, character_id: str, skill_id: str, purchased_by: Optional[str] = None) -> Character:
        skill = self.reference.skill(skill_id)
        if skill is None:
            raise NotFoundError(f"Skill {skill_id} not found.")
        with self.db.get_connection():
            character = self.get(character_id)
            self._require_economy(character)
            if skill_id in character.skills:
                raise InvalidRequestError(f"{character.name} already knows {skill.name}.")
            met, reason = prerequisite_met(skill, character.skills)
            if not met:
                raise PrerequisiteNotMetError(reason, {"prerequisite_id": skill.prerequisite_id})

            price = self._price(character, skill_id)
            entry_id = self.ledger.spend(
                character_id, price.cost, skill_purchase_reason(skill.name),
                purchased_by or character.user_id,
            )
            if entry_id is None:
                raise InsufficientExperienceError(
                    f"{skill.name} costs {price.cost} XP; "
                    f"{self.ledger.balance(character_id)} XP available.",
                    {"cost": price.cost, "tier": price.tier.value},
                )
            self.characters.update_fields(character_id, skills=[*character.skills, skill_id])
            self.ledger.refresh_totals(character_id)
        logger.info("%s bought %s for %d XP", character_id, skill_id, price.cost)
        return self.get(character_id)

    def remove_skill(self, character_id: str, skill_id: str, removed_by: str) -> Character:
        """Admin correction: drop a learned skill and refund what was paid for it."""
        with self.db.get_connection():
            character = self.get(character_id)
            self._require_economy(character)
            if skill_id not in character.skills:
                raise InvalidRequestError(f"{character.name} does not know {skill_id}.")
            dependents = [
                sid for sid in character.skills
                if getattr(self.reference.skill(sid), "prerequisite_id", None) == skill_id
            ]
            if dependents:
                raise InvalidRequestError(
                    f"{self.reference.skill_name(skill_id)} is a prerequisite of "
                    + ", ".join(self.reference.skill_name(s) for s in dependents),
                    {"dependents": dependents},
                )
            name = self.reference.skill_name(skill_id)
            paid = self.ledger.find_latest(character_id, skill_purchase_reason(name))
            refund = -paid["amount"] if paid else self._price(character, skill_id).cost
            self.ledger.append(
                character_id, refund, skill_refund_reason(name), removed_by, kind=ENTRY_REFUND,
            )
            self.characters.update_fields(
                character_id, skills=[s for s in character.skills if s != skill_id],
            )
            self.ledger.refresh_totals(character_id)
        logger.info("Removed %s from %s, refunded %d XP", skill_id, character_id, refund)
        return self.get(character_id)

    def increase_attribute(
        self,
        character_id: str,
        attribute: str,
        points: int = 1,
        purchased_by: Optional[str] = None,
    ) -> Character:
        """Buy ``points`` of Body or Stamina, one ledger row per point."""
        if attribute not in ATTRIBUTES:
            raise InvalidRequestError(f"Unknown attribute: {attribute}")
        if points < 1:
            raise InvalidRequestError("Points must be at least 1.")
        with self.db.get_connection():
            character = self.get(character_id)
            self._require_economy(character)
            current = getattr(character, attribute)
            total = attribute_cost(current, points)
            actor = purchased_by or character.user_id
            for frm, to, cost in attribute_steps(attribute, current, current + points):
                if self.ledger.spend(character_id, cost, step_reason(attribute, frm, to), actor) is None:
                    raise InsufficientExperienceError(
                        f"{points} {attribute.title()} costs {total} XP; "
                        f"{self.ledger.balance(character_id)} XP available.",
                        {"cost": total},
                    )
            self.characters.update_fields(character_id, **{attribute: current + points})
            self.ledger.refresh_totals(character_id)
        logger.info("%s raised %s by %d for %d XP", character_id, attribute, points, total)
        return self.get(character_id)

    def purchase_second_archetype(
        self, character_id: str, archetype_id: str, purchased_by: Optional[str] = None,
    ) -> Character:
        archetype = self.reference.archetype(archetype_id)
        if archetype is None:
            raise NotFoundError(f"Archetype {archetype_id} not found.")
        with self.db.get_connection():
            character = self.get(character_id)
            self._require_economy(character)
            available = self.ledger.balance(character_id)
            ok, reason = can_purchase_second_archetype(
                character.archetype_id, character.second_archetype_id, archetype_id, available,
            )
            if not ok:
                if (
                    available < SECOND_ARCHETYPE_COST
                    and not character.second_archetype_id
                    and archetype_id != character.archetype_id
                ):
                    raise InsufficientExperienceError(reason, {"cost": SECOND_ARCHETYPE_COST})
                raise InvalidRequestError(reason)
            entry_id = self.ledger.spend(
                character_id, SECOND_ARCHETYPE_COST, archetype_reason(archetype.name),
                purchased_by or character.user_id,
            )
            if entry_id is None:
                raise InsufficientExperienceError(
                    f"Second archetype costs {SECOND_ARCHETYPE_COST} XP.",
                    {"cost": SECOND_ARCHETYPE_COST},
                )
            self.characters.update_fields(character_id, second_archetype_id=archetype_id)
            self.ledger.refresh_totals(character_id)
        logger.info("%s took %s as second archetype", character_id, archetype_id)
        return self.get(character_id)

    # -- Awards --

    def award_experience(
        self,
        character_id: str,
        amount: int,
        reason: str,
        awarded_by: str,
        event_id: Optional[str] = None,
    ) -> Character:
        if amount <= 0:
            raise InvalidRequestError("Award amount must be positive.")
        if not reason or not reason.strip():
            raise InvalidRequestError("An award reason is required.")
        with self.db.get_connection():
            character = self.get(character_id)
            self._require_economy(character)
            self.ledger.append(character_id, amount, reason.strip(), awarded_by, event_id=event_id)
            self.ledger.refresh_totals(character_id)
        logger.info("Awarded %d XP to %s: %s", amount, character_id, reason)
        return self.get(character_id)

    def award_experience_bulk(
        self,
        character_ids: Iterable[str],
        amount: int,
        reason: str,
        awarded_by: str,
    ) -> list[Character]:
        """Award the same XP to many characters; all succeed or none do."""
        ids = list(dict.fromkeys(character_ids))
        if not ids:
            raise InvalidRequestError("No characters selected.")
        with self.db.get_connection():
            for character_id in ids:
                self.award_experience(character_id, amount, reason, awarded_by)
        return [self.get(cid) for cid in ids]

    # -- Lifecycle --

    def retire(self, character_id: str, reason: str, retired_by: str) -> Character:
        with self.db.get_connection():
            character = self.get(character_id)
            ok, why = validate_retirement(character.status, reason)
            if not ok:
                if character.status == CharacterStatus.RETIRED:
                    raise CharacterLockedError(why)
                raise InvalidRequestError(why)
            self.characters.update_fields(
                character_id,
                is_active=False,
                is_retired=True,
                retired_at=now_iso(),
                retired_by=retired_by,
                retirement_reason=reason.strip(),
            )
        logger.info("Retired %s: %s", character_id, reason)
        return self.get(character_id)

    def set_active(self, character_id: str, active: bool) -> Character:
        with self.db.get_connection():
            character = self.get(character_id)
            target = CharacterStatus.ACTIVE if active else CharacterStatus.INACTIVE
            if character.status != target:
                ok, why = can_transition(character.status, target)
                if not ok:
                    raise CharacterLockedError(why)
                self.characters.update_fields(character_id, is_active=active)
        return self.get(character_id)

    def delete_character(self, character_id: str, requested_by: str) -> None:
        """Remove a character with its ledger rows and RSVPs.

        Candles paid for XP on RSVPs that never earned attendance XP go back
        to the owner.
        """
        with self.db.get_connection():
            character = self.get(character_id)
            requester = self.users.get(requested_by)
            if requester is None or (
                requester["id"] != character.user_id and not requester["is_admin"]
            ):
                raise PermissionDeniedError("Only the owner or an admin may delete a character.")
            for rsvp in self.events.list_rsvps_for_character(character_id):
                candles = candle_cost(rsvp["xp_candle_purchases"])
                if candles and not rsvp["attended"]:
                    self.candles.credit(
                        rsvp["user_id"], candles,
                        f"Refund for RSVP of deleted character {character.name}",
                        requested_by,
                    )
            removed = self.ledger.delete_by_character(character_id)
            self.events.delete_by_character(character_id)
            self.characters.delete(character_id)
        logger.info("Deleted character %s (%d ledger rows)", character_id, removed)

    # -- History --

    def experience_history(self, character_id: str) -> list[ExperienceEntry]:
        self.get(character_id)
        return [ExperienceEntry(**row) for row in self.ledger.list_for_character(character_id)]

    def attendance_history(self, character_id: str) -> list[ExperienceEntry]:
        self.get(character_id)
        return [ExperienceEntry(**row) for row in self.ledger.list_for_event(character_id)]

    def refresh_totals(self, character_id: str) -> Character:
        self.get(character_id)
        self.ledger.refresh_totals(character_id)
        return self.get(character_id)
