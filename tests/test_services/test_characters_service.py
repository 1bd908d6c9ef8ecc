"""Tests for src/larp_ledger/services/characters.py."""
from __future__ import annotations

import threading

import pytest

from larp_ledger.errors import (
    CharacterLockedError,
    InsufficientExperienceError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
    PrerequisiteNotMetError,
)
from larp_ledger.mechanics.lifecycle import CharacterStatus


def _create(ledger, player, **overrides):
    kwargs = dict(
        user_id=player.id,
        name="Thessaly",
        heritage_id="human",
        culture_id="erdanian",
        archetype_id="advisor",
    )
    kwargs.update(overrides)
    return ledger.characters.create_character(**kwargs)


class TestCreateCharacter:
    def test_human_advisor_bard_and_body(self, ledger, player):
        character = _create(ledger, player, body=13, skill_ids=["bard"])
        assert character.experience == 17
        assert character.total_xp_spent == 8
        assert character.body == 13
        assert character.stamina == 10
        assert character.skills == ["bard"]
        assert character.status == CharacterStatus.ACTIVE
        assert character.player_name == "Ayla Stone"

    def test_ledger_rows(self, ledger, player):
        character = _create(ledger, player, body=12, skill_ids=["bard"])
        rows = ledger.characters.experience_history(character.id)
        by_reason = {r.reason: r.amount for r in rows}
        assert by_reason == {
            "Character creation": 25,
            "Body increase: 10→11": -1,
            "Body increase: 11→12": -1,
            "Skill purchase: Bard": -5,
        }
        assert sum(r.amount for r in rows) == character.experience

    def test_defaults_to_heritage_base(self, ledger, player):
        character = _create(
            ledger, player, heritage_id="stoneborn", culture_id="dargadian",
        )
        assert (character.body, character.stamina) == (15, 5)
        assert character.experience == 25

    def test_over_budget_writes_nothing(self, ledger, player):
        with pytest.raises(InsufficientExperienceError) as exc_info:
            _create(ledger, player, skill_ids=["stealth", "parry"])
        assert exc_info.value.details["remaining"] == -15
        assert ledger.characters.list_for_user(player.id) == []

    def test_exact_budget(self, ledger, player):
        # stealth is "other" (20) for an Advisor, bard primary (5)
        character = _create(ledger, player, skill_ids=["stealth", "bard"])
        assert character.experience == 0

    def test_prerequisite_ordered_within_selection(self, ledger, player):
        character = _create(ledger, player, skill_ids=["healing", "first_aid"])
        assert character.skills == ["first_aid", "healing"]

    def test_missing_prerequisite(self, ledger, player):
        with pytest.raises(PrerequisiteNotMetError):
            _create(ledger, player, skill_ids=["healing"])

    def test_culture_must_match_heritage(self, ledger, player):
        with pytest.raises(InvalidRequestError):
            _create(ledger, player, culture_id="voruk")

    def test_attributes_not_below_base(self, ledger, player):
        with pytest.raises(InvalidRequestError):
            _create(ledger, player, body=9)

    def test_unknown_skill(self, ledger, player):
        with pytest.raises(InvalidRequestError):
            _create(ledger, player, skill_ids=["flying"])

    def test_unknown_user(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.characters.create_character("ghost", "X", "human", "erdanian", "advisor")


class TestPurchaseSkill:
    def test_primary_skill(self, ledger, fresh_character):
        character = ledger.characters.purchase_skill(fresh_character.id, "bard")
        assert character.experience == 20
        assert "bard" in character.skills

    def test_heritage_secondary(self, ledger, fresh_character):
        character = ledger.characters.purchase_skill(fresh_character.id, "mining")
        assert character.experience == 15

    def test_already_learned(self, ledger, fresh_character):
        ledger.characters.purchase_skill(fresh_character.id, "bard")
        with pytest.raises(InvalidRequestError):
            ledger.characters.purchase_skill(fresh_character.id, "bard")

    def test_prerequisite_not_met(self, ledger, fresh_character):
        with pytest.raises(PrerequisiteNotMetError):
            ledger.characters.purchase_skill(fresh_character.id, "chirurgeon")

    def test_insufficient_experience_leaves_state(self, ledger, fresh_character):
        ledger.characters.purchase_skill(fresh_character.id, "stealth")
        with pytest.raises(InsufficientExperienceError):
            ledger.characters.purchase_skill(fresh_character.id, "parry")
        character = ledger.characters.get(fresh_character.id)
        assert character.experience == 5
        assert character.skills == ["stealth"]

    def test_unknown_skill(self, ledger, fresh_character):
        with pytest.raises(NotFoundError):
            ledger.characters.purchase_skill(fresh_character.id, "flying")

    def test_concurrent_purchases_never_overdraw(self, ledger, fresh_character):
        skills = ["bard", "courage", "scribe", "socialite", "wealth", "withdraw", "mercantile"]
        errors: list[Exception] = []

        def buy(skill_id: str) -> None:
            try:
                ledger.characters.purchase_skill(fresh_character.id, skill_id)
            except InsufficientExperienceError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=buy, args=(s,)) for s in skills]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        character = ledger.characters.get(fresh_character.id)
        assert len(character.skills) == 5
        assert len(errors) == 2
        assert character.experience == 0
        history = ledger.characters.experience_history(character.id)
        assert sum(e.amount for e in history) == character.experience


class TestRemoveSkill:
    def test_refunds_what_was_paid(self, ledger, fresh_character, admin):
        ledger.characters.purchase_skill(fresh_character.id, "mining")
        character = ledger.characters.remove_skill(fresh_character.id, "mining", admin.id)
        assert character.experience == 25
        assert "mining" not in character.skills
        assert character.total_xp_spent == 0
        refund = ledger.characters.experience_history(character.id)[0]
        assert (refund.amount, refund.kind) == (10, "refund")

    def test_refund_keeps_other_spending(self, ledger, fresh_character, admin):
        ledger.characters.purchase_skill(fresh_character.id, "bard")
        ledger.characters.purchase_skill(fresh_character.id, "mining")
        ledger.characters.increase_attribute(fresh_character.id, "body", 2)
        character = ledger.characters.remove_skill(fresh_character.id, "mining", admin.id)
        assert character.total_xp_spent == 7
        assert character.experience == 18

    def test_prerequisite_of_learned_skill(self, ledger, fresh_character, admin):
        ledger.characters.purchase_skill(fresh_character.id, "first_aid")
        ledger.characters.purchase_skill(fresh_character.id, "healing")
        with pytest.raises(InvalidRequestError):
            ledger.characters.remove_skill(fresh_character.id, "first_aid", admin.id)

    def test_not_learned(self, ledger, fresh_character, admin):
        with pytest.raises(InvalidRequestError):
            ledger.characters.remove_skill(fresh_character.id, "bard", admin.id)


class TestIncreaseAttribute:
    def test_single_point(self, ledger, fresh_character):
        character = ledger.characters.increase_attribute(fresh_character.id, "body")
        assert character.body == 11
        assert character.experience == 24

    def test_crossing_band(self, ledger, fresh_character):
        character = ledger.characters.increase_attribute(fresh_character.id, "stamina", 11)
        # 10..19 at 1 XP, 20 at 2 XP
        assert character.stamina == 21
        assert character.experience == 25 - 12
        reasons = [e.reason for e in ledger.characters.experience_history(character.id)]
        assert "Stamina increase: 20→21" in reasons

    def test_unaffordable_is_all_or_nothing(self, ledger, fresh_character):
        with pytest.raises(InsufficientExperienceError):
            ledger.characters.increase_attribute(fresh_character.id, "body", 20)
        character = ledger.characters.get(fresh_character.id)
        assert character.body == 10
        assert character.experience == 25
        assert len(ledger.characters.experience_history(character.id)) == 1

    @pytest.mark.parametrize("attribute, points", [("strength", 1), ("body", 0)])
    def test_invalid_request(self, ledger, fresh_character, attribute, points):
        with pytest.raises(InvalidRequestError):
            ledger.characters.increase_attribute(fresh_character.id, attribute, points)


class TestSecondArchetype:
    def test_rejected_at_twenty_xp(self, ledger, fresh_character):
        ledger.characters.purchase_skill(fresh_character.id, "bard")
        with pytest.raises(InsufficientExperienceError):
            ledger.characters.purchase_second_archetype(fresh_character.id, "soldier")
        character = ledger.characters.get(fresh_character.id)
        assert character.experience == 20
        assert character.second_archetype_id is None

    def test_purchase_changes_pricing(self, ledger, fresh_character, admin):
        ledger.characters.award_experience(fresh_character.id, 50, "Backlog", admin.id)
        character = ledger.characters.purchase_second_archetype(fresh_character.id, "soldier")
        assert character.second_archetype_id == "soldier"
        assert character.experience == 25
        parry = next(q for q in ledger.characters.quote(character.id).skills if q.skill_id == "parry")
        assert parry.cost == 5

    def test_same_as_primary(self, ledger, fresh_character, admin):
        ledger.characters.award_experience(fresh_character.id, 50, "Backlog", admin.id)
        with pytest.raises(InvalidRequestError):
            ledger.characters.purchase_second_archetype(fresh_character.id, "advisor")

    def test_only_one(self, ledger, fresh_character, admin):
        ledger.characters.award_experience(fresh_character.id, 100, "Backlog", admin.id)
        ledger.characters.purchase_second_archetype(fresh_character.id, "soldier")
        with pytest.raises(InvalidRequestError):
            ledger.characters.purchase_second_archetype(fresh_character.id, "rogue")


class TestQuote:
    def test_quote(self, ledger, fresh_character):
        quote = ledger.characters.quote(fresh_character.id)
        prices = {q.skill_id: q for q in quote.skills}
        assert prices["bard"].cost == 5
        assert prices["mining"].cost == 10
        assert prices["stealth"].cost == 20
        assert prices["healing"].prerequisite_met is False
        assert prices["stealth"].affordable is True
        assert quote.next_body_cost == 1
        assert quote.experience == 25
        assert quote.second_archetype_available is False


class TestAwards:
    def test_award(self, ledger, fresh_character, admin):
        character = ledger.characters.award_experience(fresh_character.id, 6, "Plot reward", admin.id)
        assert character.experience == 31

    @pytest.mark.parametrize("amount, reason", [(0, "x"), (-5, "x"), (5, "  ")])
    def test_invalid(self, ledger, fresh_character, admin, amount, reason):
        with pytest.raises(InvalidRequestError):
            ledger.characters.award_experience(fresh_character.id, amount, reason, admin.id)

    def test_bulk_is_all_or_nothing(self, ledger, fresh_character, admin):
        with pytest.raises(NotFoundError):
            ledger.characters.award_experience_bulk(
                [fresh_character.id, "ghost"], 3, "Weekend", admin.id,
            )
        assert ledger.characters.get(fresh_character.id).experience == 25

    def test_bulk(self, ledger, player, fresh_character, admin):
        other = _create(ledger, player, name="Kestrel")
        result = ledger.characters.award_experience_bulk(
            [fresh_character.id, other.id], 3, "Weekend", admin.id,
        )
        assert [c.experience for c in result] == [28, 28]


class TestLifecycle:
    def test_retire_locks_economy(self, ledger, fresh_character, admin):
        character = ledger.characters.retire(fresh_character.id, "Died heroically", admin.id)
        assert character.status == CharacterStatus.RETIRED
        assert character.retirement_reason == "Died heroically"
        assert character.retired_by == admin.id
        assert character.retired_at is not None
        with pytest.raises(CharacterLockedError):
            ledger.characters.purchase_skill(fresh_character.id, "bard")
        with pytest.raises(CharacterLockedError):
            ledger.characters.award_experience(fresh_character.id, 5, "x", admin.id)
        with pytest.raises(CharacterLockedError):
            ledger.characters.set_active(fresh_character.id, True)

    def test_retire_needs_reason(self, ledger, fresh_character, admin):
        with pytest.raises(InvalidRequestError):
            ledger.characters.retire(fresh_character.id, "", admin.id)

    def test_inactive_can_still_spend(self, ledger, fresh_character):
        character = ledger.characters.set_active(fresh_character.id, False)
        assert character.status == CharacterStatus.INACTIVE
        assert ledger.characters.purchase_skill(fresh_character.id, "bard").experience == 20


class TestDeleteAndRefresh:
    def test_owner_can_delete(self, ledger, player, fresh_character):
        ledger.characters.delete_character(fresh_character.id, player.id)
        with pytest.raises(NotFoundError):
            ledger.characters.get(fresh_character.id)
        assert ledger.characters.ledger.balance(fresh_character.id) == 0

    def test_delete_refunds_candles_for_pending_rsvps(self, ledger, player, admin, fresh_character):
        ledger.candles.award(player.id, 5, "Setup crew", admin.id)
        upcoming = ledger.events.create_event("Muster", "2025-06-01", admin.id)
        past = ledger.events.create_event("Harvest", "2025-03-01", admin.id)
        ledger.events.rsvp(upcoming.id, fresh_character.id, player.id, xp_candle_purchases=2)
        attended = ledger.events.rsvp(past.id, fresh_character.id, player.id, xp_candle_purchases=1)
        ledger.events.mark_attendance(attended.id, True, admin.id)
        assert ledger.candles.balance(player.id) == 2

        ledger.characters.delete_character(fresh_character.id, player.id)
        assert ledger.candles.balance(player.id) == 4
        assert ledger.events.list_rsvps(upcoming.id) == []

    def test_stranger_cannot_delete(self, ledger, fresh_character):
        stranger = ledger.chapters.register_user("bo", "Bo", "bo@example.com")
        with pytest.raises(PermissionDeniedError):
            ledger.characters.delete_character(fresh_character.id, stranger.id)

    def test_refresh_repairs_cache(self, ledger, fresh_character):
        ledger.characters.characters.update_fields(fresh_character.id, experience=999)
        assert ledger.characters.refresh_totals(fresh_character.id).experience == 25
