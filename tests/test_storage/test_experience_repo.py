"""Tests for src/larp_ledger/storage/repos/experience_repo.py."""
from __future__ import annotations

import threading

import pytest

from larp_ledger.storage.repos import CharacterRepo, ExperienceRepo, UserRepo


@pytest.fixture
def character_id(seeded_db):
    UserRepo(seeded_db).create({
        "id": "u1", "username": "u1", "player_name": "Player One",
        "email": "u1@example.com", "created_at": "2025-01-01T00:00:00Z",
    })
    CharacterRepo(seeded_db).save({
        "id": "c1", "user_id": "u1", "name": "Brannoc",
        "heritage_id": "human", "culture_id": "erdanian", "archetype_id": "soldier",
        "body": 10, "stamina": 10, "skills": [],
        "created_at": "2025-01-01T00:00:00Z", "updated_at": "2025-01-01T00:00:00Z",
    })
    return "c1"


@pytest.fixture
def repo(seeded_db):
    return ExperienceRepo(seeded_db)


class TestAppendAndTotals:
    def test_balance_is_sum(self, repo, character_id):
        repo.append(character_id, 25, "Character creation", "u1")
        repo.append(character_id, -5, "Skill purchase: Parry", "u1")
        repo.append(character_id, 6, "Bonus", "u1")
        assert repo.balance(character_id) == 26
        assert repo.total_spent(character_id) == 5

    def test_empty_ledger(self, repo, character_id):
        assert repo.balance(character_id) == 0
        assert repo.total_spent(character_id) == 0

    def test_refresh_totals_updates_cache(self, seeded_db, repo, character_id):
        repo.append(character_id, 25, "Character creation", "u1")
        repo.append(character_id, -10, "Skill purchase: Mining", "u1")
        assert repo.refresh_totals(character_id) == (15, 10)
        row = CharacterRepo(seeded_db).get(character_id)
        assert row["experience"] == 15
        assert row["total_xp_spent"] == 10

    def test_refund_rows_net_out_of_spent(self, repo, character_id):
        repo.append(character_id, 25, "Character creation", "u1")
        repo.spend(character_id, 10, "Skill purchase: Mining", "u1")
        repo.append(character_id, 10, "Skill refund: Mining", "u1", kind="refund")
        assert repo.refresh_totals(character_id) == (25, 0)
        kinds = [r["kind"] for r in repo.list_for_character(character_id)]
        assert kinds == ["refund", "purchase", "award"]

    def test_history_newest_first(self, repo, character_id):
        repo.append(character_id, 25, "first", "u1")
        repo.append(character_id, 1, "second", "u1")
        reasons = [r["reason"] for r in repo.list_for_character(character_id)]
        assert reasons == ["second", "first"]


class TestSpend:
    def test_spend_within_balance(self, repo, character_id):
        repo.append(character_id, 25, "Character creation", "u1")
        assert repo.spend(character_id, 20, "Skill purchase: Stealth", "u1") is not None
        assert repo.balance(character_id) == 5

    def test_spend_exact_balance(self, repo, character_id):
        repo.append(character_id, 10, "Award", "u1")
        assert repo.spend(character_id, 10, "x", "u1") is not None
        assert repo.balance(character_id) == 0

    def test_spend_rejected_writes_nothing(self, repo, character_id):
        repo.append(character_id, 4, "Award", "u1")
        assert repo.spend(character_id, 5, "Skill purchase: Bard", "u1") is None
        assert repo.balance(character_id) == 4
        assert len(repo.list_for_character(character_id)) == 1

    def test_concurrent_spends_never_overdraw(self, repo, character_id):
        repo.append(character_id, 25, "Character creation", "u1")
        results: list[str | None] = []
        lock = threading.Lock()

        def buy(n: int) -> None:
            entry = repo.spend(character_id, 5, f"purchase {n}", "u1")
            with lock:
                results.append(entry)

        threads = [threading.Thread(target=buy, args=(i,)) for i in range(12)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        accepted = [r for r in results if r is not None]
        assert len(accepted) == 5
        assert repo.balance(character_id) == 0


class TestRsvpLinks:
    def test_delete_by_rsvp(self, repo, character_id):
        repo.append(character_id, 25, "Character creation", "u1")
        repo.append(character_id, 8, "Event attendance", "admin", rsvp_id="r1")
        assert repo.sum_for_rsvp("r1") == 8
        assert repo.delete_by_rsvp("r1") == 1
        assert repo.balance(character_id) == 25

    def test_find_latest(self, repo, character_id):
        repo.append(character_id, -5, "Skill purchase: Bard", "u1")
        assert repo.find_latest(character_id, "Skill purchase: Bard")["amount"] == -5
        assert repo.find_latest(character_id, "Skill purchase: Mining") is None
