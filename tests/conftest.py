"""Shared fixtures for the ledger test suite."""
from __future__ import annotations

import pytest

from larp_ledger.content.loader import load_reference_data
from larp_ledger.models.reference import Archetype, Heritage, ReferenceData, Skill


@pytest.fixture(scope="session")
def reference() -> ReferenceData:
    return load_reference_data()


@pytest.fixture
def tiny_reference() -> ReferenceData:
    """A hand-built reference set small enough to reason about in a test."""
    return ReferenceData.from_lists(
        skills=[
            Skill(id="first_aid", name="First Aid"),
            Skill(id="healing", name="Healing", prerequisite_id="first_aid"),
            Skill(id="bard", name="Bard"),
            Skill(id="mining", name="Mining"),
            Skill(id="parry", name="Parry"),
            Skill(id="riposte", name="Riposte", prerequisite_id="parry"),
        ],
        heritages=[
            Heritage(id="human", name="Human", body=10, stamina=10,
                     secondary_skills=["first_aid", "mining"]),
        ],
        cultures=[],
        archetypes=[
            Archetype(id="advisor", name="Advisor",
                      primary_skills=["bard", "first_aid"], secondary_skills=["healing"]),
            Archetype(id="soldier", name="Soldier",
                      primary_skills=["parry"], secondary_skills=["riposte", "mining"]),
        ],
    )


@pytest.fixture
def in_memory_db(tmp_path):
    from larp_ledger.storage.database import Database

    db = Database(str(tmp_path / "test.db"))
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def seeded_db(in_memory_db, reference):
    from larp_ledger.storage.repos import ReferenceRepo

    ReferenceRepo(in_memory_db).seed(reference)
    return in_memory_db


@pytest.fixture
def ledger(tmp_path):
    from larp_ledger.app import LedgerApp

    app = LedgerApp(config={}, db_path=str(tmp_path / "ledger.db"))
    app.seed()
    yield app
    app.close()


@pytest.fixture
def player(ledger):
    return ledger.chapters.register_user("ayla", "Ayla Stone", "ayla@example.com")


@pytest.fixture
def admin(ledger):
    return ledger.chapters.register_user(
        "warden", "Game Master", "gm@example.com", is_admin=True,
    )


@pytest.fixture
def fresh_character(ledger, player):
    """Human Erdanian Advisor with the full 25 XP unspent."""
    return ledger.characters.create_character(
        user_id=player.id,
        name="Thessaly",
        heritage_id="human",
        culture_id="erdanian",
        archetype_id="advisor",
    )
