"""Tests for src/larp_ledger/storage/repos/reference_repo.py."""
from __future__ import annotations

import pytest

from larp_ledger.models.reference import Skill
from larp_ledger.storage.repos import ReferenceRepo


@pytest.fixture
def repo(in_memory_db):
    return ReferenceRepo(in_memory_db)


class TestSeedAndLoad:
    def test_round_trip_matches_content(self, repo, reference):
        assert repo.is_empty()
        assert repo.seed(reference) is True
        loaded = repo.load()
        assert set(loaded.skills) == set(reference.skills)
        assert loaded.heritage("stoneborn").body == 15
        assert set(loaded.archetype("advisor").primary_skills) == set(
            reference.archetype("advisor").primary_skills
        )
        assert loaded.skill("healing").prerequisite_id == "first_aid"
        assert loaded.validate() == []

    def test_seed_is_one_shot(self, repo, reference):
        repo.seed(reference)
        assert repo.seed(reference) is False


class TestEdits:
    def test_add_and_remove_link(self, repo, reference):
        repo.seed(reference)
        repo.add_link("heritage", "human", "bard", "secondary")
        assert "bard" in repo.load().heritage("human").secondary_skills
        assert repo.remove_link("heritage", "human", "bard", "secondary") is True
        assert "bard" not in repo.load().heritage("human").secondary_skills

    def test_heritage_links_are_secondary_only(self, repo):
        with pytest.raises(ValueError):
            repo.add_link("heritage", "human", "bard", "primary")

    def test_unknown_kind(self, repo):
        with pytest.raises(ValueError):
            repo.add_link("chapter", "x", "bard", "primary")

    def test_delete_skill_clears_dependents(self, repo, reference):
        repo.seed(reference)
        assert repo.delete_skill("first_aid") is True
        loaded = repo.load()
        assert loaded.skill("first_aid") is None
        assert loaded.skill("healing").prerequisite_id is None
        assert "first_aid" not in loaded.heritage("human").secondary_skills

    def test_upsert_skill(self, repo):
        repo.upsert_skill(Skill(id="juggling", name="Juggling"))
        repo.upsert_skill(Skill(id="juggling", name="Juggling", description="Three balls"))
        assert repo.load().skill("juggling").description == "Three balls"
