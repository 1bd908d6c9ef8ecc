from __future__ import annotations

import logging
from collections import defaultdict

from larp_ledger.models.reference import Archetype, Culture, Heritage, ReferenceData, Skill
from larp_ledger.storage.database import Database

logger = logging.getLogger(__name__)

# owner kind -> (link table, owner column, allowed tiers)
_LINKS: dict[str, tuple[str, str, frozenset[str]]] = {
    "heritage": ("heritage_skills", "heritage_id", frozenset({"secondary"})),
    "culture": ("culture_skills", "culture_id", frozenset({"primary", "secondary"})),
    "archetype": ("archetype_skills", "archetype_id", frozenset({"primary", "secondary"})),
}


def _link_target(kind: str, tier: str) -> tuple[str, str]:
    if kind not in _LINKS:
        raise ValueError(f"Unknown reference kind: {kind}")
    table, column, tiers = _LINKS[kind]
    if tier not in tiers:
        raise ValueError(f"{kind} skills cannot be {tier}")
    return table, column


class ReferenceRepo:
    """Reference tables (skills, heritages, cultures, archetypes) in the database."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # -- Skills --

    def upsert_skill(self, skill: Skill) -> None:
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO skills (id, name, description, prerequisite_id) VALUES (?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET name = excluded.name, "
                "description = excluded.description, prerequisite_id = excluded.prerequisite_id",
                (skill.id, skill.name, skill.description, skill.prerequisite_id),
            )

    def delete_skill(self, skill_id: str) -> bool:
        with self.db.get_connection() as conn:
            conn.execute(
                "UPDATE skills SET prerequisite_id = NULL WHERE prerequisite_id = ?", (skill_id,)
            )
            cur = conn.execute("DELETE FROM skills WHERE id = ?", (skill_id,))
        return cur.rowcount == 1

    # -- Heritages --

    def upsert_heritage(self, heritage: Heritage) -> None:
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO heritages (id, name, body, stamina, description, "
                "costume_requirements, benefit, weakness) VALUES (?, ?, ?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET name = excluded.name, body = excluded.body, "
                "stamina = excluded.stamina, description = excluded.description, "
                "costume_requirements = excluded.costume_requirements, "
                "benefit = excluded.benefit, weakness = excluded.weakness",
                (heritage.id, heritage.name, heritage.body, heritage.stamina,
                 heritage.description, heritage.costume_requirements,
                 heritage.benefit, heritage.weakness),
            )
            for sid in heritage.secondary_skills:
                self.add_link("heritage", heritage.id, sid, "secondary")

    def delete_heritage(self, heritage_id: str) -> bool:
        with self.db.get_connection() as conn:
            cur = conn.execute("DELETE FROM heritages WHERE id = ?", (heritage_id,))
        return cur.rowcount == 1

    # -- Cultures --

    def upsert_culture(self, culture: Culture) -> None:
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO cultures (id, name, heritage_id, description) VALUES (?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET name = excluded.name, "
                "heritage_id = excluded.heritage_id, description = excluded.description",
                (culture.id, culture.name, culture.heritage_id, culture.description),
            )
            for sid in culture.primary_skills:
                self.add_link("culture", culture.id, sid, "primary")
            for sid in culture.secondary_skills:
                self.add_link("culture", culture.id, sid, "secondary")

    def delete_culture(self, culture_id: str) -> bool:
        with self.db.get_connection() as conn:
            cur = conn.execute("DELETE FROM cultures WHERE id = ?", (culture_id,))
        return cur.rowcount == 1

    # -- Archetypes --

    def upsert_archetype(self, archetype: Archetype) -> None:
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO archetypes (id, name, description) VALUES (?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET name = excluded.name, "
                "description = excluded.description",
                (archetype.id, archetype.name, archetype.description),
            )
            for sid in archetype.primary_skills:
                self.add_link("archetype", archetype.id, sid, "primary")
            for sid in archetype.secondary_skills:
                self.add_link("archetype", archetype.id, sid, "secondary")

    def delete_archetype(self, archetype_id: str) -> bool:
        with self.db.get_connection() as conn:
            cur = conn.execute("DELETE FROM archetypes WHERE id = ?", (archetype_id,))
        return cur.rowcount == 1

    # -- Skill links --

    def add_link(self, kind: str, owner_id: str, skill_id: str, tier: str) -> None:
        table, column = _link_target(kind, tier)
        with self.db.get_connection() as conn:
            conn.execute(
                f"INSERT OR IGNORE INTO {table} ({column}, skill_id, tier) VALUES (?, ?, ?)",
                (owner_id, skill_id, tier),
            )

    def remove_link(self, kind: str, owner_id: str, skill_id: str, tier: str) -> bool:
        table, column = _link_target(kind, tier)
        with self.db.get_connection() as conn:
            cur = conn.execute(
                f"DELETE FROM {table} WHERE {column} = ? AND skill_id = ? AND tier = ?",
                (owner_id, skill_id, tier),
            )
        return cur.rowcount == 1

    # -- Snapshot --

    def is_empty(self) -> bool:
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT COUNT(*) FROM skills").fetchone()
        return row[0] == 0

    def seed(self, reference: ReferenceData) -> bool:
        """Write ``reference`` into empty tables. Returns False if already seeded."""
        with self.db.get_connection():
            if not self.is_empty():
                return False
            # Prerequisites are set after every skill exists.
            for skill in reference.skills.values():
                self.upsert_skill(skill.model_copy(update={"prerequisite_id": None}))
            for skill in reference.skills.values():
                if skill.prerequisite_id:
                    self.upsert_skill(skill)
            for heritage in reference.heritages.values():
                self.upsert_heritage(heritage)
            for culture in reference.cultures.values():
                self.upsert_culture(culture)
            for archetype in reference.archetypes.values():
                self.upsert_archetype(archetype)
        logger.info(
            "Seeded %d skills, %d heritages, %d cultures, %d archetypes",
            len(reference.skills), len(reference.heritages),
            len(reference.cultures), len(reference.archetypes),
        )
        return True

    def load(self) -> ReferenceData:
        """Read every reference table into one snapshot."""
        with self.db.get_connection() as conn:
            links: dict[tuple[str, str, str], list[str]] = defaultdict(list)
            for kind, (table, column, _) in _LINKS.items():
                for row in conn.execute(
                    f"SELECT {column} AS owner, skill_id, tier FROM {table} ORDER BY rowid"
                ):
                    links[(kind, row["owner"], row["tier"])].append(row["skill_id"])

            skills = [Skill(**dict(r)) for r in conn.execute("SELECT * FROM skills ORDER BY name")]
            heritages = [
                Heritage(**dict(r), secondary_skills=links[("heritage", r["id"], "secondary")])
                for r in conn.execute("SELECT * FROM heritages ORDER BY name")
            ]
            cultures = [
                Culture(
                    **dict(r),
                    primary_skills=links[("culture", r["id"], "primary")],
                    secondary_skills=links[("culture", r["id"], "secondary")],
                )
                for r in conn.execute("SELECT * FROM cultures ORDER BY name")
            ]
            archetypes = [
                Archetype(
                    **dict(r),
                    primary_skills=links[("archetype", r["id"], "primary")],
                    secondary_skills=links[("archetype", r["id"], "secondary")],
                )
                for r in conn.execute("SELECT * FROM archetypes ORDER BY name")
            ]
        return ReferenceData.from_lists(skills, heritages, cultures, archetypes)
