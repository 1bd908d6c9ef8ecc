"""Game reference data: heritages, cultures, archetypes and skills."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Skill(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    prerequisite_id: Optional[str] = None


class Heritage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    body: int
    stamina: int
    description: str = ""
    costume_requirements: str = ""
    benefit: str = ""
    weakness: str = ""
    secondary_skills: list[str] = Field(default_factory=list)


class Culture(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    heritage_id: str
    description: str = ""
    primary_skills: list[str] = Field(default_factory=list)
    secondary_skills: list[str] = Field(default_factory=list)


class Archetype(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str = ""
    primary_skills: list[str] = Field(default_factory=list)
    secondary_skills: list[str] = Field(default_factory=list)


class ReferenceData(BaseModel):
    """One consistent snapshot of every reference table.

    Loaded once (from the TOML content or the database) and handed to the
    economy functions; nothing here fetches lazily.
    """

    skills: dict[str, Skill] = Field(default_factory=dict)
    heritages: dict[str, Heritage] = Field(default_factory=dict)
    cultures: dict[str, Culture] = Field(default_factory=dict)
    archetypes: dict[str, Archetype] = Field(default_factory=dict)

    @classmethod
    def from_lists(
        cls,
        skills: list[Skill],
        heritages: list[Heritage],
        cultures: list[Culture],
        archetypes: list[Archetype],
    ) -> ReferenceData:
        return cls(
            skills={s.id: s for s in skills},
            heritages={h.id: h for h in heritages},
            cultures={c.id: c for c in cultures},
            archetypes={a.id: a for a in archetypes},
        )

    def skill(self, skill_id: str) -> Skill | None:
        return self.skills.get(skill_id)

    def heritage(self, heritage_id: str) -> Heritage | None:
        return self.heritages.get(heritage_id)

    def culture(self, culture_id: str) -> Culture | None:
        return self.cultures.get(culture_id)

    def archetype(self, archetype_id: str | None) -> Archetype | None:
        if not archetype_id:
            return None
        return self.archetypes.get(archetype_id)

    def cultures_for(self, heritage_id: str) -> list[Culture]:
        return [c for c in self.cultures.values() if c.heritage_id == heritage_id]

    def skill_name(self, skill_id: str) -> str:
        skill = self.skills.get(skill_id)
        return skill.name if skill else skill_id

    def validate(self) -> list[str]:
        """Return human-readable problems with the data; empty when consistent."""
        from larp_ledger.mechanics.skills import find_prerequisite_cycles

        problems: list[str] = []
        for skill in self.skills.values():
            if skill.prerequisite_id and skill.prerequisite_id not in self.skills:
                problems.append(
                    f"Skill '{skill.id}' requires unknown skill '{skill.prerequisite_id}'"
                )
        for heritage in self.heritages.values():
            for sid in heritage.secondary_skills:
                if sid not in self.skills:
                    problems.append(f"Heritage '{heritage.id}' lists unknown skill '{sid}'")
        for culture in self.cultures.values():
            if culture.heritage_id not in self.heritages:
                problems.append(
                    f"Culture '{culture.id}' belongs to unknown heritage '{culture.heritage_id}'"
                )
            for sid in culture.primary_skills + culture.secondary_skills:
                if sid not in self.skills:
                    problems.append(f"Culture '{culture.id}' lists unknown skill '{sid}'")
        for archetype in self.archetypes.values():
            for sid in archetype.primary_skills + archetype.secondary_skills:
                if sid not in self.skills:
                    problems.append(f"Archetype '{archetype.id}' lists unknown skill '{sid}'")
        for cycle in find_prerequisite_cycles(self.skills.values()):
            problems.append("Prerequisite cycle: " + " -> ".join(cycle))
        return problems
