from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from larp_ledger.mechanics.lifecycle import CharacterStatus, status_of


class Character(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    name: str
    player_name: str = ""
    heritage_id: str
    culture_id: str
    archetype_id: str
    second_archetype_id: Optional[str] = None
    body: int
    stamina: int
    experience: int = 0
    total_xp_spent: int = 0
    skills: list[str] = Field(default_factory=list)
    is_active: bool = True
    is_retired: bool = False
    retired_at: Optional[str] = None
    retired_by: Optional[str] = None
    retirement_reason: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def status(self) -> CharacterStatus:
        return status_of(self.is_active, self.is_retired)


class SkillQuote(BaseModel):
    skill_id: str
    name: str
    tier: str
    cost: int
    learned: bool = False
    prerequisite_met: bool = True
    affordable: bool = False


class CharacterQuote(BaseModel):
    character_id: str
    experience: int
    total_xp_spent: int
    attribute_cost: int
    next_body_cost: int
    next_stamina_cost: int
    second_archetype_available: bool
    skills: list[SkillQuote] = Field(default_factory=list)
