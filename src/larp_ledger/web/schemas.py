from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class CharacterCreateIn(BaseModel):
    name: str = Field(min_length=1)
    heritage_id: str
    culture_id: str
    archetype_id: str
    body: Optional[int] = Field(None, ge=0)
    stamina: Optional[int] = Field(None, ge=0)
    skill_ids: List[str] = Field(default_factory=list)


class SkillPurchaseIn(BaseModel):
    skill_id: str


class AttributePurchaseIn(BaseModel):
    attribute: Literal["body", "stamina"]
    points: int = Field(1, ge=1)


class ArchetypePurchaseIn(BaseModel):
    archetype_id: str


class RetireIn(BaseModel):
    reason: str = Field(min_length=1)


class ActiveIn(BaseModel):
    active: bool


class SkillPriceOut(BaseModel):
    skill_id: str
    tier: str
    cost: int


class EventCreateIn(BaseModel):
    name: str = Field(min_length=1)
    event_date: str
    description: Optional[str] = None
    location: Optional[str] = None


class EventPatchIn(BaseModel):
    name: Optional[str] = None
    event_date: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    is_active: Optional[bool] = None


class RsvpIn(BaseModel):
    character_id: str
    xp_purchases: int = 0
    xp_candle_purchases: int = 0


class AttendanceIn(BaseModel):
    attended: bool


class ChapterCreateIn(BaseModel):
    name: str = Field(min_length=1)
    code: str
    description: Optional[str] = None


class UserCreateIn(BaseModel):
    username: str = Field(min_length=1)
    player_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    chapter_id: Optional[str] = None
    title: Optional[str] = None
    is_admin: bool = False


class CandleChangeIn(BaseModel):
    amount: int = Field(gt=0)
    reason: str = Field(min_length=1)


class CandleBalanceOut(BaseModel):
    user_id: str
    candles: int


class ExperienceAwardIn(BaseModel):
    character_ids: List[str] = Field(min_length=1)
    amount: int = Field(gt=0)
    reason: str = Field(min_length=1)


class RaritySettingsIn(BaseModel):
    common_threshold: Optional[int] = None
    rare_threshold: Optional[int] = None
    epic_threshold: Optional[int] = None
    legendary_threshold: Optional[int] = None
    enable_dynamic_rarity: Optional[bool] = None


class ValidationOut(BaseModel):
    ok: bool
    problems: List[str] = Field(default_factory=list)
