from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: Optional[str] = None
    event_date: str
    location: Optional[str] = None
    is_active: bool = True
    created_by: str
    created_at: Optional[str] = None


class EventRsvp(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_id: str
    character_id: str
    user_id: str
    xp_purchases: int = 0
    xp_candle_purchases: int = 0
    attended: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
