from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Chapter(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    code: str
    description: Optional[str] = None
    is_active: bool = True
    created_by: str
    created_at: Optional[str] = None
    member_count: Optional[int] = None


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    username: str
    player_name: str
    email: str
    player_number: Optional[str] = None
    title: Optional[str] = None
    chapter_id: Optional[str] = None
    is_admin: bool = False
    candles: int = 0
    created_at: Optional[str] = None
