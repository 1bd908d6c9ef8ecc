from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ExperienceEntry(BaseModel):
    """One append-only row of a character's XP ledger.

    Positive amounts are awards or refunds, negative amounts are purchases.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    character_id: str
    amount: int
    reason: str
    kind: str = "award"
    event_id: Optional[str] = None
    rsvp_id: Optional[str] = None
    awarded_by: str
    created_at: Optional[str] = None
    event_name: Optional[str] = None
    event_date: Optional[str] = None


class CandleTransaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    amount: int
    reason: str
    created_by: str
    created_at: Optional[str] = None
    admin_name: Optional[str] = None
