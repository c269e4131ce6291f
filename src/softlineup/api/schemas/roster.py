from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from softlineup.models import AttendanceStatus, Gender, PositionPreference


class PlayerPayload(BaseModel):
    name: str = Field(..., min_length=1)
    gender: Gender | None = None
    is_pitcher: bool = False
    is_admin: bool = False
    is_active: bool = True
    preferences: List[PositionPreference] = Field(default_factory=list, max_length=3)


class GameCreateRequest(BaseModel):
    opponent: str = Field(..., min_length=1)
    scheduled_at: str | None = None


class GameResponse(BaseModel):
    game_id: str
    team_id: str
    opponent: str
    scheduled_at: str | None
    created_at: datetime


class AttendanceUpdateRequest(BaseModel):
    status: AttendanceStatus
