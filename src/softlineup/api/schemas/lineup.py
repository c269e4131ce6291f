from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from softlineup.models import BattingSlot, FieldingAssignment


class BattingSlotPayload(BaseModel):
    player_id: str = Field(..., min_length=1)
    batting_position: int = Field(..., ge=1)


class BattingOrderUpdateRequest(BaseModel):
    slots: List[BattingSlotPayload]


class BattingOrderResponse(BaseModel):
    game_id: str
    slots: List[BattingSlot]
    pitcher_spacing: str | None = None


class FieldingAssignmentPayload(BaseModel):
    inning: int = Field(..., ge=1)
    position: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)


class FieldingLineupUpdateRequest(BaseModel):
    assignments: List[FieldingAssignmentPayload]


class FieldingLineupResponse(BaseModel):
    game_id: str
    innings: List[int]
    assignments: List[FieldingAssignment]
