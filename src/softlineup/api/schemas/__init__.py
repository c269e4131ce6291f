"""Pydantic models for API I/O."""

from .lineup import (
    BattingOrderResponse,
    BattingOrderUpdateRequest,
    BattingSlotPayload,
    FieldingAssignmentPayload,
    FieldingLineupResponse,
    FieldingLineupUpdateRequest,
)
from .roster import AttendanceUpdateRequest, GameCreateRequest, GameResponse, PlayerPayload

__all__ = [
    "AttendanceUpdateRequest",
    "BattingOrderResponse",
    "BattingOrderUpdateRequest",
    "BattingSlotPayload",
    "FieldingAssignmentPayload",
    "FieldingLineupResponse",
    "FieldingLineupUpdateRequest",
    "GameCreateRequest",
    "GameResponse",
    "PlayerPayload",
]
