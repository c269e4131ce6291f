"""Canonical roster and lineup models."""

from .lineup import BattingSlot, FieldingAssignment, PlayerInningTrack
from .player import (
    AttendanceRecord,
    AttendanceStatus,
    Gender,
    Player,
    PositionPreference,
)

__all__ = [
    "AttendanceRecord",
    "AttendanceStatus",
    "BattingSlot",
    "FieldingAssignment",
    "Gender",
    "Player",
    "PlayerInningTrack",
    "PositionPreference",
]
