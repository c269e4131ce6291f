"""Canonical player models shared across ingestion, engine and API layers."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class Gender(str, Enum):
    M = "M"
    F = "F"


class AttendanceStatus(str, Enum):
    GOING = "going"
    MAYBE = "maybe"
    NOT_GOING = "not_going"


class PositionPreference(BaseModel):
    """A player's ranked choice of fielding position (1 is the favourite)."""

    position: str = Field(..., min_length=1)
    rank: int = Field(..., ge=1, le=3)

    model_config = ConfigDict(frozen=True)


class Player(BaseModel):
    """Team membership record as seen by the lineup engine."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    gender: Optional[Gender] = None
    is_pitcher: bool = False
    is_admin: bool = False
    is_active: bool = True
    preferences: List[PositionPreference] = Field(default_factory=list, max_length=3)

    model_config = ConfigDict(frozen=True)

    @field_validator("preferences")
    @classmethod
    def _unique_preferences(cls, value: List[PositionPreference]) -> List[PositionPreference]:
        ranks = [pref.rank for pref in value]
        if len(set(ranks)) != len(ranks):
            raise ValueError("preference ranks must be unique")
        positions = [pref.position for pref in value]
        if len(set(positions)) != len(positions):
            raise ValueError("preference positions must be unique")
        return sorted(value, key=lambda pref: pref.rank)

    def preference_rank(self, position: str) -> Optional[int]:
        """Return the rank this player gave ``position``, or None if unranked."""

        for pref in self.preferences:
            if pref.position == position:
                return pref.rank
        return None

    def prefers(self, position: str) -> bool:
        return self.preference_rank(position) is not None


class AttendanceRecord(BaseModel):
    player_id: str = Field(..., min_length=1)
    game_id: str = Field(..., min_length=1)
    status: AttendanceStatus

    model_config = ConfigDict(frozen=True)
