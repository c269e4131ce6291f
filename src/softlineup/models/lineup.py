"""Lineup output records and engine-internal tracking state."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class BattingSlot(BaseModel):
    game_id: str
    player_id: str
    batting_position: int = Field(..., ge=1)
    is_generated: bool = True

    model_config = ConfigDict(frozen=True)


class FieldingAssignment(BaseModel):
    game_id: str
    inning: int = Field(..., ge=1)
    position: str = Field(..., min_length=1)
    player_id: str
    is_generated: bool = True

    model_config = ConfigDict(frozen=True)


class PlayerInningTrack(BaseModel):
    """Playing time accumulated by one player during a multi-inning run.

    ``last_sat_out`` stays ``None`` until the player first sits an inning.
    """

    player_id: str
    innings_played: int = 0
    positions_played: Tuple[str, ...] = ()
    last_sat_out: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    def played(self, position: str) -> "PlayerInningTrack":
        return self.model_copy(
            update={
                "innings_played": self.innings_played + 1,
                "positions_played": self.positions_played + (position,),
            }
        )

    def sat_out(self, inning: int) -> "PlayerInningTrack":
        return self.model_copy(update={"last_sat_out": inning})
