"""Lineup generation engine: batting orders and fielding plans."""

from .batting import BattingOrderResult, PitcherSpacing, alternate_genders, build_batting_order, space_pitchers
from .errors import CannotAchieveGenderSplit, InsufficientPlayers, LineupGenerationError
from .fielding import assign_positions, select_inning_roster, shuffled_draw, take_first
from .roster import confirmed_players, partition_by_gender
from .scheduler import PlayingTimeTracker, SchedulePlan, schedule_innings
from .service import LineupEngine
from .validation import validate_batting_order, validate_fielding_lineup

__all__ = [
    "BattingOrderResult",
    "CannotAchieveGenderSplit",
    "InsufficientPlayers",
    "LineupEngine",
    "LineupGenerationError",
    "PitcherSpacing",
    "PlayingTimeTracker",
    "SchedulePlan",
    "alternate_genders",
    "assign_positions",
    "build_batting_order",
    "confirmed_players",
    "partition_by_gender",
    "schedule_innings",
    "select_inning_roster",
    "shuffled_draw",
    "space_pitchers",
    "take_first",
    "validate_batting_order",
    "validate_fielding_lineup",
]
