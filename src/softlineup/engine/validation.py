"""Checks applied to hand-edited lineups before they replace generated ones."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

from softlineup.config import FieldingRules
from softlineup.models import BattingSlot, FieldingAssignment


def validate_batting_order(slots: Sequence[BattingSlot], *, rules: FieldingRules) -> None:
    """Raise ValueError unless the order is long enough and free of repeats."""

    if len(slots) < rules.min_confirmed:
        raise ValueError(f"batting order must have at least {rules.min_confirmed} players")
    positions = [slot.batting_position for slot in slots]
    if len(set(positions)) != len(positions):
        raise ValueError("duplicate batting position found")
    if max(positions) > len(slots):
        raise ValueError(f"batting positions must run from 1 to {len(slots)}")
    players = [slot.player_id for slot in slots]
    if len(set(players)) != len(players):
        raise ValueError("player appears more than once in batting order")


def validate_fielding_lineup(assignments: Sequence[FieldingAssignment], *, rules: FieldingRules) -> None:
    """Raise ValueError unless every inning has a full, non-repeating defence."""

    innings: Dict[int, List[FieldingAssignment]] = defaultdict(list)
    for assignment in assignments:
        if not rules.valid_inning(assignment.inning):
            raise ValueError(f"inning must be between 1 and {rules.innings}")
        innings[assignment.inning].append(assignment)

    valid_positions = set(rules.positions)
    for inning, lineup in sorted(innings.items()):
        if len(lineup) != len(rules.positions):
            raise ValueError(f"each inning must have exactly {len(rules.positions)} players")
        seen_positions: set[str] = set()
        seen_players: set[str] = set()
        for assignment in lineup:
            if assignment.position not in valid_positions:
                raise ValueError(f"invalid position: {assignment.position}")
            if assignment.position in seen_positions:
                raise ValueError(f"duplicate position found in inning {inning}: {assignment.position}")
            if assignment.player_id in seen_players:
                raise ValueError(f"player {assignment.player_id} fielded twice in inning {inning}")
            seen_positions.add(assignment.position)
            seen_players.add(assignment.player_id)
