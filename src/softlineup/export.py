"""CSV export helpers for generated lineups."""

from __future__ import annotations

import csv
from collections import defaultdict
from io import StringIO
from typing import Mapping, Optional, Sequence

from softlineup.config import FieldingRules, get_rules
from softlineup.models import BattingSlot, FieldingAssignment, Player


class LineupExportError(RuntimeError):
    """Raised when a lineup cannot be laid out for export."""


def _names(players: Sequence[Player]) -> Mapping[str, str]:
    return {player.player_id: player.name or player.player_id for player in players}


def batting_order_to_csv(slots: Sequence[BattingSlot], players: Sequence[Player]) -> str:
    """One row per batting slot, in batting order."""

    names = _names(players)
    genders = {player.player_id: player.gender.value if player.gender else "" for player in players}
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["batting_position", "player_id", "name", "gender", "is_generated"])
    for slot in sorted(slots, key=lambda item: item.batting_position):
        writer.writerow([
            slot.batting_position,
            slot.player_id,
            names.get(slot.player_id, slot.player_id),
            genders.get(slot.player_id, ""),
            int(slot.is_generated),
        ])
    return buffer.getvalue()


def fielding_lineup_to_csv(
    assignments: Sequence[FieldingAssignment],
    players: Sequence[Player],
    *,
    rules: Optional[FieldingRules] = None,
) -> str:
    """Grid with one row per inning and one column per fielding position."""

    rules = rules or get_rules()
    names = _names(players)
    by_inning: dict[int, dict[str, str]] = defaultdict(dict)
    for assignment in assignments:
        if assignment.position not in rules.positions:
            raise LineupExportError(f"Unknown position {assignment.position!r} in inning {assignment.inning}")
        inning = by_inning[assignment.inning]
        if assignment.position in inning:
            raise LineupExportError(
                f"Position {assignment.position} assigned twice in inning {assignment.inning}"
            )
        inning[assignment.position] = names.get(assignment.player_id, assignment.player_id)

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["inning", *rules.positions])
    for inning in sorted(by_inning):
        row = by_inning[inning]
        writer.writerow([inning, *(row.get(position, "") for position in rules.positions)])
    return buffer.getvalue()


__all__ = [
    "LineupExportError",
    "batting_order_to_csv",
    "fielding_lineup_to_csv",
]
