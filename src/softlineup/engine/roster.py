"""Attendance filtering and gender partitioning shared by every generator."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from softlineup.engine.errors import InsufficientPlayers
from softlineup.models import AttendanceRecord, AttendanceStatus, Gender, Player


def confirmed_players(
    players: Iterable[Player],
    attendance: Iterable[AttendanceRecord],
    *,
    min_confirmed: int = 9,
) -> List[Player]:
    """Return active players marked ``going``, in attendance order.

    Raises ``InsufficientPlayers`` when fewer than ``min_confirmed`` remain.
    """

    by_id = {player.player_id: player for player in players}
    confirmed: List[Player] = []
    seen: set[str] = set()
    for record in attendance:
        if record.status is not AttendanceStatus.GOING:
            continue
        player = by_id.get(record.player_id)
        if player is None or not player.is_active or player.player_id in seen:
            continue
        seen.add(player.player_id)
        confirmed.append(player)

    if len(confirmed) < min_confirmed:
        raise InsufficientPlayers(len(confirmed), min_confirmed)
    return confirmed


def partition_by_gender(players: Sequence[Player]) -> Tuple[List[Player], List[Player]]:
    """Split players into (males, females) keeping relative order.

    Players without a recorded gender are in neither list.
    """

    males = [player for player in players if player.gender is Gender.M]
    females = [player for player in players if player.gender is Gender.F]
    return males, females


def ungendered(players: Sequence[Player]) -> List[Player]:
    return [player for player in players if player.gender is None]
