"""Single-inning roster selection and greedy position assignment."""

from __future__ import annotations

import random
from typing import Callable, List, Optional, Sequence

from softlineup.config import FieldingRules
from softlineup.engine.errors import CannotAchieveGenderSplit
from softlineup.models import FieldingAssignment, Player


Draw = Callable[[Sequence[Player], int], List[Player]]


def take_first(group: Sequence[Player], count: int) -> List[Player]:
    """Draw the first ``count`` players of an already-prioritised group."""

    return list(group[:count])


def shuffled_draw(rng: random.Random) -> Draw:
    """Return a draw that shuffles a copy of the group and takes the head."""

    def draw(group: Sequence[Player], count: int) -> List[Player]:
        if len(group) <= count:
            return list(group)
        pool = list(group)
        rng.shuffle(pool)
        return pool[:count]

    return draw


def select_inning_roster(
    males: Sequence[Player],
    females: Sequence[Player],
    *,
    rules: FieldingRules,
    draw: Draw = take_first,
    inning: Optional[int] = None,
) -> List[Player]:
    """Pick a 5-4 lineup, trying a male majority before a female one."""

    majority, minority = rules.majority_count, rules.minority_count
    if len(males) >= majority and len(females) >= minority:
        return draw(males, majority) + draw(females, minority)
    if len(females) >= majority and len(males) >= minority:
        return draw(females, majority) + draw(males, minority)
    raise CannotAchieveGenderSplit(
        len(males),
        len(females),
        majority=majority,
        minority=minority,
        inning=inning,
    )


def assign_positions(
    game_id: str,
    inning: int,
    selected: Sequence[Player],
    positions: Sequence[str],
) -> List[FieldingAssignment]:
    """Assign ``selected`` players to ``positions`` first-fit.

    The first pass gives each position, in order, to the first unassigned
    player who lists it among their preferences; rank is not compared. The
    second pass fills what is left with the first unassigned player.
    """

    chosen: dict[str, Player] = {}
    taken: set[str] = set()

    for position in positions:
        for player in selected:
            if player.player_id in taken or not player.prefers(position):
                continue
            chosen[position] = player
            taken.add(player.player_id)
            break

    for position in positions:
        if position in chosen:
            continue
        for player in selected:
            if player.player_id in taken:
                continue
            chosen[position] = player
            taken.add(player.player_id)
            break

    return [
        FieldingAssignment(
            game_id=game_id,
            inning=inning,
            position=position,
            player_id=chosen[position].player_id,
            is_generated=True,
        )
        for position in positions
        if position in chosen
    ]
