"""Multi-inning fielding plans that balance playing time.

A ``PlayingTimeTracker`` snapshot is threaded through the innings: each inning
reads the current snapshot and produces the next one, so every state
transition can be inspected on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Tuple

from softlineup.config import FieldingRules
from softlineup.engine.errors import CannotAchieveGenderSplit
from softlineup.engine.fielding import select_inning_roster
from softlineup.engine.roster import partition_by_gender
from softlineup.models import FieldingAssignment, Player, PlayerInningTrack


logger = logging.getLogger(__name__)

_NEVER_SAT = -1


@dataclass(frozen=True)
class PlayingTimeTracker:
    tracks: Mapping[str, PlayerInningTrack] = field(default_factory=dict)

    @classmethod
    def start(cls, players: Sequence[Player]) -> "PlayingTimeTracker":
        return cls({player.player_id: PlayerInningTrack(player_id=player.player_id) for player in players})

    def track(self, player_id: str) -> PlayerInningTrack:
        return self.tracks[player_id]

    def innings_played(self, player_id: str) -> int:
        return self.tracks[player_id].innings_played

    def priority_key(self, player: Player) -> Tuple[int, int, str]:
        """Least-played first, then most recently rested, then id."""

        track = self.tracks[player.player_id]
        last_sat = track.last_sat_out if track.last_sat_out is not None else _NEVER_SAT
        return (track.innings_played, -last_sat, player.player_id)

    def priority_order(self, players: Sequence[Player]) -> List[Player]:
        return sorted(players, key=self.priority_key)

    def record_inning(
        self,
        inning: int,
        assignments: Sequence[FieldingAssignment],
        confirmed: Sequence[Player],
    ) -> "PlayingTimeTracker":
        tracks: Dict[str, PlayerInningTrack] = dict(self.tracks)
        fielded: set[str] = set()
        for assignment in assignments:
            tracks[assignment.player_id] = tracks[assignment.player_id].played(assignment.position)
            fielded.add(assignment.player_id)
        for player in confirmed:
            if player.player_id not in fielded:
                tracks[player.player_id] = tracks[player.player_id].sat_out(inning)
        return PlayingTimeTracker(tracks)


@dataclass(frozen=True)
class SchedulePlan:
    assignments: Tuple[FieldingAssignment, ...]
    tracker: PlayingTimeTracker


def _remaining_capacity(group: Sequence[Player], tracker: PlayingTimeTracker, rules: FieldingRules) -> int:
    return sum(rules.max_innings_per_player - tracker.innings_played(player.player_id) for player in group)


def select_balanced_roster(
    ordered: Sequence[Player],
    tracker: PlayingTimeTracker,
    *,
    rules: FieldingRules,
    inning: int,
) -> List[Player]:
    """Pick the inning's nine from a priority-ordered list, skipping capped players.

    When either gender could take the majority, the extra slot goes to the
    gender with more innings left under the cap. Equal headroom falls back to
    whichever gender's next-in-line player has the stronger priority.
    """

    eligible = [
        player
        for player in ordered
        if tracker.innings_played(player.player_id) < rules.max_innings_per_player
    ]
    males, females = partition_by_gender(eligible)
    majority, minority = rules.majority_count, rules.minority_count

    if min(len(males), len(females)) >= majority:
        male_room = _remaining_capacity(males, tracker, rules)
        female_room = _remaining_capacity(females, tracker, rules)
        if male_room == female_room:
            females_first = tracker.priority_key(females[majority - 1]) < tracker.priority_key(males[majority - 1])
        else:
            females_first = female_room > male_room
        if females_first:
            return females[:majority] + males[:minority]
        return males[:majority] + females[:minority]
    return select_inning_roster(males, females, rules=rules, inning=inning)


def assign_balanced_positions(
    game_id: str,
    inning: int,
    selected: Sequence[Player],
    tracker: PlayingTimeTracker,
    *,
    rules: FieldingRules,
) -> List[FieldingAssignment]:
    """Assign positions preferring the best-ranked taker, then the least-played."""

    cap = rules.max_innings_per_player
    chosen: Dict[str, Player] = {}
    taken: set[str] = set()

    for position in rules.positions:
        best: Player | None = None
        best_rank = 0
        for player in selected:
            if player.player_id in taken:
                continue
            rank = player.preference_rank(position)
            if rank is None or tracker.innings_played(player.player_id) >= cap:
                continue
            if best is None or rank < best_rank:
                best, best_rank = player, rank
        if best is not None:
            chosen[position] = best
            taken.add(best.player_id)

    for position in rules.positions:
        if position in chosen:
            continue
        best = None
        fewest = cap
        for player in selected:
            if player.player_id in taken:
                continue
            played = tracker.innings_played(player.player_id)
            if played < fewest:
                best, fewest = player, played
        if best is not None:
            chosen[position] = best
            taken.add(best.player_id)

    return [
        FieldingAssignment(
            game_id=game_id,
            inning=inning,
            position=position,
            player_id=chosen[position].player_id,
            is_generated=True,
        )
        for position in rules.positions
        if position in chosen
    ]


def schedule_inning(
    game_id: str,
    inning: int,
    confirmed: Sequence[Player],
    tracker: PlayingTimeTracker,
    *,
    rules: FieldingRules,
) -> Tuple[List[FieldingAssignment], PlayingTimeTracker]:
    ordered = tracker.priority_order(confirmed)
    selected = select_balanced_roster(ordered, tracker, rules=rules, inning=inning)
    assignments = assign_balanced_positions(game_id, inning, selected, tracker, rules=rules)
    return assignments, tracker.record_inning(inning, assignments, confirmed)


def schedule_innings(
    game_id: str,
    confirmed: Sequence[Player],
    *,
    rules: FieldingRules,
) -> SchedulePlan:
    """Build the whole game's fielding plan; any failing inning aborts the run."""

    males, females = partition_by_gender(confirmed)
    if len(males) < rules.minority_count or len(females) < rules.minority_count:
        raise CannotAchieveGenderSplit(
            len(males),
            len(females),
            majority=rules.majority_count,
            minority=rules.minority_count,
        )

    tracker = PlayingTimeTracker.start(confirmed)
    plan: List[FieldingAssignment] = []
    for inning in range(1, rules.innings + 1):
        assignments, tracker = schedule_inning(game_id, inning, confirmed, tracker, rules=rules)
        plan.extend(assignments)

    played = [track.innings_played for track in tracker.tracks.values()]
    logger.info(
        "Scheduled %s innings for game %s across %s players (innings played %s-%s)",
        rules.innings,
        game_id,
        len(confirmed),
        min(played),
        max(played),
    )
    return SchedulePlan(assignments=tuple(plan), tracker=tracker)
