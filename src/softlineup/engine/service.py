"""Entry points callers use to generate batting orders and fielding lineups."""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional, Sequence

from softlineup.config import FieldingRules, env_seed, get_rules
from softlineup.engine.batting import BattingOrderResult, build_batting_order
from softlineup.engine.fielding import assign_positions, select_inning_roster, shuffled_draw
from softlineup.engine.roster import confirmed_players, partition_by_gender
from softlineup.engine.scheduler import schedule_innings
from softlineup.models import AttendanceRecord, FieldingAssignment, Player


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)


class LineupEngine:
    """Stateless lineup generator with an injected random source.

    Each call works on the snapshot it is given and returns fresh records;
    persisting them (delete-then-insert) is the caller's job.
    """

    def __init__(self, rng: Optional[random.Random] = None, rules: Optional[FieldingRules] = None):
        self.rng = rng if rng is not None else random.Random(env_seed())
        self.rules = rules or get_rules()

    def _confirmed(self, players: Iterable[Player], attendance: Iterable[AttendanceRecord]) -> List[Player]:
        return confirmed_players(players, attendance, min_confirmed=self.rules.min_confirmed)

    def batting_order(
        self,
        game_id: str,
        players: Sequence[Player],
        attendance: Sequence[AttendanceRecord],
    ) -> BattingOrderResult:
        confirmed = self._confirmed(players, attendance)
        return build_batting_order(game_id, confirmed, rng=self.rng)

    def fielding_lineup(
        self,
        game_id: str,
        players: Sequence[Player],
        attendance: Sequence[AttendanceRecord],
        inning: int,
    ) -> List[FieldingAssignment]:
        """Generate one inning's fielding assignment from a random 5-4 draw."""

        if not self.rules.valid_inning(inning):
            raise ValueError(f"inning must be between 1 and {self.rules.innings}")
        confirmed = self._confirmed(players, attendance)
        males, females = partition_by_gender(confirmed)
        selected = select_inning_roster(
            males,
            females,
            rules=self.rules,
            draw=shuffled_draw(self.rng),
            inning=inning,
        )
        assignments = assign_positions(game_id, inning, selected, self.rules.positions)
        logger.info(
            "Generated fielding lineup for game %s inning %s from %s confirmed players",
            game_id,
            inning,
            len(confirmed),
        )
        return assignments

    def complete_fielding_lineup(
        self,
        game_id: str,
        players: Sequence[Player],
        attendance: Sequence[AttendanceRecord],
    ) -> List[FieldingAssignment]:
        """Generate every inning's fielding assignment with balanced playing time."""

        confirmed = self._confirmed(players, attendance)
        plan = schedule_innings(game_id, confirmed, rules=self.rules)
        return list(plan.assignments)
