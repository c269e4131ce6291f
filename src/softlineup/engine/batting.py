"""Batting order construction: gender alternation plus pitcher spacing."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from softlineup.engine.roster import partition_by_gender, ungendered
from softlineup.models import BattingSlot, Gender, Player


logger = logging.getLogger(__name__)


class PitcherSpacing(str, Enum):
    NOT_APPLICABLE = "not_applicable"
    ALREADY_SPACED = "already_spaced"
    SWAPPED = "swapped"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class BattingOrderResult:
    slots: Tuple[BattingSlot, ...]
    leading_gender: Optional[Gender]
    pitcher_spacing: PitcherSpacing


def alternate_genders(primary: Sequence[Player], secondary: Sequence[Player]) -> List[Player]:
    """Interleave two groups one pair at a time, primary first.

    Once the shorter group runs out the remainder of the other is appended.
    """

    order: List[Player] = []
    i = j = 0
    while i < len(primary) or j < len(secondary):
        if i < len(primary):
            order.append(primary[i])
            i += 1
        if j < len(secondary):
            order.append(secondary[j])
            j += 1
    return order


def space_pitchers(order: Sequence[Player]) -> Tuple[List[Player], PitcherSpacing]:
    """Push the second of exactly two pitchers about a third of the order away.

    At most one swap is made. When the target slot falls past the end of the
    order nothing moves and ``OUT_OF_RANGE`` is reported.
    """

    spaced = list(order)
    pitcher_indices = [idx for idx, player in enumerate(spaced) if player.is_pitcher]
    if len(pitcher_indices) != 2:
        return spaced, PitcherSpacing.NOT_APPLICABLE

    first, second = pitcher_indices
    ideal_spacing = len(spaced) // 3
    if second - first >= ideal_spacing:
        return spaced, PitcherSpacing.ALREADY_SPACED

    target = first + ideal_spacing
    if target >= len(spaced):
        return spaced, PitcherSpacing.OUT_OF_RANGE

    spaced[second], spaced[target] = spaced[target], spaced[second]
    return spaced, PitcherSpacing.SWAPPED


def _leading_gender(males: Sequence[Player], females: Sequence[Player], rng: random.Random) -> Gender:
    # Larger group leads; equal groups are decided by a coin flip.
    if len(males) != len(females):
        return Gender.M if len(males) > len(females) else Gender.F
    return Gender.M if rng.random() < 0.5 else Gender.F


def build_batting_order(
    game_id: str,
    confirmed: Sequence[Player],
    *,
    rng: random.Random,
) -> BattingOrderResult:
    """Build a gender-alternated, pitcher-spaced batting order for ``confirmed``."""

    males, females = partition_by_gender(confirmed)
    rng.shuffle(males)
    rng.shuffle(females)
    others = ungendered(confirmed)
    rng.shuffle(others)

    leading: Optional[Gender] = None
    if males or females:
        leading = _leading_gender(males, females, rng)
    if leading is Gender.F:
        order = alternate_genders(females, males)
    else:
        order = alternate_genders(males, females)
    order.extend(others)

    order, spacing = space_pitchers(order)
    if spacing is PitcherSpacing.OUT_OF_RANGE:
        logger.info("Pitcher spacing skipped for game %s: target slot out of range", game_id)

    slots = tuple(
        BattingSlot(
            game_id=game_id,
            player_id=player.player_id,
            batting_position=idx,
            is_generated=True,
        )
        for idx, player in enumerate(order, start=1)
    )
    logger.info(
        "Built batting order for game %s: %s slots (%s M / %s F), %s leads, pitchers %s",
        game_id,
        len(slots),
        len(males),
        len(females),
        leading.value if leading else "-",
        spacing.value,
    )
    return BattingOrderResult(slots=slots, leading_gender=leading, pitcher_spacing=spacing)
