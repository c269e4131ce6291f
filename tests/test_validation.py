import pytest

from softlineup.config import get_rules
from softlineup.engine import validate_batting_order, validate_fielding_lineup
from softlineup.models import BattingSlot, FieldingAssignment

RULES = get_rules("coed")


def _slots(positions: list[int]) -> list[BattingSlot]:
    return [
        BattingSlot(game_id="g1", player_id=f"p{idx}", batting_position=position, is_generated=False)
        for idx, position in enumerate(positions)
    ]


def _inning(inning: int) -> list[FieldingAssignment]:
    return [
        FieldingAssignment(game_id="g1", inning=inning, position=position, player_id=f"p{idx}")
        for idx, position in enumerate(RULES.positions)
    ]


def test_valid_batting_order_passes():
    validate_batting_order(_slots(list(range(1, 11))), rules=RULES)


@pytest.mark.parametrize(
    "positions, message",
    [
        (list(range(1, 9)), "at least 9"),
        ([1, 2, 3, 4, 5, 6, 7, 8, 8], "duplicate batting position"),
        ([1, 2, 3, 4, 5, 6, 7, 8, 12], "from 1 to 9"),
    ],
)
def test_batting_order_rejections(positions, message):
    with pytest.raises(ValueError, match=message):
        validate_batting_order(_slots(positions), rules=RULES)


def test_batting_order_rejects_repeated_player():
    slots = _slots(list(range(1, 10)))
    slots[8] = BattingSlot(game_id="g1", player_id="p0", batting_position=9)
    with pytest.raises(ValueError, match="more than once"):
        validate_batting_order(slots, rules=RULES)


def test_fielding_lineup_checks_each_inning():
    validate_fielding_lineup(_inning(1) + _inning(7), rules=RULES)

    with pytest.raises(ValueError, match="exactly 9"):
        validate_fielding_lineup(_inning(1)[:8], rules=RULES)

    with pytest.raises(ValueError, match="between 1 and 7"):
        validate_fielding_lineup(_inning(8), rules=RULES)

    wrong = _inning(2)
    wrong[0] = FieldingAssignment(game_id="g1", inning=2, position="DH", player_id="p0")
    with pytest.raises(ValueError, match="invalid position"):
        validate_fielding_lineup(wrong, rules=RULES)

    twice = _inning(3)
    twice[1] = FieldingAssignment(game_id="g1", inning=3, position="1B", player_id="p0")
    with pytest.raises(ValueError, match="fielded twice"):
        validate_fielding_lineup(twice, rules=RULES)
