import pytest
from pydantic import ValidationError

from softlineup.models import Gender, Player, PositionPreference


def test_player_is_frozen():
    player = Player(player_id="p1", name="Test Player", gender=Gender.F)

    assert player.player_id == "p1"
    assert player.is_active

    with pytest.raises((TypeError, ValidationError)):
        player.player_id = "p2"  # type: ignore[misc]


def test_preferences_sorted_and_ranked():
    player = Player(
        player_id="p1",
        gender="M",
        preferences=[
            PositionPreference(position="SS", rank=2),
            PositionPreference(position="C", rank=1),
        ],
    )

    assert [pref.position for pref in player.preferences] == ["C", "SS"]
    assert player.preference_rank("SS") == 2
    assert player.preference_rank("RF") is None
    assert player.prefers("C")


def test_duplicate_preference_rank_rejected():
    with pytest.raises(ValidationError):
        Player(
            player_id="p1",
            preferences=[
                PositionPreference(position="C", rank=1),
                PositionPreference(position="1B", rank=1),
            ],
        )


def test_at_most_three_preferences():
    with pytest.raises(ValidationError):
        Player(
            player_id="p1",
            preferences=[{"position": pos, "rank": 1 + idx % 3} for idx, pos in enumerate(["C", "1B", "2B", "3B"])],
        )


def test_preference_rank_bounds():
    with pytest.raises(ValidationError):
        PositionPreference(position="C", rank=4)
