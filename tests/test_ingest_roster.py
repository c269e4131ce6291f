from pathlib import Path

import pytest

from softlineup.ingest import load_players_from_csv, load_roster_csv
from softlineup.ingest.roster import RosterRow, parse_gender, parse_roles, parse_status
from softlineup.models import AttendanceStatus, Gender


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "roster.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_players_from_csv(tmp_path):
    path = _write(
        tmp_path,
        "id,name,gender,roles,pref1,pref2,pref3,status\n"
        "p1,Ana,F,\"Player, Pitcher\",ss,rover,,going\n"
        "p2,Ben,male,Admin/Player,C,c,XX,Not Going\n"
        "p3,Cy,,Player,,,,maybe\n"
        ",blank,M,,,,,\n",
    )

    players, attendance = load_players_from_csv(path, game_id="g1")

    assert [player.player_id for player in players] == ["p1", "p2", "p3"]
    ana, ben, cy = players
    assert ana.gender is Gender.F
    assert ana.is_pitcher and not ana.is_admin
    assert [(pref.position, pref.rank) for pref in ana.preferences] == [("SS", 1), ("Rover", 2)]
    assert ben.gender is Gender.M
    assert ben.is_admin and not ben.is_pitcher
    assert [(pref.position, pref.rank) for pref in ben.preferences] == [("C", 1)]
    assert cy.gender is None
    assert [record.status for record in attendance] == [
        AttendanceStatus.GOING,
        AttendanceStatus.NOT_GOING,
        AttendanceStatus.MAYBE,
    ]
    assert all(record.game_id == "g1" for record in attendance)


def test_custom_mapping_joins_columns(tmp_path):
    path = _write(
        tmp_path,
        "Member,First,Last,Sex\n"
        "42,Dana,Lee,W\n",
    )
    mapping = {"player_id": "Member", "name": "First|Last", "gender": "Sex"}

    rows = load_roster_csv(path, mapping)

    assert rows == [
        RosterRow(raw_id="42", raw_name="Dana Lee", raw_gender="W", raw_preferences=("", "", ""))
    ]


def test_parse_roles_splits_and_lowercases():
    assert parse_roles("Player, Pitcher;ADMIN") == {"player", "pitcher", "admin"}
    assert parse_roles("") == set()


def test_parse_gender_aliases():
    assert parse_gender(" female ") is Gender.F
    assert parse_gender("m") is Gender.M
    assert parse_gender("unknown") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", AttendanceStatus.GOING),
        ("Yes", AttendanceStatus.GOING),
        ("out", AttendanceStatus.NOT_GOING),
        ("not-going", AttendanceStatus.NOT_GOING),
        ("Maybe", AttendanceStatus.MAYBE),
    ],
)
def test_parse_status(raw, expected):
    assert parse_status(raw) is expected


def test_parse_status_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown attendance status"):
        parse_status("perhaps")
