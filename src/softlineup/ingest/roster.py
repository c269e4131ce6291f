"""Helpers to load roster CSVs and emit canonical players and attendance."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel

from softlineup.config import FieldingRules, get_rules
from softlineup.models import (
    AttendanceRecord,
    AttendanceStatus,
    Gender,
    Player,
    PositionPreference,
)


logger = logging.getLogger(__name__)

DEFAULT_ROSTER_MAPPING = {
    "player_id": "id",
    "name": "name",
    "gender": "gender",
    "roles": "roles",
    "pref1": "pref1",
    "pref2": "pref2",
    "pref3": "pref3",
    "status": "status",
}

_GENDER_ALIASES = {
    "M": Gender.M,
    "MALE": Gender.M,
    "MAN": Gender.M,
    "F": Gender.F,
    "FEMALE": Gender.F,
    "W": Gender.F,
    "WOMAN": Gender.F,
}

_STATUS_ALIASES = {
    "": AttendanceStatus.GOING,
    "yes": AttendanceStatus.GOING,
    "in": AttendanceStatus.GOING,
    "no": AttendanceStatus.NOT_GOING,
    "out": AttendanceStatus.NOT_GOING,
}


class RosterRow(BaseModel):
    raw_id: str
    raw_name: str = ""
    raw_gender: str = ""
    raw_roles: str = ""
    raw_preferences: Tuple[str, ...] = ()
    raw_status: str = ""

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "RosterRow":
        def extract(key: str) -> str:
            source = mapping.get(key, DEFAULT_ROSTER_MAPPING.get(key))
            if not source:
                return ""
            if "|" in source:
                parts = [(row.get(col.strip()) or "").strip() for col in source.split("|")]
                return " ".join(part for part in parts if part)
            return (row.get(source) or "").strip()

        return cls(
            raw_id=extract("player_id"),
            raw_name=extract("name"),
            raw_gender=extract("gender"),
            raw_roles=extract("roles"),
            raw_preferences=(extract("pref1"), extract("pref2"), extract("pref3")),
            raw_status=extract("status"),
        )


def parse_roles(raw: str) -> set[str]:
    """Split a free-form role string ("Player, Pitcher") into lowercase tags."""

    return {token for token in (part.strip().lower() for part in re.split(r"[,;/|]", raw)) if token}


def parse_gender(raw: str) -> Optional[Gender]:
    return _GENDER_ALIASES.get(raw.strip().upper())


def parse_status(raw: str) -> AttendanceStatus:
    token = re.sub(r"[\s\-]+", "_", raw.strip().lower())
    if token in _STATUS_ALIASES:
        return _STATUS_ALIASES[token]
    try:
        return AttendanceStatus(token)
    except ValueError as exc:
        raise ValueError(f"Unknown attendance status {raw!r}") from exc


def _parse_preferences(row: RosterRow, rules: FieldingRules) -> List[PositionPreference]:
    canonical = {position.upper(): position for position in rules.positions}
    preferences: List[PositionPreference] = []
    seen: set[str] = set()
    for rank, raw in enumerate(row.raw_preferences, start=1):
        if not raw:
            continue
        position = canonical.get(raw.upper())
        if position is None:
            logger.warning("Ignoring unknown position %r for player %s", raw, row.raw_id)
            continue
        if position in seen:
            logger.warning("Ignoring repeated position %s for player %s", position, row.raw_id)
            continue
        seen.add(position)
        preferences.append(PositionPreference(position=position, rank=rank))
    return preferences


def load_roster_csv(path: Path, mapping: Optional[Mapping[str, str]] = None) -> List[RosterRow]:
    mapping = mapping or DEFAULT_ROSTER_MAPPING
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        rows = [RosterRow.from_mapping(row, mapping) for row in reader]
    return [row for row in rows if row.raw_id]


def rows_to_players_and_attendance(
    rows: Sequence[RosterRow],
    *,
    game_id: str,
    rules: Optional[FieldingRules] = None,
) -> Tuple[List[Player], List[AttendanceRecord]]:
    """Turn roster rows into players plus one attendance record each."""

    rules = rules or get_rules()
    players: List[Player] = []
    attendance: List[AttendanceRecord] = []
    for row in rows:
        gender = parse_gender(row.raw_gender)
        if gender is None and row.raw_gender:
            logger.warning("Unrecognised gender %r for player %s", row.raw_gender, row.raw_id)
        roles = parse_roles(row.raw_roles)
        players.append(
            Player(
                player_id=row.raw_id,
                name=row.raw_name or row.raw_id,
                gender=gender,
                is_pitcher="pitcher" in roles,
                is_admin="admin" in roles,
                preferences=_parse_preferences(row, rules),
            )
        )
        attendance.append(
            AttendanceRecord(player_id=row.raw_id, game_id=game_id, status=parse_status(row.raw_status))
        )
    return players, attendance


def load_players_from_csv(
    path: Path,
    *,
    game_id: str,
    mapping: Optional[Mapping[str, str]] = None,
    rules: Optional[FieldingRules] = None,
) -> Tuple[List[Player], List[AttendanceRecord]]:
    rows = load_roster_csv(path, mapping=mapping)
    return rows_to_players_and_attendance(rows, game_id=game_id, rules=rules)
