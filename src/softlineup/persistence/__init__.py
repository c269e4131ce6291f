"""Persistence layer for rosters, attendance and generated lineups."""

from __future__ import annotations

import json
import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional
from uuid import uuid4

from softlineup.models import (
    AttendanceRecord,
    AttendanceStatus,
    BattingSlot,
    FieldingAssignment,
    Gender,
    Player,
    PositionPreference,
)


_DB_ENV = "SOFTLINEUP_DB_PATH"
_DEFAULT_DB = Path(tempfile.gettempdir()) / "softlineup" / "softlineup.sqlite"


@dataclass
class GameRecord:
    game_id: str
    team_id: str
    opponent: str
    scheduled_at: Optional[str]
    created_at: datetime


class LineupStore:
    """Simple SQLite-backed store for teams' players, games and lineups.

    Lineups are only ever replaced wholesale: the rows in scope are deleted and
    the new set inserted in the same transaction.
    """

    def __init__(
        self,
        db_path: Path | str | None = None,
        *,
        trace: Optional[Callable[[str], None]] = None,
    ):
        self._use_uri = False
        self._trace = trace
        env_db = os.getenv(_DB_ENV)
        if db_path is not None:
            self.db_path: Path | str = Path(db_path)
        elif env_db and env_db.startswith("file:"):
            self.db_path = env_db
            self._use_uri = True
        elif env_db:
            self.db_path = Path(env_db)
        else:
            self.db_path = _DEFAULT_DB
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        if self._trace is not None:
            conn.set_trace_callback(self._trace)
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS games (
                id TEXT PRIMARY KEY,
                team_id TEXT NOT NULL,
                opponent TEXT NOT NULL,
                scheduled_at TEXT,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                team_id TEXT NOT NULL,
                name TEXT NOT NULL,
                gender TEXT,
                is_pitcher INTEGER NOT NULL DEFAULT 0,
                is_admin INTEGER NOT NULL DEFAULT 0,
                is_active INTEGER NOT NULL DEFAULT 1,
                preferences_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS attendance (
                player_id TEXT NOT NULL,
                game_id TEXT NOT NULL,
                status TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (player_id, game_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS batting_orders (
                game_id TEXT NOT NULL,
                player_id TEXT NOT NULL,
                batting_position INTEGER NOT NULL,
                is_generated INTEGER NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS fielding_lineups (
                game_id TEXT NOT NULL,
                inning INTEGER NOT NULL,
                position TEXT NOT NULL,
                player_id TEXT NOT NULL,
                is_generated INTEGER NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    # Games -------------------------------------------------------------

    def create_game(
        self,
        *,
        team_id: str,
        opponent: str,
        scheduled_at: Optional[str] = None,
        game_id: Optional[str] = None,
    ) -> GameRecord:
        game_id = game_id or uuid4().hex
        created_at = datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO games (id, team_id, opponent, scheduled_at, created_at) VALUES (?, ?, ?, ?, ?)",
                (game_id, team_id, opponent, scheduled_at, created_at.isoformat()),
            )
            conn.commit()
        return GameRecord(game_id, team_id, opponent, scheduled_at, created_at)

    def get_game(self, game_id: str, *, team_id: Optional[str] = None) -> Optional[GameRecord]:
        """Fetch a game; when ``team_id`` is given the game must belong to it."""

        with self._connect() as conn:
            row = conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
        if row is None or (team_id is not None and row["team_id"] != team_id):
            return None
        return self._row_to_game(row)

    def list_games(self, team_id: str) -> List[GameRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM games WHERE team_id = ? ORDER BY scheduled_at, created_at",
                (team_id,),
            ).fetchall()
        return [self._row_to_game(row) for row in rows]

    # Players -----------------------------------------------------------

    def save_player(self, team_id: str, player: Player) -> Player:
        preferences = [pref.model_dump() for pref in player.preferences]
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO players (
                    id, team_id, name, gender, is_pitcher, is_admin, is_active,
                    preferences_json, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    team_id = excluded.team_id,
                    name = excluded.name,
                    gender = excluded.gender,
                    is_pitcher = excluded.is_pitcher,
                    is_admin = excluded.is_admin,
                    is_active = excluded.is_active,
                    preferences_json = excluded.preferences_json,
                    updated_at = excluded.updated_at
                """,
                (
                    player.player_id,
                    team_id,
                    player.name,
                    player.gender.value if player.gender else None,
                    int(player.is_pitcher),
                    int(player.is_admin),
                    int(player.is_active),
                    json.dumps(preferences),
                    now,
                ),
            )
            conn.commit()
        return player

    def list_players(self, team_id: str) -> List[Player]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM players WHERE team_id = ? ORDER BY name, id",
                (team_id,),
            ).fetchall()
        return [self._row_to_player(row) for row in rows]

    # Attendance --------------------------------------------------------

    def set_attendance(self, record: AttendanceRecord) -> AttendanceRecord:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO attendance (player_id, game_id, status, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(player_id, game_id) DO UPDATE SET
                    status = excluded.status,
                    updated_at = excluded.updated_at
                """,
                (record.player_id, record.game_id, record.status.value, now),
            )
            conn.commit()
        return record

    def list_attendance(self, game_id: str) -> List[AttendanceRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM attendance WHERE game_id = ? ORDER BY rowid",
                (game_id,),
            ).fetchall()
        return [
            AttendanceRecord(
                player_id=row["player_id"],
                game_id=row["game_id"],
                status=AttendanceStatus(row["status"]),
            )
            for row in rows
        ]

    # Lineups -----------------------------------------------------------

    def replace_batting_order(self, game_id: str, slots: Iterable[BattingSlot]) -> List[BattingSlot]:
        slots = list(slots)
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute("DELETE FROM batting_orders WHERE game_id = ?", (game_id,))
            for slot in slots:
                conn.execute(
                    """
                    INSERT INTO batting_orders (
                        game_id, player_id, batting_position, is_generated, created_at
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    (game_id, slot.player_id, slot.batting_position, int(slot.is_generated), now),
                )
            conn.commit()
        return slots

    def get_batting_order(self, game_id: str) -> List[BattingSlot]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM batting_orders WHERE game_id = ? ORDER BY batting_position",
                (game_id,),
            ).fetchall()
        return [
            BattingSlot(
                game_id=row["game_id"],
                player_id=row["player_id"],
                batting_position=row["batting_position"],
                is_generated=bool(row["is_generated"]),
            )
            for row in rows
        ]

    def delete_batting_order(self, game_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM batting_orders WHERE game_id = ?", (game_id,))
            conn.commit()

    def replace_fielding_lineup(
        self,
        game_id: str,
        assignments: Iterable[FieldingAssignment],
        *,
        innings: Optional[Iterable[int]] = None,
    ) -> List[FieldingAssignment]:
        """Swap in ``assignments``, clearing either the given innings or the whole game."""

        assignments = list(assignments)
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            self._delete_fielding(conn, game_id, innings)
            for assignment in assignments:
                conn.execute(
                    """
                    INSERT INTO fielding_lineups (
                        game_id, inning, position, player_id, is_generated, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        game_id,
                        assignment.inning,
                        assignment.position,
                        assignment.player_id,
                        int(assignment.is_generated),
                        now,
                    ),
                )
            conn.commit()
        return assignments

    def get_fielding_lineup(self, game_id: str, *, inning: Optional[int] = None) -> List[FieldingAssignment]:
        query = "SELECT * FROM fielding_lineups WHERE game_id = ?"
        params: list[str | int] = [game_id]
        if inning is not None:
            query += " AND inning = ?"
            params.append(inning)
        query += " ORDER BY inning, rowid"
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [
            FieldingAssignment(
                game_id=row["game_id"],
                inning=row["inning"],
                position=row["position"],
                player_id=row["player_id"],
                is_generated=bool(row["is_generated"]),
            )
            for row in rows
        ]

    def delete_fielding_lineup(self, game_id: str, *, inning: Optional[int] = None) -> None:
        with self._connect() as conn:
            self._delete_fielding(conn, game_id, None if inning is None else [inning])
            conn.commit()

    def _delete_fielding(
        self,
        conn: sqlite3.Connection,
        game_id: str,
        innings: Optional[Iterable[int]],
    ) -> None:
        if innings is None:
            conn.execute("DELETE FROM fielding_lineups WHERE game_id = ?", (game_id,))
            return
        for inning in sorted(set(innings)):
            conn.execute(
                "DELETE FROM fielding_lineups WHERE game_id = ? AND inning = ?",
                (game_id, inning),
            )

    def _row_to_game(self, row: sqlite3.Row) -> GameRecord:
        return GameRecord(
            game_id=row["id"],
            team_id=row["team_id"],
            opponent=row["opponent"],
            scheduled_at=row["scheduled_at"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_player(self, row: sqlite3.Row) -> Player:
        return Player(
            player_id=row["id"],
            name=row["name"],
            gender=Gender(row["gender"]) if row["gender"] else None,
            is_pitcher=bool(row["is_pitcher"]),
            is_admin=bool(row["is_admin"]),
            is_active=bool(row["is_active"]),
            preferences=[PositionPreference(**pref) for pref in json.loads(row["preferences_json"])],
        )
