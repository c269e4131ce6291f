"""REST API for roster attendance and lineup generation."""

from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Query, Response

from softlineup.api.schemas import (
    AttendanceUpdateRequest,
    BattingOrderResponse,
    BattingOrderUpdateRequest,
    FieldingLineupResponse,
    FieldingLineupUpdateRequest,
    GameCreateRequest,
    GameResponse,
    PlayerPayload,
)
from softlineup.engine import (
    LineupEngine,
    LineupGenerationError,
    validate_batting_order,
    validate_fielding_lineup,
)
from softlineup.models import (
    AttendanceRecord,
    BattingSlot,
    FieldingAssignment,
    Player,
)
from softlineup.persistence import GameRecord, LineupStore


logger = logging.getLogger("uvicorn.error")


def _game_to_response(game: GameRecord) -> GameResponse:
    return GameResponse(**asdict(game))


def _fielding_response(game_id: str, assignments: list[FieldingAssignment]) -> FieldingLineupResponse:
    return FieldingLineupResponse(
        game_id=game_id,
        innings=sorted({assignment.inning for assignment in assignments}),
        assignments=assignments,
    )


def _unprocessable(exc: LineupGenerationError) -> HTTPException:
    # Attendance or roster problems the team admin can fix, not server faults.
    return HTTPException(status_code=422, detail=exc.message)


def create_app(store: LineupStore | None = None, engine: LineupEngine | None = None) -> FastAPI:
    app = FastAPI(title="softlineup")
    store = store or LineupStore()
    engine = engine or LineupEngine()
    rules = engine.rules
    app.state.store = store
    app.state.engine = engine
    # Locks live only while a request holds them.
    game_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()
    app.state.game_locks = game_locks

    def _game_lock(game_id: str) -> asyncio.Lock:
        lock = game_locks.get(game_id)
        if lock is None:
            lock = asyncio.Lock()
            game_locks[game_id] = lock
        return lock

    def _fetch_game_or_404(team_id: str, game_id: str) -> GameRecord:
        game = store.get_game(game_id, team_id=team_id)
        if game is None:
            raise HTTPException(status_code=404, detail="Game not found")
        return game

    def _roster_ids(team_id: str) -> set[str]:
        return {player.player_id for player in store.list_players(team_id)}

    def _check_inning(inning: int | None) -> None:
        if inning is not None and not rules.valid_inning(inning):
            raise HTTPException(
                status_code=400,
                detail=f"Invalid inning. Must be between 1 and {rules.innings}",
            )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/teams/{team_id}/games", response_model=GameResponse, status_code=201)
    async def create_game(team_id: str, request: GameCreateRequest) -> GameResponse:
        game = store.create_game(
            team_id=team_id,
            opponent=request.opponent,
            scheduled_at=request.scheduled_at,
        )
        return _game_to_response(game)

    @app.get("/teams/{team_id}/games", response_model=list[GameResponse])
    async def list_games(team_id: str) -> list[GameResponse]:
        return [_game_to_response(game) for game in store.list_games(team_id)]

    @app.put("/teams/{team_id}/players/{player_id}", response_model=Player)
    async def save_player(team_id: str, player_id: str, payload: PlayerPayload) -> Player:
        unknown = [pref.position for pref in payload.preferences if pref.position not in rules.positions]
        if unknown:
            raise HTTPException(status_code=400, detail=f"Unknown positions: {', '.join(unknown)}")
        try:
            player = Player(player_id=player_id, **payload.model_dump())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return store.save_player(team_id, player)

    @app.get("/teams/{team_id}/players", response_model=list[Player])
    async def list_players(team_id: str) -> list[Player]:
        return store.list_players(team_id)

    @app.put(
        "/teams/{team_id}/games/{game_id}/attendance/{player_id}",
        response_model=AttendanceRecord,
    )
    async def update_attendance(
        team_id: str,
        game_id: str,
        player_id: str,
        request: AttendanceUpdateRequest,
    ) -> AttendanceRecord:
        _fetch_game_or_404(team_id, game_id)
        if player_id not in _roster_ids(team_id):
            raise HTTPException(status_code=404, detail="Team member not found")
        record = AttendanceRecord(player_id=player_id, game_id=game_id, status=request.status)
        return store.set_attendance(record)

    @app.get(
        "/teams/{team_id}/games/{game_id}/attendance",
        response_model=list[AttendanceRecord],
    )
    async def get_attendance(team_id: str, game_id: str) -> list[AttendanceRecord]:
        _fetch_game_or_404(team_id, game_id)
        return store.list_attendance(game_id)

    @app.post(
        "/teams/{team_id}/games/{game_id}/batting-order/generate",
        response_model=BattingOrderResponse,
        status_code=201,
    )
    async def generate_batting_order(team_id: str, game_id: str) -> BattingOrderResponse:
        _fetch_game_or_404(team_id, game_id)
        async with _game_lock(game_id):
            players = store.list_players(team_id)
            attendance = store.list_attendance(game_id)
            try:
                result = engine.batting_order(game_id, players, attendance)
            except LineupGenerationError as exc:
                logger.info("Batting order for game %s rejected: %s", game_id, exc.message)
                raise _unprocessable(exc) from exc
            slots = store.replace_batting_order(game_id, result.slots)
        return BattingOrderResponse(
            game_id=game_id,
            slots=slots,
            pitcher_spacing=result.pitcher_spacing.value,
        )

    @app.get(
        "/teams/{team_id}/games/{game_id}/batting-order",
        response_model=BattingOrderResponse,
    )
    async def get_batting_order(team_id: str, game_id: str) -> BattingOrderResponse:
        _fetch_game_or_404(team_id, game_id)
        return BattingOrderResponse(game_id=game_id, slots=store.get_batting_order(game_id))

    @app.put(
        "/teams/{team_id}/games/{game_id}/batting-order",
        response_model=BattingOrderResponse,
    )
    async def update_batting_order(
        team_id: str,
        game_id: str,
        request: BattingOrderUpdateRequest,
    ) -> BattingOrderResponse:
        _fetch_game_or_404(team_id, game_id)
        slots = [
            BattingSlot(
                game_id=game_id,
                player_id=slot.player_id,
                batting_position=slot.batting_position,
                is_generated=False,
            )
            for slot in request.slots
        ]
        try:
            validate_batting_order(slots, rules=rules)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        strangers = {slot.player_id for slot in slots} - _roster_ids(team_id)
        if strangers:
            raise HTTPException(status_code=400, detail=f"Unknown players: {', '.join(sorted(strangers))}")
        async with _game_lock(game_id):
            saved = store.replace_batting_order(game_id, slots)
        return BattingOrderResponse(game_id=game_id, slots=saved)

    @app.delete("/teams/{team_id}/games/{game_id}/batting-order", status_code=204)
    async def delete_batting_order(team_id: str, game_id: str) -> Response:
        _fetch_game_or_404(team_id, game_id)
        async with _game_lock(game_id):
            store.delete_batting_order(game_id)
        return Response(status_code=204)

    @app.post(
        "/teams/{team_id}/games/{game_id}/fielding-lineup/generate",
        response_model=FieldingLineupResponse,
        status_code=201,
    )
    async def generate_fielding_lineup(
        team_id: str,
        game_id: str,
        inning: int | None = Query(None),
    ) -> FieldingLineupResponse:
        _check_inning(inning)
        _fetch_game_or_404(team_id, game_id)
        async with _game_lock(game_id):
            players = store.list_players(team_id)
            attendance = store.list_attendance(game_id)
            try:
                if inning is None:
                    assignments = engine.complete_fielding_lineup(game_id, players, attendance)
                else:
                    assignments = engine.fielding_lineup(game_id, players, attendance, inning)
            except LineupGenerationError as exc:
                logger.info("Fielding lineup for game %s rejected: %s", game_id, exc.message)
                raise _unprocessable(exc) from exc
            saved = store.replace_fielding_lineup(
                game_id,
                assignments,
                innings=None if inning is None else [inning],
            )
        return _fielding_response(game_id, saved)

    @app.get(
        "/teams/{team_id}/games/{game_id}/fielding-lineup",
        response_model=FieldingLineupResponse,
    )
    async def get_fielding_lineup(
        team_id: str,
        game_id: str,
        inning: int | None = Query(None),
    ) -> FieldingLineupResponse:
        _check_inning(inning)
        _fetch_game_or_404(team_id, game_id)
        return _fielding_response(game_id, store.get_fielding_lineup(game_id, inning=inning))

    @app.put(
        "/teams/{team_id}/games/{game_id}/fielding-lineup",
        response_model=FieldingLineupResponse,
    )
    async def update_fielding_lineup(
        team_id: str,
        game_id: str,
        request: FieldingLineupUpdateRequest,
    ) -> FieldingLineupResponse:
        _fetch_game_or_404(team_id, game_id)
        assignments = [
            FieldingAssignment(
                game_id=game_id,
                inning=item.inning,
                position=item.position,
                player_id=item.player_id,
                is_generated=False,
            )
            for item in request.assignments
        ]
        try:
            validate_fielding_lineup(assignments, rules=rules)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        strangers = {item.player_id for item in assignments} - _roster_ids(team_id)
        if strangers:
            raise HTTPException(status_code=400, detail=f"Unknown players: {', '.join(sorted(strangers))}")
        async with _game_lock(game_id):
            saved = store.replace_fielding_lineup(
                game_id,
                assignments,
                innings={item.inning for item in assignments},
            )
        return _fielding_response(game_id, saved)

    @app.delete("/teams/{team_id}/games/{game_id}/fielding-lineup", status_code=204)
    async def delete_fielding_lineup(
        team_id: str,
        game_id: str,
        inning: int | None = Query(None),
    ) -> Response:
        _check_inning(inning)
        _fetch_game_or_404(team_id, game_id)
        async with _game_lock(game_id):
            store.delete_fielding_lineup(game_id, inning=inning)
        return Response(status_code=204)

    return app
