import random

import pytest
from httpx import ASGITransport, AsyncClient

from softlineup.api import create_app
from softlineup.engine import LineupEngine
from softlineup.persistence import LineupStore


@pytest.fixture
async def client(tmp_path):
    store = LineupStore(tmp_path / "api.sqlite")
    app = create_app(store=store, engine=LineupEngine(rng=random.Random(7)))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


async def _create_game(client: AsyncClient, team_id: str = "t1") -> str:
    response = await client.post(f"/teams/{team_id}/games", json={"opponent": "Sluggers"})
    assert response.status_code == 201
    return response.json()["game_id"]


async def _enrol(client: AsyncClient, game_id: str, males: int, females: int, team_id: str = "t1") -> list[str]:
    ids = []
    for gender, count in (("M", males), ("F", females)):
        for idx in range(count):
            player_id = f"{gender.lower()}{idx}"
            payload = {"name": f"{gender}{idx}", "gender": gender}
            if idx == 0:
                payload["preferences"] = [{"position": "SS", "rank": 1}]
            response = await client.put(f"/teams/{team_id}/players/{player_id}", json=payload)
            assert response.status_code == 200
            response = await client.put(
                f"/teams/{team_id}/games/{game_id}/attendance/{player_id}",
                json={"status": "going"},
            )
            assert response.status_code == 200
            ids.append(player_id)
    return ids


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_games_and_players(client: AsyncClient):
    game_id = await _create_game(client)
    games = (await client.get("/teams/t1/games")).json()
    assert [game["game_id"] for game in games] == [game_id]
    assert (await client.get("/teams/t2/games")).json() == []

    await _enrol(client, game_id, 1, 1)
    players = (await client.get("/teams/t1/players")).json()
    assert {player["player_id"] for player in players} == {"m0", "f0"}
    attendance = (await client.get(f"/teams/t1/games/{game_id}/attendance")).json()
    assert [record["status"] for record in attendance] == ["going", "going"]


@pytest.mark.anyio
async def test_player_with_unknown_position_rejected(client: AsyncClient):
    response = await client.put(
        "/teams/t1/players/p1",
        json={"name": "Ana", "preferences": [{"position": "DH", "rank": 1}]},
    )
    assert response.status_code == 400
    assert "DH" in response.json()["detail"]


@pytest.mark.anyio
async def test_attendance_for_unknown_game_or_player(client: AsyncClient):
    response = await client.put("/teams/t1/games/nope/attendance/p1", json={"status": "going"})
    assert response.status_code == 404

    game_id = await _create_game(client)
    response = await client.put(f"/teams/t1/games/{game_id}/attendance/ghost", json={"status": "going"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Team member not found"

    response = await client.get(f"/teams/other/games/{game_id}/attendance")
    assert response.status_code == 404


@pytest.mark.anyio
async def test_generate_batting_order(client: AsyncClient):
    game_id = await _create_game(client)
    ids = await _enrol(client, game_id, 5, 5)

    response = await client.post(f"/teams/t1/games/{game_id}/batting-order/generate")
    assert response.status_code == 201
    body = response.json()
    assert body["pitcher_spacing"] == "not_applicable"
    assert [slot["batting_position"] for slot in body["slots"]] == list(range(1, 11))
    assert {slot["player_id"] for slot in body["slots"]} == set(ids)

    stored = (await client.get(f"/teams/t1/games/{game_id}/batting-order")).json()
    assert stored["slots"] == body["slots"]

    response = await client.delete(f"/teams/t1/games/{game_id}/batting-order")
    assert response.status_code == 204
    assert (await client.get(f"/teams/t1/games/{game_id}/batting-order")).json()["slots"] == []


@pytest.mark.anyio
async def test_failed_generation_is_unprocessable_and_keeps_old_rows(client: AsyncClient):
    game_id = await _create_game(client)
    await _enrol(client, game_id, 5, 4)
    assert (await client.post(f"/teams/t1/games/{game_id}/batting-order/generate")).status_code == 201

    response = await client.put(f"/teams/t1/games/{game_id}/attendance/m0", json={"status": "not_going"})
    assert response.status_code == 200
    response = await client.post(f"/teams/t1/games/{game_id}/batting-order/generate")

    assert response.status_code == 422
    assert "insufficient players" in response.json()["detail"]
    assert len((await client.get(f"/teams/t1/games/{game_id}/batting-order")).json()["slots"]) == 9


@pytest.mark.anyio
async def test_generate_for_unknown_game(client: AsyncClient):
    response = await client.post("/teams/t1/games/missing/batting-order/generate")
    assert response.status_code == 404


@pytest.mark.anyio
async def test_manual_batting_order(client: AsyncClient):
    game_id = await _create_game(client)
    ids = await _enrol(client, game_id, 5, 4)
    slots = [{"player_id": pid, "batting_position": idx} for idx, pid in enumerate(reversed(ids), start=1)]

    response = await client.put(f"/teams/t1/games/{game_id}/batting-order", json={"slots": slots})
    assert response.status_code == 200
    body = response.json()
    assert [slot["player_id"] for slot in body["slots"]] == list(reversed(ids))
    assert not any(slot["is_generated"] for slot in body["slots"])

    response = await client.put(f"/teams/t1/games/{game_id}/batting-order", json={"slots": slots[:8]})
    assert response.status_code == 400

    duplicate = slots[:8] + [{"player_id": slots[0]["player_id"], "batting_position": 9}]
    response = await client.put(f"/teams/t1/games/{game_id}/batting-order", json={"slots": duplicate})
    assert response.status_code == 400

    stranger = slots[:8] + [{"player_id": "ghost", "batting_position": 9}]
    response = await client.put(f"/teams/t1/games/{game_id}/batting-order", json={"slots": stranger})
    assert response.status_code == 400
    assert "ghost" in response.json()["detail"]


@pytest.mark.anyio
async def test_generate_single_inning(client: AsyncClient):
    game_id = await _create_game(client)
    await _enrol(client, game_id, 6, 6)

    response = await client.post(f"/teams/t1/games/{game_id}/fielding-lineup/generate", params={"inning": 3})
    assert response.status_code == 201
    body = response.json()
    assert body["innings"] == [3]
    assert len(body["assignments"]) == 9
    assert len({item["player_id"] for item in body["assignments"]}) == 9

    response = await client.post(f"/teams/t1/games/{game_id}/fielding-lineup/generate", params={"inning": 8})
    assert response.status_code == 400


@pytest.mark.anyio
async def test_generate_complete_fielding_plan(client: AsyncClient):
    game_id = await _create_game(client)
    await _enrol(client, game_id, 6, 6)

    response = await client.post(f"/teams/t1/games/{game_id}/fielding-lineup/generate")
    assert response.status_code == 201
    body = response.json()
    assert body["innings"] == list(range(1, 8))
    assert len(body["assignments"]) == 63

    inning_two = (await client.get(f"/teams/t1/games/{game_id}/fielding-lineup", params={"inning": 2})).json()
    assert inning_two["innings"] == [2]
    assert len(inning_two["assignments"]) == 9

    response = await client.delete(f"/teams/t1/games/{game_id}/fielding-lineup", params={"inning": 2})
    assert response.status_code == 204
    remaining = (await client.get(f"/teams/t1/games/{game_id}/fielding-lineup")).json()
    assert remaining["innings"] == [1, 3, 4, 5, 6, 7]


@pytest.mark.anyio
async def test_complete_plan_with_nine_players_is_unprocessable(client: AsyncClient):
    game_id = await _create_game(client)
    await _enrol(client, game_id, 5, 4)

    response = await client.post(f"/teams/t1/games/{game_id}/fielding-lineup/generate")

    assert response.status_code == 422
    assert "inning 7" in response.json()["detail"]
    assert (await client.get(f"/teams/t1/games/{game_id}/fielding-lineup")).json()["assignments"] == []


@pytest.mark.anyio
async def test_manual_fielding_lineup(client: AsyncClient):
    game_id = await _create_game(client)
    ids = await _enrol(client, game_id, 5, 4)
    positions = ["C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "Rover"]
    assignments = [
        {"inning": 1, "position": position, "player_id": pid} for position, pid in zip(positions, ids)
    ]

    response = await client.put(f"/teams/t1/games/{game_id}/fielding-lineup", json={"assignments": assignments})
    assert response.status_code == 200
    body = response.json()
    assert body["innings"] == [1]
    assert not any(item["is_generated"] for item in body["assignments"])

    short = assignments[:8]
    response = await client.put(f"/teams/t1/games/{game_id}/fielding-lineup", json={"assignments": short})
    assert response.status_code == 400

    clash = assignments[:8] + [{"inning": 1, "position": "C", "player_id": ids[8]}]
    response = await client.put(f"/teams/t1/games/{game_id}/fielding-lineup", json={"assignments": clash})
    assert response.status_code == 400
    assert "duplicate position" in response.json()["detail"]

    late = [dict(item, inning=8) for item in assignments]
    response = await client.put(f"/teams/t1/games/{game_id}/fielding-lineup", json={"assignments": late})
    assert response.status_code == 400


@pytest.mark.anyio
async def test_game_locks_released_after_requests(client: AsyncClient):
    game_id = await _create_game(client)
    await _enrol(client, game_id, 5, 4)

    assert (await client.post(f"/teams/t1/games/{game_id}/batting-order/generate")).status_code == 201
    assert (await client.delete(f"/teams/t1/games/{game_id}/batting-order")).status_code == 204

    assert len(client.app.state.game_locks) == 0
