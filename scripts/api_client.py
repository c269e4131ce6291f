"""Lightweight REST client for the softlineup API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx

from softlineup.ingest import load_players_from_csv


def _game_path(team_id: str, game_id: str) -> str:
    return f"/teams/{team_id}/games/{game_id}"


def _check(resp: httpx.Response) -> dict:
    if resp.status_code in (404, 422):
        raise SystemExit(f"{resp.status_code}: {resp.json().get('detail')}")
    resp.raise_for_status()
    return resp.json() if resp.content else {}


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the softlineup REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("team_id", help="Team identifier")
    parser.add_argument("--roster", type=Path, help="Roster CSV to upload (players and attendance)")
    parser.add_argument("--game-id", help="Existing game to work on")
    parser.add_argument("--opponent", default="TBD", help="Opponent name when creating a game")
    parser.add_argument("--batting", action="store_true", help="Generate a batting order")
    parser.add_argument("--inning", type=int, help="Generate fielding for one inning")
    parser.add_argument("--complete", action="store_true", help="Generate fielding for every inning")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        game_id = args.game_id
        if game_id is None:
            game = _check(client.post(f"/teams/{args.team_id}/games", json={"opponent": args.opponent}))
            game_id = game["game_id"]
            print(f"Created game {game_id}")

        if args.roster:
            players, attendance = load_players_from_csv(args.roster, game_id=game_id)
            for player in players:
                payload = player.model_dump(mode="json", exclude={"player_id"})
                _check(client.put(f"/teams/{args.team_id}/players/{player.player_id}", json=payload))
            for record in attendance:
                _check(
                    client.put(
                        f"{_game_path(args.team_id, game_id)}/attendance/{record.player_id}",
                        json={"status": record.status.value},
                    )
                )
            print(f"Uploaded {len(players)} players")

        if args.batting:
            payload = _check(client.post(f"{_game_path(args.team_id, game_id)}/batting-order/generate"))
            print(json.dumps(payload, indent=2))

        if args.inning is not None or args.complete:
            params = {"inning": args.inning} if args.inning is not None else None
            payload = _check(
                client.post(f"{_game_path(args.team_id, game_id)}/fielding-lineup/generate", params=params)
            )
            print(f"Received {len(payload['assignments'])} fielding assignments")
            print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
