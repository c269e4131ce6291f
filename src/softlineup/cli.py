"""Command-line interface for generating lineups from a roster CSV."""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

from softlineup.config import get_rules
from softlineup.config_loader import MappingProfile
from softlineup.engine import LineupEngine, LineupGenerationError
from softlineup.export import batting_order_to_csv, fielding_lineup_to_csv
from softlineup.ingest import DEFAULT_ROSTER_MAPPING, load_players_from_csv


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate softball lineups from a roster CSV")
    parser.add_argument("roster", type=Path, help="Path to roster CSV (id, name, gender, roles, pref1-3, status)")
    parser.add_argument(
        "--mode",
        choices=("batting", "inning", "complete"),
        default="batting",
        help="batting order, one inning's fielding, or the full balanced fielding plan",
    )
    parser.add_argument("--inning", type=int, default=1, help="Inning to generate in 'inning' mode")
    parser.add_argument("--game-id", default="game", help="Game identifier stamped on output rows")
    parser.add_argument("--rules", default=None, help="Fielding rule set name (default: coed)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible shuffles")
    parser.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for roster CSV columns (e.g., name=First Name|Last Name)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load column mapping JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save column mapping JSON", default=None)
    parser.add_argument("--output", type=Path, default=None, help="Output CSV path (stdout if omitted)")
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    mapping = _parse_mapping(args.column)
    if args.load_profile:
        profile = MappingProfile.load(args.load_profile)
        mapping = profile.roster_mapping | mapping
    if args.save_profile:
        MappingProfile(mapping).save(args.save_profile)
        print(f"Saved mapping profile to {args.save_profile}", file=sys.stderr)

    rules = get_rules(args.rules)
    engine = LineupEngine(
        rng=random.Random(args.seed) if args.seed is not None else None,
        rules=rules,
    )

    try:
        players, attendance = load_players_from_csv(
            args.roster,
            game_id=args.game_id,
            mapping=DEFAULT_ROSTER_MAPPING | mapping,
            rules=rules,
        )
        if args.mode == "batting":
            result = engine.batting_order(args.game_id, players, attendance)
            output = batting_order_to_csv(result.slots, players)
            print(f"Pitcher spacing: {result.pitcher_spacing.value}", file=sys.stderr)
        elif args.mode == "inning":
            assignments = engine.fielding_lineup(args.game_id, players, attendance, args.inning)
            output = fielding_lineup_to_csv(assignments, players, rules=rules)
        else:
            assignments = engine.complete_fielding_lineup(args.game_id, players, attendance)
            output = fielding_lineup_to_csv(assignments, players, rules=rules)
    except LineupGenerationError as exc:
        print(f"Lineup generation failed: {exc.message}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 2

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Wrote {args.mode} lineup to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
