"""Command-line interface for managing depth charts against a local database."""

from __future__ import annotations

import argparse
import json
import sqlite3
import sys
from functools import partial
from pathlib import Path
from typing import Sequence

import anyio

from depthchart.chart import DepthChartService
from depthchart.config import Settings, load_settings
from depthchart.config_loader import load_position_rules
from depthchart.errors import DepthChartError
from depthchart.models import Player
from depthchart.persistence import DepthChartStore


def _non_negative(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError("depth must be >= 0")
    return value


def _positive(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError("player number must be positive")
    return value


def _add_player_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("team_id", help="Team identifier")
    parser.add_argument("position", help="Position code (e.g., QB)")
    parser.add_argument("name", help="Player name")
    parser.add_argument("number", type=_positive, help="Jersey number")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage team depth charts")
    parser.add_argument(
        "--db",
        default=None,
        help="SQLite database path or file: URI (default: $DEPTHCHART_DB_PATH)",
    )
    parser.add_argument(
        "--positions-file",
        type=Path,
        default=None,
        help="JSON file extending the sport position allow-list",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_team = subparsers.add_parser("create-team", help="Register a team")
    create_team.add_argument("--name", required=True, help="Team display name")
    create_team.add_argument("--sport", required=True, help="Sport code (e.g., NFL)")
    create_team.add_argument("--id", dest="team_id", default=None, help="Optional team identifier")

    subparsers.add_parser("teams", help="List registered teams")

    chart = subparsers.add_parser("chart", help="Print a team's full depth chart as JSON")
    chart.add_argument("team_id", help="Team identifier")

    add = subparsers.add_parser("add", help="Add a player at a position")
    _add_player_arguments(add)
    add.add_argument("--depth", type=_non_negative, default=None, help="Zero-based depth (appends if omitted)")

    remove = subparsers.add_parser("remove", help="Remove a player from a position")
    _add_player_arguments(remove)

    backups = subparsers.add_parser("backups", help="List the players behind a player")
    _add_player_arguments(backups)

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")
    return parser.parse_args(argv)


def _print_players(players: list[Player]) -> None:
    if not players:
        print("(none)")
        return
    for depth, player in enumerate(players):
        print(f"{depth}: {player.name} #{player.number}")


def _serve(args: argparse.Namespace, settings: Settings, db_path: Path | str, positions_file: Path | None) -> None:
    import uvicorn

    from depthchart.api import create_app

    app = create_app(
        settings,
        store=DepthChartStore(db_path),
        rules=load_position_rules(positions_file),
    )
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = load_settings()
    db_path = args.db or settings.db_path
    positions_file = args.positions_file or settings.positions_file

    if args.command == "serve":
        _serve(args, settings, db_path, positions_file)
        return 0

    try:
        store = DepthChartStore(db_path)
        service = DepthChartService(store, load_position_rules(positions_file))

        if args.command == "create-team":
            team = store.create_team(name=args.name, sport=args.sport, team_id=args.team_id)
            print(f"Created team {team.id} ({team.name}, {team.sport})")
        elif args.command == "teams":
            for team in store.list_teams():
                print(f"{team.id}\t{team.name}\t{team.sport}")
        elif args.command == "chart":
            chart = anyio.run(service.get_full_chart, args.team_id)
            print(json.dumps(chart.to_dict(), indent=2))
            updated_at = store.get_chart_updated_at(args.team_id)
            if updated_at is not None:
                print(f"Last updated {updated_at.isoformat()}", file=sys.stderr)
        elif args.command == "add":
            player = Player(name=args.name, number=args.number)
            anyio.run(partial(service.add_player, args.team_id, args.position, player, args.depth))
            print(f"Added {player} at {args.position.upper()}")
        elif args.command == "remove":
            player = Player(name=args.name, number=args.number)
            removed = anyio.run(service.remove_player, args.team_id, args.position, player)
            if removed:
                print(f"Removed {player} from {args.position.upper()}")
            else:
                print(f"{player} is not listed at {args.position.upper()}")
        elif args.command == "backups":
            player = Player(name=args.name, number=args.number)
            _print_players(anyio.run(service.get_backups, args.team_id, args.position, player))
    except DepthChartError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    except sqlite3.Error as exc:
        print(f"error: database failure: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
