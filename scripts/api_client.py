"""Lightweight REST client for the depthchart API."""

from __future__ import annotations

import argparse
import json
from urllib.parse import quote

import httpx


def _player_path(team_id: str, position: str, name: str, number: int) -> str:
    return f"/teams/{quote(team_id, safe='')}/depthchart/{quote(position, safe='')}/{quote(name, safe='')}/{number}/backups"


def _raise_for_status(resp: httpx.Response) -> None:
    if resp.status_code == 400:
        detail = resp.json().get("detail", resp.text)
        raise SystemExit(f"rejected: {detail}")
    resp.raise_for_status()


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the depthchart REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("team_id", help="Team identifier")
    parser.add_argument("--add", nargs=3, metavar=("POSITION", "NAME", "NUMBER"), help="Add a player")
    parser.add_argument("--depth", type=int, default=None, help="Depth used with --add")
    parser.add_argument("--remove", nargs=3, metavar=("POSITION", "NAME", "NUMBER"), help="Remove a player")
    parser.add_argument("--backups", nargs=3, metavar=("POSITION", "NAME", "NUMBER"), help="List backups for a player")
    args = parser.parse_args()

    team = quote(args.team_id, safe="")
    with httpx.Client(base_url=args.base_url) as client:
        if args.add:
            position, name, number = args.add
            body = {"position": position, "name": name, "number": int(number)}
            if args.depth is not None:
                body["positionDepth"] = args.depth
            resp = client.post(f"/teams/{team}/depthchart/add", json=body)
            _raise_for_status(resp)
            print(f"Added {name} #{number} at {position}")
        if args.remove:
            position, name, number = args.remove
            resp = client.post(
                f"/teams/{team}/depthchart/remove",
                json={"position": position, "name": name, "number": int(number)},
            )
            _raise_for_status(resp)
            print("Removed:", json.dumps(resp.json(), indent=2))
        if args.backups:
            position, name, number = args.backups
            resp = client.get(_player_path(args.team_id, position, name, int(number)))
            _raise_for_status(resp)
            print("Backups:", json.dumps(resp.json(), indent=2))

        resp = client.get(f"/teams/{team}/depthchart")
        _raise_for_status(resp)
        print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
