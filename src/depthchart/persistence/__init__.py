"""Persistence layer for teams and their depth charts.

:class:`DepthChartStore` is the only component that reads or writes durable
state. A position is always written as a complete ordered list: every save
replaces all entries of that position and renumbers their depths ``0..N-1``
inside a single transaction. Players are stored once per identity
(case-folded name + number); saves resolve each incoming player against the
``players`` table and create the row only when no match exists.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence
from uuid import uuid4

from depthchart.errors import ConflictError, InvalidArgumentError, NotFoundError
from depthchart.models import DepthChart, Player, Team, normalize_position


logger = logging.getLogger("uvicorn.error")


_SCHEMA = """
CREATE TABLE IF NOT EXISTS teams (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    sport TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS players (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    name_key TEXT NOT NULL,
    number INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE (name_key, number)
);

CREATE TABLE IF NOT EXISTS depth_charts (
    id TEXT PRIMARY KEY,
    team_id TEXT NOT NULL UNIQUE REFERENCES teams(id) ON DELETE CASCADE,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS depth_chart_positions (
    id TEXT PRIMARY KEY,
    chart_id TEXT NOT NULL REFERENCES depth_charts(id) ON DELETE CASCADE,
    code TEXT NOT NULL,
    UNIQUE (chart_id, code)
);

CREATE TABLE IF NOT EXISTS depth_chart_entries (
    id TEXT PRIMARY KEY,
    position_id TEXT NOT NULL REFERENCES depth_chart_positions(id) ON DELETE CASCADE,
    player_id TEXT NOT NULL REFERENCES players(id) ON DELETE CASCADE,
    depth INTEGER NOT NULL CHECK (depth >= 0),
    UNIQUE (position_id, depth),
    UNIQUE (position_id, player_id)
);
"""


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _name_key(name: str) -> str:
    return name.casefold()


def _is_memory_database(db_path: Path | str) -> bool:
    if isinstance(db_path, Path):
        return False
    return db_path == ":memory:" or (db_path.startswith("file:") and "mode=memory" in db_path)


class DepthChartStore:
    """SQLite-backed store for teams, players and ordered position entries.

    File databases get a fresh connection per call. In-memory databases vanish
    once their last connection closes, so the store holds a single connection
    for them until :meth:`close` and serialises access to it.
    """

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        self._shared: Optional[sqlite3.Connection] = None
        self._shared_lock = threading.Lock()
        if isinstance(db_path, str) and (db_path.startswith("file:") or db_path == ":memory:"):
            self.db_path: Path | str = db_path
            self._use_uri = db_path.startswith("file:")
        else:
            self.db_path = Path(db_path)
        if _is_memory_database(self.db_path):
            self._shared = self._open(check_same_thread=False)
        self._ensure_schema()

    def _open(self, **kwargs) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        # Autocommit mode; writes open their own transaction in _transaction().
        conn = sqlite3.connect(self.db_path, uri=self._use_uri, isolation_level=None, **kwargs)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def close(self) -> None:
        """Release the held connection of an in-memory store, discarding its data."""

        if self._shared is not None:
            with self._shared_lock:
                self._shared.close()
                self._shared = None

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if _is_memory_database(self.db_path):
            with self._shared_lock:
                if self._shared is None:
                    raise sqlite3.ProgrammingError("Cannot operate on a closed in-memory store.")
                yield self._shared
            return
        conn = self._open()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(_SCHEMA)

    # ---------- teams ----------

    def create_team(self, *, name: str, sport: str, team_id: Optional[str] = None) -> Team:
        team_id = team_id or str(uuid4())
        try:
            with self._transaction() as conn:
                conn.execute(
                    "INSERT INTO teams (id, name, sport, created_at) VALUES (?, ?, ?, ?)",
                    (team_id, name, sport.strip().upper(), _utcnow()),
                )
        except sqlite3.IntegrityError as exc:
            raise ConflictError(f"Team {team_id} already exists.") from exc
        return Team(id=team_id, name=name, sport=sport.strip().upper())

    def get_team(self, team_id: str) -> Optional[Team]:
        with self._connect() as conn:
            row = conn.execute("SELECT id, name, sport FROM teams WHERE id = ?", (team_id,)).fetchone()
        if row is None:
            return None
        return Team(id=row["id"], name=row["name"], sport=row["sport"])

    def list_teams(self) -> List[Team]:
        with self._connect() as conn:
            rows = conn.execute("SELECT id, name, sport FROM teams ORDER BY name, id").fetchall()
        return [Team(id=row["id"], name=row["name"], sport=row["sport"]) for row in rows]

    # ---------- players ----------

    def list_players(self) -> List[Player]:
        with self._connect() as conn:
            rows = conn.execute("SELECT name, number FROM players ORDER BY name_key, number").fetchall()
        return [Player(name=row["name"], number=row["number"]) for row in rows]

    def _resolve_player(self, conn: sqlite3.Connection, player: Player, now: str) -> str:
        """Return the durable id for ``player``, creating the row on first sight."""

        key = _name_key(player.name)
        conn.execute(
            """
            INSERT INTO players (id, name, name_key, number, created_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT (name_key, number) DO NOTHING
            """,
            (uuid4().hex, player.name, key, player.number, now),
        )
        row = conn.execute(
            "SELECT id FROM players WHERE name_key = ? AND number = ?",
            (key, player.number),
        ).fetchone()
        return row["id"]

    # ---------- positions ----------

    def get_position(self, team_id: str, position: str) -> List[Player]:
        """Ordered players at ``position``, starter first; empty if none saved."""

        code = normalize_position(position)
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT e.depth, e.player_id, p.name, p.number
                FROM depth_charts dc
                JOIN depth_chart_positions pos ON pos.chart_id = dc.id
                JOIN depth_chart_entries e ON e.position_id = pos.id
                LEFT JOIN players p ON p.id = e.player_id
                WHERE dc.team_id = ? AND pos.code = ?
                ORDER BY e.depth
                """,
                (team_id, code),
            ).fetchall()
        players: List[Player] = []
        for row in rows:
            if row["name"] is None:
                logger.warning(
                    "Skipping depth %s at %s for team %s: player %s is missing",
                    row["depth"], code, team_id, row["player_id"],
                )
                continue
            players.append(Player(name=row["name"], number=row["number"]))
        return players

    def save_position(self, team_id: str, position: str, players: Sequence[Player]) -> None:
        """Replace the entries at ``position`` with ``players`` in the given order."""

        code = normalize_position(position)
        if not code:
            raise InvalidArgumentError("Position is required.")
        ordered = list(players)
        seen: set[Player] = set()
        for player in ordered:
            if player in seen:
                raise ConflictError(f"{player} appears more than once at {code}.")
            seen.add(player)

        now = _utcnow()
        with self._transaction() as conn:
            team = conn.execute("SELECT 1 FROM teams WHERE id = ?", (team_id,)).fetchone()
            if team is None:
                raise NotFoundError(f"Team {team_id} does not exist.")
            chart_id = self._ensure_chart(conn, team_id, now)
            position_id = self._ensure_position(conn, chart_id, code)
            player_ids = [self._resolve_player(conn, player, now) for player in ordered]
            conn.execute("DELETE FROM depth_chart_entries WHERE position_id = ?", (position_id,))
            conn.executemany(
                """
                INSERT INTO depth_chart_entries (id, position_id, player_id, depth)
                VALUES (?, ?, ?, ?)
                """,
                [(uuid4().hex, position_id, player_id, depth) for depth, player_id in enumerate(player_ids)],
            )

    def _ensure_chart(self, conn: sqlite3.Connection, team_id: str, now: str) -> str:
        conn.execute(
            """
            INSERT INTO depth_charts (id, team_id, updated_at) VALUES (?, ?, ?)
            ON CONFLICT (team_id) DO UPDATE SET updated_at = excluded.updated_at
            """,
            (uuid4().hex, team_id, now),
        )
        row = conn.execute("SELECT id FROM depth_charts WHERE team_id = ?", (team_id,)).fetchone()
        return row["id"]

    def _ensure_position(self, conn: sqlite3.Connection, chart_id: str, code: str) -> str:
        conn.execute(
            """
            INSERT INTO depth_chart_positions (id, chart_id, code) VALUES (?, ?, ?)
            ON CONFLICT (chart_id, code) DO NOTHING
            """,
            (uuid4().hex, chart_id, code),
        )
        row = conn.execute(
            "SELECT id FROM depth_chart_positions WHERE chart_id = ? AND code = ?",
            (chart_id, code),
        ).fetchone()
        return row["id"]

    # ---------- full chart ----------

    def get_full_chart(self, team_id: str) -> DepthChart:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT pos.code, e.id AS entry_id, e.depth, e.player_id, p.name, p.number
                FROM depth_charts dc
                JOIN depth_chart_positions pos ON pos.chart_id = dc.id
                LEFT JOIN depth_chart_entries e ON e.position_id = pos.id
                LEFT JOIN players p ON p.id = e.player_id
                WHERE dc.team_id = ?
                ORDER BY pos.code, e.depth
                """,
                (team_id,),
            ).fetchall()
        positions: Dict[str, List[Player]] = {}
        for row in rows:
            players = positions.setdefault(row["code"], [])
            if row["entry_id"] is None:
                continue
            if row["name"] is None:
                logger.warning(
                    "Skipping depth %s at %s for team %s: player %s is missing",
                    row["depth"], row["code"], team_id, row["player_id"],
                )
                continue
            players.append(Player(name=row["name"], number=row["number"]))
        return DepthChart(positions)

    def get_chart_updated_at(self, team_id: str) -> Optional[datetime]:
        with self._connect() as conn:
            row = conn.execute("SELECT updated_at FROM depth_charts WHERE team_id = ?", (team_id,)).fetchone()
        if row is None:
            return None
        return datetime.fromisoformat(row["updated_at"])


__all__ = ["DepthChartStore"]
