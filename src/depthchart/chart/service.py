"""Depth chart operations built on top of :class:`DepthChartStore`."""

from __future__ import annotations

import logging
import sqlite3
from functools import partial
from typing import Callable, List, Optional, TypeVar

from anyio import to_thread

from depthchart.config.positions import DEFAULT_RULES, SportPositionRules
from depthchart.correlation import get_correlation_id
from depthchart.errors import ConflictError, InternalError, InvalidArgumentError, NotFoundError
from depthchart.models import DepthChart, Player, Team
from depthchart.persistence import DepthChartStore


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

T = TypeVar("T")


def insert_at_depth(players: List[Player], player: Player, depth: Optional[int]) -> List[Player]:
    """Return a new list with ``player`` placed at ``depth``.

    ``None`` or ``depth == len(players)`` appends. Depths past the end are
    rejected so the chart is always filled from 0 upward.
    """

    if depth is not None and depth < 0:
        raise InvalidArgumentError("Depth must be >= 0.")
    if depth is not None and depth > len(players):
        raise ConflictError(
            f"Cannot add {player} at depth {depth} because depth {len(players)} must be filled first."
        )
    updated = list(players)
    if depth is None or depth >= len(updated):
        updated.append(player)
    else:
        updated.insert(depth, player)
    return updated


def backups_for(players: List[Player], player: Player) -> List[Player]:
    """Players listed below ``player``; empty when absent or last."""

    try:
        index = players.index(player)
    except ValueError:
        return []
    return list(players[index + 1:])


class DepthChartService:
    """Validates requests and keeps each position's order consistent.

    Store calls are blocking SQLite work and run in a worker thread. A write
    that has started always runs to commit or rollback even when the calling
    task is cancelled, so a cancelled request never leaves a half-written
    position behind.
    """

    def __init__(self, store: DepthChartStore, rules: SportPositionRules | None = None):
        self._store = store
        self._rules = rules or DEFAULT_RULES

    @property
    def store(self) -> DepthChartStore:
        return self._store

    async def _run(self, func: Callable[..., T], *args: object) -> T:
        try:
            return await to_thread.run_sync(partial(func, *args))
        except sqlite3.Error as exc:
            logger.exception(
                "Storage failure in %s (correlation %s)",
                getattr(func, "__name__", repr(func)),
                get_correlation_id() or "-",
            )
            raise InternalError() from exc

    async def _require_team(self, team_id: str) -> Team:
        team = await self._run(self._store.get_team, team_id)
        if team is None:
            raise NotFoundError(f"Team {team_id} does not exist.")
        return team

    def _require_position(self, team: Team, position: str) -> None:
        if not self._rules.is_valid_position(team.sport, position):
            raise InvalidArgumentError(f"Position {position} is not valid for {team.sport}.")

    async def add_player(
        self,
        team_id: str,
        position: str,
        player: Player,
        depth: Optional[int] = None,
    ) -> None:
        team = await self._require_team(team_id)
        self._require_position(team, position)

        players = await self._run(self._store.get_position, team_id, position)
        if player in players:
            raise ConflictError(f"{player} is already in the depth chart at {position}.")
        updated = insert_at_depth(players, player, depth)

        await self._run(self._store.save_position, team_id, position, updated)
        logger.info(
            "Added %s to team %s at %s depth %d (%d players)",
            player, team_id, position, updated.index(player), len(updated),
        )

    async def remove_player(self, team_id: str, position: str, player: Player) -> List[Player]:
        team = await self._require_team(team_id)
        self._require_position(team, position)

        players = await self._run(self._store.get_position, team_id, position)
        remaining = [existing for existing in players if existing != player]
        if len(remaining) == len(players):
            logger.info("%s not found at %s for team %s; nothing removed", player, position, team_id)
            return []

        await self._run(self._store.save_position, team_id, position, remaining)
        logger.info("Removed %s from team %s at %s (%d players)", player, team_id, position, len(remaining))
        return [player]

    async def get_backups(self, team_id: str, position: str, player: Player) -> List[Player]:
        players = await self._run(self._store.get_position, team_id, position)
        return backups_for(players, player)

    async def get_full_chart(self, team_id: str) -> DepthChart:
        return await self._run(self._store.get_full_chart, team_id)
