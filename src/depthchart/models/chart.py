from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Sequence

from .player import Player


def normalize_position(position: str) -> str:
    return position.strip().upper()


class DepthChart(Mapping[str, List[Player]]):
    """Read-only view of a team's chart: position code -> ordered players.

    Keys are looked up case-insensitively and iterate in code order. Each
    lookup returns a copy so callers cannot mutate the chart in place.
    """

    def __init__(self, positions: Mapping[str, Sequence[Player]] | None = None):
        self._positions: Dict[str, List[Player]] = {}
        for code in sorted(positions or {}, key=normalize_position):
            self._positions[normalize_position(code)] = list((positions or {})[code])

    def __getitem__(self, position: str) -> List[Player]:
        return list(self._positions[normalize_position(position)])

    def __contains__(self, position: object) -> bool:
        if not isinstance(position, str):
            return False
        return normalize_position(position) in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        return f"DepthChart({self._positions!r})"

    def to_dict(self) -> Dict[str, List[dict]]:
        return {
            code: [player.model_dump() for player in players]
            for code, players in self._positions.items()
        }
