"""Player and team value objects shared by the store, service and API."""

from __future__ import annotations

from typing import Any, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Player(BaseModel):
    """A player identified by name (case-insensitive) and jersey number.

    Equality and hashing only look at that identity, so ``Player("Tom Brady",
    12)`` and ``Player("TOM BRADY", 12)`` are the same player.
    """

    name: str = Field(..., min_length=1)
    number: int

    model_config = ConfigDict(frozen=True)

    def __init__(self, name: str | None = None, number: int | None = None, **data: Any):
        if name is not None:
            data["name"] = name
        if number is not None:
            data["number"] = number
        super().__init__(**data)

    @property
    def identity(self) -> Tuple[str, int]:
        return (self.name.casefold(), self.number)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Player):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __str__(self) -> str:
        return f"{self.name} #{self.number}"


class Team(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    sport: str

    model_config = ConfigDict(frozen=True)
