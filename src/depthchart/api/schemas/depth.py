from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class PlayerResponse(BaseModel):
    name: str
    number: int


class AddPlayerRequest(BaseModel):
    position: str | None = None
    name: str | None = None
    number: int | None = None
    position_depth: int | None = Field(default=None, alias="positionDepth")

    model_config = ConfigDict(populate_by_name=True)


class RemovePlayerRequest(BaseModel):
    position: str | None = None
    name: str | None = None
    number: int | None = None


DepthChartResponse = Dict[str, List[PlayerResponse]]
