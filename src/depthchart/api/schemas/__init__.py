"""Pydantic models for API I/O."""

from .depth import AddPlayerRequest, DepthChartResponse, PlayerResponse, RemovePlayerRequest

__all__ = [
    "AddPlayerRequest",
    "DepthChartResponse",
    "PlayerResponse",
    "RemovePlayerRequest",
]
