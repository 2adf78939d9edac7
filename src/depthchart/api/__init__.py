"""REST API for team depth charts.

Thin wrapper around :class:`DepthChartService`: request validation, error
mapping and correlation ids live here, ordering rules do not.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from depthchart.api.schemas import (
    AddPlayerRequest,
    DepthChartResponse,
    PlayerResponse,
    RemovePlayerRequest,
)
from depthchart.chart import DepthChartService
from depthchart.config import Settings, SportPositionRules, load_settings
from depthchart.config_loader import load_position_rules
from depthchart.correlation import (
    CORRELATION_HEADER,
    configure_logging,
    new_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from depthchart.errors import DepthChartError, InternalError
from depthchart.models import Player
from depthchart.persistence import DepthChartStore


logger = logging.getLogger("uvicorn.error")

GENERIC_ERROR = "An unexpected error occurred."


def _require_text(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise HTTPException(status_code=400, detail=message)
    return value.strip()


def _require_number(value: int | None) -> int:
    if value is None or value <= 0:
        raise HTTPException(status_code=400, detail="Player number must be positive.")
    return value


def _require_team_id(team_id: str) -> str:
    return _require_text(team_id, "Team ID is required.")


def _players_payload(players: list[Player]) -> list[dict[str, Any]]:
    return [PlayerResponse(name=player.name, number=player.number).model_dump() for player in players]


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def create_app(
    settings: Settings | None = None,
    *,
    store: DepthChartStore | None = None,
    rules: SportPositionRules | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    if rules is None:
        rules = load_position_rules(settings.positions_file)
    if store is None:
        store = DepthChartStore(settings.db_path)
    service = DepthChartService(store, rules)

    app = FastAPI(title="depthchart")
    app.state.store = store
    app.state.service = service

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or new_correlation_id()
        token = set_correlation_id(correlation_id)
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception("Unhandled error for %s %s", request.method, request.url.path)
                response = JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})
        finally:
            reset_correlation_id(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})

    @app.exception_handler(DepthChartError)
    async def depth_chart_error_handler(request: Request, exc: DepthChartError) -> JSONResponse:
        if isinstance(exc, InternalError):
            return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/teams/{team_id}/depthchart", response_model=DepthChartResponse)
    async def get_depth_chart(team_id: str) -> dict[str, list[dict[str, Any]]]:
        team_id = _require_team_id(team_id)
        chart = await service.get_full_chart(team_id)
        return chart.to_dict()

    @app.post("/teams/{team_id}/depthchart/add", status_code=204)
    async def add_player(team_id: str, request: AddPlayerRequest) -> Response:
        team_id = _require_team_id(team_id)
        position = _require_text(request.position, "Position is required.")
        name = _require_text(request.name, "Player name is required.")
        number = _require_number(request.number)
        if request.position_depth is not None and request.position_depth < 0:
            raise HTTPException(status_code=400, detail="Depth must be >= 0.")

        await service.add_player(team_id, position, Player(name=name, number=number), request.position_depth)
        return Response(status_code=204)

    @app.post("/teams/{team_id}/depthchart/remove", response_model=list[PlayerResponse])
    async def remove_player(team_id: str, request: RemovePlayerRequest) -> list[dict[str, Any]]:
        team_id = _require_team_id(team_id)
        position = _require_text(request.position, "Position is required.")
        name = _require_text(request.name, "Player name is required.")
        number = _require_number(request.number)

        removed = await service.remove_player(team_id, position, Player(name=name, number=number))
        return _players_payload(removed)

    @app.get(
        "/teams/{team_id}/depthchart/{position}/{name}/{number}/backups",
        response_model=list[PlayerResponse],
    )
    async def get_backups(team_id: str, position: str, name: str, number: int) -> list[dict[str, Any]]:
        team_id = _require_team_id(team_id)
        position = _require_text(position, "Position is required.")
        name = _require_text(name, "Player name is required.")
        number = _require_number(number)

        backups = await service.get_backups(team_id, position, Player(name=name, number=number))
        return _players_payload(backups)

    return app


__all__ = ["create_app"]
