"""REST API for tennis players and their statistics."""

from __future__ import annotations

import logging
import time
from http import HTTPStatus
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tennis_api import __version__
from tennis_api.api.schemas import (
    ErrorDetail,
    ErrorResponse,
    PlayerListResponse,
    PlayerResponse,
    StatisticsResponse,
)
from tennis_api.config import Settings
from tennis_api.persistence import DataSourceError, JsonPlayerStore
from tennis_api.repository import DuplicatePlayer, PlayerRepository, ValidationFailed
from tennis_api.stats import calculate_statistics


logger = logging.getLogger("uvicorn.error")

API_TITLE = "Tennis Players API"

OPENAPI_TAGS = [
    {"name": "Players", "description": "Tennis players management endpoints"},
    {"name": "Statistics", "description": "Player statistics and rankings"},
]


def build_repository(settings: Settings) -> PlayerRepository:
    """Hydrate a repository from the configured players document."""

    store = JsonPlayerStore(settings.data_path)
    records = store.load()
    try:
        return PlayerRepository(
            records,
            persist=store.save if settings.persist else None,
            country_picture_template=settings.country_picture_template,
        )
    except ValueError as exc:
        raise DataSourceError(f"Invalid players document {settings.data_path}: {exc}") from exc


def _error_response(
    status: int,
    message: str,
    *,
    error: str | None = None,
    details: list[ErrorDetail] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        error=error or HTTPStatus(status).phrase,
        message=message,
        status=status,
        details=details,
    )
    return JSONResponse(status_code=status, content=payload.model_dump(exclude_none=True))


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == 404 and exc.detail == HTTPStatus.NOT_FOUND.phrase:
            message = f"Route {request.method} {request.url.path} not found"
        return _error_response(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            ErrorDetail(
                field=".".join(str(part) for part in error.get("loc", ()) if part != "body") or None,
                message=str(error.get("msg", "invalid value")),
            )
            for error in exc.errors()
        ]
        return _error_response(
            400,
            "Validation failed: request body could not be parsed",
            error="Validation Error",
            details=details,
        )

    @app.exception_handler(ValidationFailed)
    async def validation_failed(request: Request, exc: ValidationFailed) -> JSONResponse:
        return _error_response(
            400,
            exc.message,
            error="Validation Error",
            details=[ErrorDetail(message=item) for item in exc.errors],
        )

    @app.exception_handler(DuplicatePlayer)
    async def duplicate_player(request: Request, exc: DuplicatePlayer) -> JSONResponse:
        return _error_response(409, exc.message)


def create_app(
    settings: Settings | None = None,
    repository: PlayerRepository | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    if repository is None:
        repository = build_repository(settings)

    app = FastAPI(
        title=API_TITLE,
        version=__version__,
        description="API for managing tennis players and their statistics",
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings
    app.state.repository = repository

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s %d - %.0fms", request.method, request.url.path, response.status_code, duration_ms)
        return response

    _register_error_handlers(app)

    @app.get("/")
    async def index() -> dict[str, Any]:
        return {
            "success": True,
            "message": f"{API_TITLE} is running",
            "version": __version__,
            "endpoints": {
                "players": "/api/players",
                "statistics": "/api/statistics",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/players", response_model=PlayerListResponse, tags=["Players"])
    async def list_players():
        players = repository.list_sorted_by_rank()
        return PlayerListResponse(data=players, count=len(players))

    @app.get(
        "/api/players/{player_id}",
        response_model=PlayerResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Players"],
    )
    async def get_player(player_id: str):
        try:
            parsed_id = int(player_id)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid player ID format") from None
        player = repository.get_by_id(parsed_id)
        if player is None:
            raise HTTPException(status_code=404, detail=f"Player with ID {parsed_id} not found")
        return PlayerResponse(data=player)

    @app.post(
        "/api/players",
        response_model=PlayerResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Players"],
    )
    def create_player(payload: Any = Body(...)):
        player = repository.create(payload)
        return PlayerResponse(data=player)

    @app.get("/api/statistics", response_model=StatisticsResponse, tags=["Statistics"])
    async def statistics():
        return StatisticsResponse(data=calculate_statistics(repository.snapshot()))

    return app
