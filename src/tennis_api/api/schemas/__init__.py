"""Pydantic models for API I/O."""

from .responses import (
    ErrorDetail,
    ErrorResponse,
    PlayerListResponse,
    PlayerResponse,
    StatisticsResponse,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "PlayerListResponse",
    "PlayerResponse",
    "StatisticsResponse",
]
