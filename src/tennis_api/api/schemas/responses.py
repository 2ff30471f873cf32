from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel

from tennis_api.models import Player, Statistics


class PlayerListResponse(BaseModel):
    success: Literal[True] = True
    data: List[Player]
    count: int


class PlayerResponse(BaseModel):
    success: Literal[True] = True
    data: Player


class StatisticsResponse(BaseModel):
    success: Literal[True] = True
    data: Statistics


class ErrorDetail(BaseModel):
    field: str | None = None
    message: str


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str
    message: str
    status: int
    details: List[ErrorDetail] | None = None
