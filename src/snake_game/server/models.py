"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class Action(str, enum.Enum):
    """Non-directional player commands."""

    TOGGLE = "toggle"
    RESET = "reset"


class CreateGameRequest(BaseModel):
    """Request body for POST /games. Omitted fields use server defaults."""

    cols: int | None = Field(default=None, ge=2, le=200)
    rows: int | None = Field(default=None, ge=2, le=200)
    initial_speed: float | None = Field(default=None, gt=0, le=60)
    speed_policy: str | None = None
    speed_increment: float | None = Field(default=None, ge=0)
    speed_step_every: int | None = Field(default=None, ge=1)
    tail_is_solid: bool | None = None
    auto_restart: bool | None = None
    seed: int | None = None


class DirectionRequest(BaseModel):
    """Request body for POST /games/{game_id}/direction."""

    direction: str = Field(min_length=1, max_length=8)


class GameSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: str
    score: int
    high_score: int
    speed: float
    tick: int


class HighScoreResponse(BaseModel):
    """Response for GET /high-score."""

    high_score: int


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
