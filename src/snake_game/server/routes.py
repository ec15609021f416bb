"""REST API route handlers for game lifecycle and input."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from snake_game.server.models import (
    CreateGameRequest,
    DirectionRequest,
    GameSummary,
    HighScoreResponse,
)

router = APIRouter(prefix="/games", tags=["games"])
scores_router = APIRouter(tags=["scores"])


def _get_manager(request: Request):
    return request.app.state.game_manager


async def _input(request: Request, game_id: str, **command) -> dict:
    try:
        return await _get_manager(request).handle_input(game_id, **command)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> GameSummary:
    """Create and start a new game."""
    manager = _get_manager(request)
    try:
        game = manager.create_game(**body.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return game.summary()


@router.get("")
async def list_games(request: Request) -> list[GameSummary]:
    """List all games."""
    return _get_manager(request).list_games()


@router.get("/{game_id}")
async def get_game(game_id: str, request: Request) -> dict:
    """Get game summary and full state."""
    game = _get_manager(request).get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    result = game.summary().model_dump()
    result["state"] = game.engine.get_state()
    return result


@router.post("/{game_id}/direction")
async def set_direction(
    game_id: str, body: DirectionRequest, request: Request,
) -> dict:
    """Queue a direction change for the next tick."""
    return await _input(request, game_id, direction=body.direction)


@router.post("/{game_id}/toggle")
async def toggle(game_id: str, request: Request) -> dict:
    """Pause or resume the game."""
    return await _input(request, game_id, action="toggle")


@router.post("/{game_id}/reset")
async def reset(game_id: str, request: Request) -> dict:
    """Record the current score and start a fresh run."""
    return await _input(request, game_id, action="reset")


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str, request: Request) -> Response:
    """Stop and discard a game."""
    try:
        await _get_manager(request).remove_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    return Response(status_code=204)


@scores_router.get("/high-score")
async def high_score(request: Request) -> HighScoreResponse:
    """Best score across all games."""
    return HighScoreResponse(high_score=_get_manager(request).high_scores.value)
