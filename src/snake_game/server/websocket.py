"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_game.server.game_manager import GameManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> GameManager:
    return ws.app.state.game_manager


def _parse_command(raw: str) -> dict | None:
    """Extract ``direction``/``action`` from a client message, or None."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(msg, dict):
        return None

    command = {}
    for key in ("direction", "action"):
        value = msg.get(key)
        if isinstance(value, str):
            command[key] = value.lower()
    return command or None


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Send directions and actions, receive game state each tick."""
    manager = _get_manager(websocket)
    game = manager.get_game(game_id)
    if game is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    game.sockets.append(websocket)
    logger.info("Client connected to game %s.", game_id)

    # Initial snapshot so the client can draw before the first tick.
    await websocket.send_text(
        json.dumps(game.engine.get_state(), separators=(",", ":")),
    )

    try:
        while True:
            command = _parse_command(await websocket.receive_text())
            if command is None:
                continue
            try:
                await manager.handle_input(game_id, **command)
            except ValueError:
                continue
            except KeyError:
                # Game was removed while this socket was open.
                break
    except WebSocketDisconnect:
        logger.info("Client disconnected from game %s.", game_id)
    finally:
        if websocket in game.sockets:
            game.sockets.remove(websocket)
