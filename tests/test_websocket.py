"""WebSocket integration tests for real-time play."""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from snake_game.config import GameConfig
from snake_game.server.app import create_app
from snake_game.storage import HIGH_SCORE_KEY, MemoryStore


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def tc(store):
    """Starlette TestClient running the app lifespan, so tick loops share
    one event loop with the REST calls and WebSocket connections."""
    application = create_app(GameConfig(initial_speed=20.0, seed=0), store)
    with TestClient(application) as client:
        yield client


def _create_game(tc) -> str:
    resp = tc.post("/games", json={})
    assert resp.status_code == 201
    return resp.json()["game_id"]


def _receive_until(ws, predicate, limit=50) -> dict:
    for _ in range(limit):
        state = json.loads(ws.receive_text())
        if predicate(state):
            return state
    raise AssertionError("Expected state never arrived.")


class TestPlayWebSocket:
    def test_connect_and_receive_initial_state(self, tc):
        game_id = _create_game(tc)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            state = json.loads(ws.receive_text())
            for key in ("tick", "snake", "food", "score", "high_score"):
                assert key in state

    def test_receives_ticks(self, tc):
        game_id = _create_game(tc)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            state = _receive_until(ws, lambda s: s["tick"] >= 2)
            assert state["status"] == "running"

    def test_toggle_pauses(self, tc):
        game_id = _create_game(tc)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "toggle"}))
            state = _receive_until(ws, lambda s: s["status"] == "paused")
            assert not state["running"]

    def test_direction_applied(self, tc):
        game_id = _create_game(tc)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"direction": "UP"}))
            state = _receive_until(ws, lambda s: s["direction"] == "up")
            assert state["snake"][0][1] < 9 or state["snake"][0][1] == 19

    def test_malformed_messages_ignored(self, tc):
        game_id = _create_game(tc)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text("not json")
            ws.send_text(json.dumps([1, 2, 3]))
            ws.send_text(json.dumps({"direction": "sideways"}))
            ws.send_text(json.dumps({"action": "dance"}))
            ws.send_text(json.dumps({"action": "toggle"}))
            _receive_until(ws, lambda s: s["status"] == "paused")

    def test_reset_records_high_score(self, tc, store):
        game_id = _create_game(tc)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "reset"}))
            state = _receive_until(ws, lambda s: s["runs"] == 2)
            assert state["score"] == 0
        high = tc.get("/high-score").json()["high_score"]
        assert high == int(store.get(HIGH_SCORE_KEY) or 0)

    def test_nonexistent_game_rejected(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/games/nonexistent/play",
        ):
            pass
