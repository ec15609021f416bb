"""REST API endpoint tests."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest
from httpx import ASGITransport, AsyncClient

from snake_game.config import GameConfig
from snake_game.server.app import create_app
from snake_game.server.game_manager import GameManager
from snake_game.snake import Direction
from snake_game.state import GameState

BASE = "http://test"


@pytest.fixture()
def manager():
    # Slow ticks so state changes under test come from requests only.
    return GameManager(GameConfig(initial_speed=0.5, seed=0))


@pytest.fixture()
def app(manager):
    application = create_app()
    application.state.game_manager = manager
    return application


@pytest.fixture()
async def client(app, manager):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c
    await manager.cleanup()


async def _create(client, **body) -> str:
    resp = await client.post("/games", json=body)
    assert resp.status_code == 201
    return resp.json()["game_id"]


class TestCreateGame:
    @pytest.mark.asyncio
    async def test_create_default(self, client):
        resp = await client.post("/games", json={})
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "running"
        assert data["score"] == 0
        assert data["speed"] == 0.5
        assert "game_id" in data

    @pytest.mark.asyncio
    async def test_create_custom_grid(self, client):
        game_id = await _create(client, cols=10, rows=12)
        state = (await client.get(f"/games/{game_id}")).json()["state"]
        assert state["grid"] == {"cols": 10, "rows": 12}
        assert state["snake"][0] == [4, 5]

    @pytest.mark.asyncio
    async def test_create_grid_too_small(self, client):
        resp = await client.post("/games", json={"cols": 1})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_tiny_grid_trims_snake(self, client):
        game_id = await _create(client, cols=2, rows=2)
        state = (await client.get(f"/games/{game_id}")).json()["state"]
        assert state["snake"] == [[0, 0]]

    @pytest.mark.asyncio
    async def test_create_narrow_grid(self, client):
        game_id = await _create(client, cols=2)
        state = (await client.get(f"/games/{game_id}")).json()["state"]
        assert state["grid"] == {"cols": 2, "rows": 20}
        assert state["snake"] == [[0, 9]]

    @pytest.mark.asyncio
    async def test_create_invalid_policy(self, client):
        resp = await client.post("/games", json={"speed_policy": "warp"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_limit(self, app):
        app.state.game_manager = GameManager(
            GameConfig(initial_speed=0.5), max_games=1,
        )
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url=BASE) as c:
            assert (await c.post("/games", json={})).status_code == 201
            assert (await c.post("/games", json={})).status_code == 422
        await app.state.game_manager.cleanup()


class TestListAndGet:
    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        resp = await client.get("/games")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_list_after_create(self, client):
        game_id = await _create(client)
        games = (await client.get("/games")).json()
        assert [g["game_id"] for g in games] == [game_id]

    @pytest.mark.asyncio
    async def test_get_game(self, client):
        game_id = await _create(client)
        data = (await client.get(f"/games/{game_id}")).json()
        assert data["game_id"] == game_id
        assert data["state"]["snake"] == [[9, 9], [8, 9], [7, 9]]

    @pytest.mark.asyncio
    async def test_get_unknown(self, client):
        resp = await client.get("/games/nope")
        assert resp.status_code == 404


class TestInput:
    @pytest.mark.asyncio
    async def test_direction_queued(self, client):
        game_id = await _create(client)
        resp = await client.post(
            f"/games/{game_id}/direction", json={"direction": "up"},
        )
        assert resp.status_code == 200
        assert resp.json()["pending_direction"] == "up"

    @pytest.mark.asyncio
    async def test_reverse_ignored(self, client):
        game_id = await _create(client)
        resp = await client.post(
            f"/games/{game_id}/direction", json={"direction": "left"},
        )
        assert resp.status_code == 200
        assert resp.json()["pending_direction"] is None

    @pytest.mark.asyncio
    async def test_invalid_direction(self, client):
        game_id = await _create(client)
        resp = await client.post(
            f"/games/{game_id}/direction", json={"direction": "north"},
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_direction_unknown_game(self, client):
        resp = await client.post("/games/nope/direction", json={"direction": "up"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_toggle(self, client):
        game_id = await _create(client)
        resp = await client.post(f"/games/{game_id}/toggle")
        assert resp.json()["status"] == "paused"
        resp = await client.post(f"/games/{game_id}/toggle")
        assert resp.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_reset_records_score(self, client, manager):
        game_id = await _create(client)
        engine = manager.get_game(game_id).engine
        engine.state = dataclasses.replace(engine.state, score=5)

        resp = await client.post(f"/games/{game_id}/reset")
        assert resp.status_code == 200
        assert resp.json()["score"] == 0
        assert resp.json()["runs"] == 2

        hs = await client.get("/high-score")
        assert hs.json() == {"high_score": 5}


class TestDeleteGame:
    @pytest.mark.asyncio
    async def test_delete(self, client):
        game_id = await _create(client)
        resp = await client.delete(f"/games/{game_id}")
        assert resp.status_code == 204
        assert (await client.get(f"/games/{game_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown(self, client):
        resp = await client.delete("/games/nope")
        assert resp.status_code == 404


class TestHighScore:
    @pytest.mark.asyncio
    async def test_default_zero(self, client):
        resp = await client.get("/high-score")
        assert resp.status_code == 200
        assert resp.json() == {"high_score": 0}


class TestResetAfterGameOver:
    @pytest.mark.asyncio
    async def test_reset_during_final_publish_keeps_ticking(self):
        manager = GameManager(GameConfig(initial_speed=100.0, seed=0))
        game = manager.create_game()
        publishing = asyncio.Event()
        release = asyncio.Event()

        async def on_state(state: dict) -> None:
            if state["game_over"]:
                publishing.set()
                await release.wait()

        game.loop.on_state = on_state
        game.engine.state = GameState(
            snake=((5, 5), (6, 5), (7, 5)),
            direction=Direction.RIGHT,
            food=(15, 15),
            speed=100.0,
        )
        try:
            await asyncio.wait_for(publishing.wait(), timeout=2.0)
            state = await manager.handle_input(game.game_id, action="reset")
            assert state["game_over"] is False
            release.set()
            await asyncio.sleep(0.2)

            assert game.loop.running
            assert not game.engine.game_over
            assert game.engine.state.tick >= 1
        finally:
            release.set()
            await manager.cleanup()
