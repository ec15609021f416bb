"""Async fixed-tick scheduler driving a :class:`GameEngine`."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from snake_game.engine import GameEngine

logger = logging.getLogger(__name__)

StateCallback = Callable[[dict], Awaitable[None]]

# Poll interval while paused, so resuming takes effect promptly.
_PAUSED_POLL = 0.05


class GameLoop:
    """Calls :meth:`GameEngine.step` once every ``1 / speed`` seconds.

    The interval is re-read each tick, so the loop speeds up as the
    snake eats. While paused no tick is taken. The loop ends after a
    terminal tick unless the engine restarts runs automatically.
    Engine access from input handlers must hold :attr:`lock`.
    """

    def __init__(
        self,
        engine: GameEngine,
        on_state: StateCallback | None = None,
    ) -> None:
        self.engine = engine
        self.on_state = on_state
        self.lock = asyncio.Lock()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the tick loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the tick loop and wait for it to finish."""
        task = self._task
        if task is None:
            return
        if not task.done():
            task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    async def wait(self) -> None:
        """Wait for the loop to end on its own."""
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        try:
            while not self.engine.game_over:
                if not self.engine.running:
                    await asyncio.sleep(_PAUSED_POLL)
                    continue
                await asyncio.sleep(1.0 / self.engine.state.speed)
                async with self.lock:
                    if not self.engine.running:
                        continue
                    state = self.engine.step()
                await self._publish(state)
            logger.info("Game loop finished after tick %d.", self.engine.state.tick)
        except asyncio.CancelledError:
            logger.info("Game loop cancelled.")
            raise
        except Exception:
            logger.exception("Game loop error.")
            raise

    async def _publish(self, state: dict) -> None:
        if self.on_state is not None:
            await self.on_state(state)
