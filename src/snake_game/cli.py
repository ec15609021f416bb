"""Command-line launcher for the snake game."""

from __future__ import annotations

import argparse
import json
import logging
import sys

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_STORE = "snake_scores.json"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-game",
        description="Snake game server, headless simulator, and score tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser("simulate", help="Run a headless game.")
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument("--ticks", type=int, default=500)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--cols", type=int, default=None)
    sim_p.add_argument("--rows", type=int, default=None)
    sim_p.add_argument(
        "--turn-probability", type=float, default=0.2,
        help="Chance of a random direction change before each tick.",
    )
    sim_p.add_argument(
        "--store", type=str, default=None,
        help="JSON file to persist the high score in.",
    )

    # --- high-score ---
    hs_p = sub.add_parser("high-score", help="Show or reset the high score.")
    hs_p.add_argument("--store", type=str, default=DEFAULT_STORE)
    hs_p.add_argument("--reset", action="store_true")

    # --- config ---
    cfg_p = sub.add_parser("config", help="Print or write a game config.")
    cfg_p.add_argument("--config", type=str, default=None)
    cfg_p.add_argument(
        "--classic", action="store_true",
        help="Start from the classic preset instead of the defaults.",
    )
    cfg_p.add_argument("--output", type=str, default=None)

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the HTTP/WebSocket server.")
    serve_p.add_argument("--host", type=str, default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)
    serve_p.add_argument("--config", type=str, default=None)
    serve_p.add_argument("--store", type=str, default=DEFAULT_STORE)

    return parser


def _load_config(path: str | None):
    from snake_game.config import GameConfig

    return GameConfig.load(path) if path else GameConfig()


def _tracker(path: str | None):
    from snake_game.storage import HighScoreTracker, JsonFileStore, MemoryStore

    store = JsonFileStore(path) if path else MemoryStore()
    return HighScoreTracker(store)


def _run_simulate(args: argparse.Namespace) -> int:
    from snake_game.engine import GameEngine
    from snake_game.snake import Direction

    config = _load_config(args.config).replace(cols=args.cols, rows=args.rows)
    engine = GameEngine(config, high_scores=_tracker(args.store), seed=args.seed)
    turns = np.random.default_rng(args.seed)
    directions = list(Direction)

    ticks = 0
    for ticks in range(1, args.ticks + 1):
        if turns.random() < args.turn_probability:
            engine.set_direction(directions[int(turns.integers(len(directions)))])
        engine.step()
        if engine.game_over:
            break

    final = engine.state
    # Records the score of a run the tick budget cut short.
    engine.reset()
    print(json.dumps({  # noqa: T201
        "ticks": ticks,
        "runs": engine.runs - 1,
        "score": final.score,
        "length": len(final.snake),
        "game_over": final.terminated,
        "high_score": engine.high_score,
    }, indent=2))
    return 0


def _run_high_score(args: argparse.Namespace) -> int:
    tracker = _tracker(args.store)
    if args.reset:
        tracker.reset()
        logger.info("High score in %s reset.", args.store)
    print(tracker.value)  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    from snake_game.config import GameConfig

    config = GameConfig.classic() if args.classic else _load_config(args.config)
    if args.output:
        config.save(args.output)
    else:
        print(json.dumps(config.to_dict(), indent=2))  # noqa: T201
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from snake_game.server.app import create_app
    from snake_game.storage import JsonFileStore

    app = create_app(_load_config(args.config), JsonFileStore(args.store))
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-game`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "high-score": _run_high_score,
        "config": _run_config,
        "serve": _run_serve,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
