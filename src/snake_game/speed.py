"""Tick-rate policies: how fast the game runs as the score climbs."""

from __future__ import annotations

import enum


class SpeedPolicy(str, enum.Enum):
    """Named rules mapping a score to ticks per second."""

    LINEAR = "linear"
    STEPPED = "stepped"


def speed_for_score(
    score: int,
    initial_speed: float,
    policy: SpeedPolicy = SpeedPolicy.LINEAR,
    increment: float = 0.5,
    step_every: int = 5,
    max_speed: float | None = None,
) -> float:
    """Return the tick rate for a run that has reached *score*.

    ``LINEAR`` adds *increment* per food eaten. ``STEPPED`` adds one tick
    per second for every *step_every* points.
    """
    policy = SpeedPolicy(policy)
    if policy is SpeedPolicy.LINEAR:
        speed = initial_speed + increment * score
    else:
        speed = initial_speed + score // step_every
    if max_speed is not None:
        speed = min(speed, max_speed)
    return float(speed)
