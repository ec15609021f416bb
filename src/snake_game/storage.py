"""Key-value persistence and high-score tracking."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "high_score"


class KeyValueStore(Protocol):
    """Minimal string store the game persists into."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store, mainly for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store backed by a single JSON object on disk.

    The file is re-read on every ``get`` and rewritten on every ``set``;
    the game touches it at most once per run.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        raw = json.loads(self.path.read_text())
        if not isinstance(raw, dict):
            raise ValueError(f"{self.path} does not contain a JSON object.")
        return raw

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))


class HighScoreTracker:
    """Best score across runs, persisted through a :class:`KeyValueStore`.

    The stored value is read once at construction. Unreadable or
    non-numeric values count as zero.
    """

    def __init__(self, store: KeyValueStore, key: str = HIGH_SCORE_KEY) -> None:
        self.store = store
        self.key = key
        self.value = self._load()

    def _load(self) -> int:
        try:
            raw = self.store.get(self.key)
        except (OSError, ValueError):
            logger.warning("Could not read %r from store; assuming 0.", self.key)
            return 0
        if raw is None:
            return 0
        try:
            return max(0, int(raw))
        except ValueError:
            logger.warning("Ignoring non-numeric high score %r.", raw)
            return 0

    def record(self, score: int) -> bool:
        """Persist *score* if it beats the best so far. Returns True if it did."""
        if score <= self.value:
            return False
        self.store.set(self.key, str(score))
        logger.info("New high score %d (previous %d).", score, self.value)
        self.value = score
        return True

    def reset(self) -> None:
        """Clear the stored high score."""
        self.store.set(self.key, "0")
        self.value = 0
