# File: prepmatch_app/modules/matching/services/game_registry.py
"""
In-process store of running games for the HTTP layer.

Each game gets its own lock so an engine only ever sees one event at a
time, even under a threaded WSGI server.
"""

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from prepmatch_app.core.logging_config import get_logger

from ..engine.matching_engine import MatchingEngine
from ..exceptions import GameLimitReachedError, GameNotFoundError

logger = get_logger('prepmatch.matching.registry')


@dataclass
class _GameSlot:
    engine: MatchingEngine
    last_access: float
    lock: threading.Lock = field(default_factory=threading.Lock)


class GameRegistry:
    """Thread-safe ``game_id -> MatchingEngine`` map with idle pruning."""

    def __init__(self, idle_timeout_minutes: float = 30, max_games: int = 500,
                 clock: Optional[Callable[[], float]] = None):
        self.idle_timeout_seconds = idle_timeout_minutes * 60
        self.max_games = max_games
        self._clock = clock or time.monotonic
        self._games: Dict[str, _GameSlot] = {}
        self._lock = threading.Lock()

    def configure(self, idle_timeout_minutes: float = None, max_games: int = None) -> None:
        if idle_timeout_minutes is not None:
            self.idle_timeout_seconds = idle_timeout_minutes * 60
        if max_games is not None:
            self.max_games = max_games

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, game_id: str) -> bool:
        return game_id in self._games

    def add(self, engine: MatchingEngine) -> str:
        with self._lock:
            if len(self._games) >= self.max_games:
                raise GameLimitReachedError(self.max_games)
            self._games[engine.game_id] = _GameSlot(engine=engine, last_access=self._clock())
        return engine.game_id

    @contextmanager
    def checkout(self, game_id: str) -> Iterator[MatchingEngine]:
        """Hold the game's lock for the duration of one request."""
        with self._lock:
            slot = self._games.get(game_id)
            if slot is None:
                raise GameNotFoundError(game_id)
            slot.last_access = self._clock()
        with slot.lock:
            yield slot.engine

    def remove(self, game_id: str) -> None:
        with self._lock:
            if self._games.pop(game_id, None) is None:
                raise GameNotFoundError(game_id)

    def tick_all(self) -> int:
        """
        Run due timers of every game, each under its own lock.

        Lets transient state and the completion celebration land when no
        request follows the last selection.

        Returns:
            Number of timer actions fired across all games.
        """
        with self._lock:
            slots = list(self._games.values())
        fired = 0
        for slot in slots:
            with slot.lock:
                fired += slot.engine.tick()
        return fired

    def prune_idle(self) -> List[str]:
        """Drop games untouched for longer than the idle timeout."""
        cutoff = self._clock() - self.idle_timeout_seconds
        with self._lock:
            stale = [game_id for game_id, slot in self._games.items() if slot.last_access < cutoff]
            for game_id in stale:
                del self._games[game_id]
        if stale:
            logger.info("Pruned %d idle game(s)", len(stale))
        return stale

    def clear(self) -> None:
        with self._lock:
            self._games.clear()


game_registry = GameRegistry()
