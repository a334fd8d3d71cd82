"""
Transient Feedback Scheduler
============================
Deferred callbacks for the time-bounded parts of a game: clearing an
incorrect highlight, hiding the feedback banner, ending the
recent-match animation and firing the completion celebration.

Timers are cooperative. Nothing runs on a thread; the owner calls
``run_due()`` before handling each event (and before rendering), and
every timer whose delay has elapsed fires then, in due order.

Each timer is tagged with the scheduler *generation* current when it
was created. ``invalidate()`` bumps the generation, so a timer created
for a session that has since been reset can never touch the new one.
"""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from prepmatch_app.core.logging_config import get_logger

logger = get_logger('prepmatch.matching.scheduler')

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(order=True)
class ScheduledTimer:
    due_at: float
    seq: int
    generation: int = field(compare=False)
    label: str = field(compare=False)
    action: Callable[[], None] = field(compare=False, repr=False)


class FeedbackScheduler:
    """Generation-tagged timer queue driven by an injectable millisecond clock."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or monotonic_ms
        self._generation = 0
        self._queue: List[ScheduledTimer] = []
        self._counter = itertools.count()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> int:
        """Timers of the current generation still waiting to fire."""
        return sum(1 for timer in self._queue if timer.generation == self._generation)

    def now(self) -> float:
        return self._clock()

    def schedule(self, delay_ms: float, action: Callable[[], None], label: str = '') -> ScheduledTimer:
        """Run *action* once ``delay_ms`` has elapsed, unless the generation moves on first."""
        timer = ScheduledTimer(
            due_at=self.now() + max(delay_ms, 0),
            seq=next(self._counter),
            generation=self._generation,
            label=label,
            action=action,
        )
        heapq.heappush(self._queue, timer)
        return timer

    def invalidate(self) -> int:
        """
        Start a new generation; every timer scheduled so far becomes a no-op.

        Stale timers stay queued and are discarded when they come due.
        """
        self._generation += 1
        return self._generation

    def run_due(self, now: Optional[float] = None) -> int:
        """
        Fire every timer due at *now* (default: the clock), oldest first.

        Timers scheduled by a fired action are picked up in the same pass
        when they are already due.

        Returns:
            Number of timers whose action ran.
        """
        now = self.now() if now is None else now
        fired = 0
        while self._queue and self._queue[0].due_at <= now:
            timer = heapq.heappop(self._queue)
            if timer.generation != self._generation:
                logger.debug("Suppressed stale timer %s (generation %d != %d)",
                             timer.label, timer.generation, self._generation)
                continue
            timer.action()
            fired += 1
        return fired

    def next_due(self) -> Optional[float]:
        """Due time of the earliest live timer, or ``None``."""
        live = [timer.due_at for timer in self._queue if timer.generation == self._generation]
        return min(live) if live else None
