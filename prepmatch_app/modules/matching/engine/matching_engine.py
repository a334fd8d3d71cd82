"""
Matching Engine
===============
Stateful facade over one matching game.

It owns the current ``Session`` value, the feedback scheduler, the clock
and the collaborators (celebration, column value extractor), and exposes
the three commands the presentation layer needs: ``select``, ``reset``
and ``set_filter``.

Lifecycle::

    engine = MatchingEngine(catalog, GameConfig.for_columns(3, theme='royal'))
    result = engine.select(0, '8')      # None until every column holds a pick
    engine.tick()                        # apply elapsed timers
    engine.snapshot()                    # JSON-ready view
"""

from __future__ import annotations

import random
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from prepmatch_app.core.logging_config import get_logger
from prepmatch_app.core.signals import match_attempted, session_reset

from ..exceptions import InvalidColumnError
from ..logics import dataset, shuffle
from ..schemas import (
    SHUFFLE_SEEDED,
    ColumnEntry,
    Entity,
    EntityId,
    Feedback,
    FilterPredicate,
    GameConfig,
    MatchResult,
    MatchStatus,
    SessionStats,
)
from ..services.celebration_service import CelebrationService
from . import session as transitions
from .scheduler import Clock, FeedbackScheduler
from .session import Session

logger = get_logger('prepmatch.matching.engine')

ColumnExtractor = Callable[[Entity, int], Any]


def default_extractor(entity: Entity, column: int) -> Any:
    return entity.value(column)


class MatchingEngine:
    """One running matching game (pair, triple or wider)."""

    def __init__(
        self,
        catalog: Sequence[Entity],
        config: Optional[GameConfig] = None,
        predicate: Optional[FilterPredicate] = None,
        celebrator: Any = None,
        clock: Optional[Clock] = None,
        extractor: Optional[ColumnExtractor] = None,
        game_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self.game_id = game_id or uuid.uuid4().hex
        self._catalog: Tuple[Entity, ...] = dataset.validate_catalog(catalog, self.config.column_count)
        self._predicate: FilterPredicate = dataset.normalize_predicate(predicate)
        self._extractor = extractor or default_extractor
        self._celebrator = celebrator or CelebrationService(self.game_id)
        self._scheduler = FeedbackScheduler(clock)
        self._rng = rng
        self._session = self._build_session()
        logger.info(
            "Game %s started: %d column(s), %d/%d entities active",
            self.game_id, self.config.column_count, len(self._session.active_ids), len(self._catalog),
        )

    # ── commands ─────────────────────────────────────────────────────

    def select(self, column: int, entity_id: EntityId) -> Optional[MatchResult]:
        """
        Toggle a pending selection; verify once every column holds one.

        Selecting an id outside the active set is a no-op (the caller may
        be reacting to a list from before a filter change).
        """
        self.tick()
        before = self._session
        after, result = transitions.select(
            before,
            column,
            entity_id,
            allow_reselect_incorrect=self.config.allow_reselect_incorrect,
            clear_incorrect_on_select=self.config.clear_incorrect_on_select,
        )
        if after is before:
            logger.debug("Game %s: ignored selection of %r in column %d", self.game_id, entity_id, column)
            return None

        self._session = after
        if result is not None:
            self._after_verify(result)
        return result

    def reset(self) -> None:
        """Throw the session away: new shuffle, no matches, zeroed stats."""
        self._restart('reset')

    def set_filter(self, predicate: Optional[FilterPredicate]) -> None:
        """Replace the active predicate; always a full reset."""
        self._predicate = dataset.normalize_predicate(predicate)
        self._restart('filter')

    def set_catalog(self, catalog: Sequence[Entity]) -> None:
        """Swap the catalog (e.g. another topic variant); always a full reset."""
        self._catalog = dataset.validate_catalog(catalog, self.config.column_count)
        self._restart('catalog')

    def tick(self) -> int:
        """Apply every timer whose delay has elapsed."""
        return self._scheduler.run_due()

    # ── views ────────────────────────────────────────────────────────

    @property
    def session(self) -> Session:
        self.tick()
        return self._session

    @property
    def generation(self) -> int:
        return self._session.generation

    @property
    def seed(self) -> Optional[float]:
        return self._session.seed

    @property
    def predicate(self) -> FilterPredicate:
        return dict(self._predicate)

    @property
    def catalog(self) -> Tuple[Entity, ...]:
        return self._catalog

    @property
    def active_set(self) -> Tuple[Entity, ...]:
        return tuple(self._entities[entity_id] for entity_id in self._session.active_ids)

    @property
    def stats(self) -> SessionStats:
        return self.session.stats

    @property
    def accuracy(self) -> int:
        return self.stats.accuracy

    @property
    def completed(self) -> bool:
        return self.session.completed

    @property
    def feedback(self) -> Optional[Feedback]:
        return self.session.feedback

    @property
    def pending_timers(self) -> int:
        return self._scheduler.pending

    def status(self, column: int, entity_id: EntityId) -> MatchStatus:
        """Visual status of an entity as shown in *column*."""
        self._check_column(column)
        return self._status_in(self.session, column, entity_id)

    def column_view(self, column: int) -> List[ColumnEntry]:
        self._check_column(column)
        return self._entries(self.session, column)

    def columns(self) -> List[List[ColumnEntry]]:
        current = self.session
        return [self._entries(current, column) for column in range(self.config.column_count)]

    def filter_options(self) -> Dict[str, List[Any]]:
        return {
            name: dataset.filter_options(self._catalog, name)
            for name in dataset.filter_fields(self._catalog)
        }

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready picture of the game for the presentation layer."""
        current = self.session
        return {
            'game_id': self.game_id,
            'generation': current.generation,
            'theme': self.config.theme,
            'seed': current.seed,
            'columns': [
                {
                    'label': self.config.label(column),
                    'entries': [entry.to_dict() for entry in self._entries(current, column)],
                }
                for column in range(self.config.column_count)
            ],
            'stats': current.stats.to_dict(),
            'completed': current.completed,
            'feedback': current.feedback.to_dict() if current.feedback else None,
            'filters': self.predicate,
            'filter_options': self.filter_options(),
            'active_count': len(current.active_ids),
        }

    # ── internals ────────────────────────────────────────────────────

    def _build_session(self) -> Session:
        active = dataset.apply_filter(self._catalog, self._predicate)
        self._entities: Dict[EntityId, Entity] = {entity.id: entity for entity in active}
        ids = [entity.id for entity in active]

        seed = None
        if self.config.shuffle == SHUFFLE_SEEDED:
            seed = self.config.seed if self.config.seed is not None else shuffle.draw_seed()
        orders = shuffle.column_orders(
            ids, self.config.column_count, strategy=self.config.shuffle, seed=seed, rng=self._rng,
        )
        return transitions.start_session(ids, orders, generation=self._scheduler.generation, seed=seed)

    def _restart(self, reason: str) -> None:
        generation = self._scheduler.invalidate()
        self._session = self._build_session()
        logger.info(
            "Game %s %s: generation %d, %d entities active",
            self.game_id, reason, generation, len(self._session.active_ids),
        )
        session_reset.send(self.game_id, game_id=self.game_id, reason=reason, generation=generation)

    def _after_verify(self, result: MatchResult) -> None:
        match_attempted.send(
            self.game_id,
            game_id=self.game_id,
            correct=result.correct,
            ids=result.ids,
            attempts=result.attempt,
        )

        attempt = result.attempt
        self._scheduler.schedule(
            self.config.feedback_delay_ms,
            lambda: self._apply(transitions.clear_feedback(self._session, attempt)),
            label=f'feedback#{attempt}',
        )

        if not result.correct:
            ids = result.ids
            self._scheduler.schedule(
                self.config.incorrect_delay_ms,
                lambda: self._apply(transitions.clear_incorrect(self._session, ids, attempt)),
                label=f'incorrect#{attempt}',
            )
            return

        entity_id = result.ids[0]
        self._celebrate('celebrate_match', self.config.theme, entity_id)
        self._scheduler.schedule(
            self.config.recent_match_ms,
            lambda: self._apply(transitions.clear_recent(self._session, entity_id)),
            label=f'recent#{attempt}',
        )

        if result.completed:
            logger.info("Game %s completed in %d attempt(s)", self.game_id, attempt)
            self._scheduler.schedule(
                self.config.completion_delay_ms,
                lambda: self._celebrate('celebrate_completion', self.config.theme, self._session.stats),
                label='completion',
            )

    @staticmethod
    def _status_in(current: Session, column: int, entity_id: EntityId) -> MatchStatus:
        status = current.status_of(entity_id)
        if status is not MatchStatus.UNMATCHED:
            return status
        if current.pending[column] == entity_id:
            return MatchStatus.SELECTED
        return MatchStatus.UNMATCHED

    def _entries(self, current: Session, column: int) -> List[ColumnEntry]:
        """Column entries computed from one session value, without ticking."""
        order = list(current.column_orders[column])
        if self.config.sink_resolved:
            settled = {
                entity_id for entity_id in current.correct_ids
                if entity_id not in current.recent_matches
            }
            order = [i for i in order if i not in settled] + [i for i in order if i in settled]
        return [
            ColumnEntry(
                entity_id=entity_id,
                value=self._extractor(self._entities[entity_id], column),
                status=self._status_in(current, column, entity_id),
            )
            for entity_id in order
        ]

    def _check_column(self, column: int) -> None:
        if isinstance(column, bool) or not isinstance(column, int) or not 0 <= column < self.config.column_count:
            raise InvalidColumnError(column, self.config.column_count)

    def _apply(self, session: Session) -> None:
        self._session = session

    def _celebrate(self, method: str, *args) -> None:
        try:
            getattr(self._celebrator, method)(*args)
        except Exception:
            logger.exception("Game %s: celebration %s failed", self.game_id, method)
