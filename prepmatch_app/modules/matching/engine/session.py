"""
Matching Session
================
One immutable value holding everything a running game knows: column
orders, pending selections, resolved and flagged entities, the
recent-match animation set, stats and the feedback banner.

Every transition is a pure function ``(Session, ...) -> Session`` so the
engine can be replayed and tested without timers or a UI.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from ..exceptions import InvalidColumnError
from ..logics.scoring import is_completed
from ..schemas import EntityId, Feedback, MatchResult, MatchStatus, SessionStats


@dataclass(frozen=True)
class Session:
    generation: int
    column_count: int
    active_ids: Tuple[EntityId, ...]
    column_orders: Tuple[Tuple[EntityId, ...], ...]
    seed: Optional[float] = None
    pending: Tuple[Optional[EntityId], ...] = ()
    correct_ids: FrozenSet[EntityId] = frozenset()
    incorrect_marks: Mapping[EntityId, int] = field(default_factory=dict)  # id -> attempt that flagged it
    recent_matches: FrozenSet[EntityId] = frozenset()
    stats: SessionStats = field(default_factory=SessionStats)
    feedback: Optional[Feedback] = None
    active_index: FrozenSet[EntityId] = frozenset()

    # ── queries ──────────────────────────────────────────────────────

    def contains(self, entity_id: EntityId) -> bool:
        return entity_id in self.active_index

    def status_of(self, entity_id: EntityId) -> MatchStatus:
        """Match state of an entity, ignoring pending selections."""
        if entity_id in self.correct_ids:
            return MatchStatus.CORRECT
        if entity_id in self.incorrect_marks:
            return MatchStatus.INCORRECT
        return MatchStatus.UNMATCHED

    @property
    def match_state(self) -> Dict[EntityId, MatchStatus]:
        """Entities that are not plain 'unmatched'."""
        state = {entity_id: MatchStatus.INCORRECT for entity_id in self.incorrect_marks}
        state.update({entity_id: MatchStatus.CORRECT for entity_id in self.correct_ids})
        return state

    @property
    def completed(self) -> bool:
        return is_completed(len(self.correct_ids), len(self.active_ids))

    @property
    def all_pending(self) -> bool:
        return all(slot is not None for slot in self.pending)


def _empty_slots(column_count: int) -> Tuple[None, ...]:
    return (None,) * column_count


def start_session(
    active_ids: Sequence[EntityId],
    column_orders: Sequence[Sequence[EntityId]],
    generation: int,
    seed: Optional[float] = None,
) -> Session:
    """Fresh session: empty slots, nothing matched, zeroed stats."""
    column_count = len(column_orders)
    return Session(
        generation=generation,
        column_count=column_count,
        active_ids=tuple(active_ids),
        column_orders=tuple(tuple(order) for order in column_orders),
        seed=seed,
        pending=_empty_slots(column_count),
        active_index=frozenset(active_ids),
    )


def select(
    session: Session,
    column: int,
    entity_id: EntityId,
    allow_reselect_incorrect: bool = True,
    clear_incorrect_on_select: bool = False,
) -> Tuple[Session, Optional[MatchResult]]:
    """
    Toggle *entity_id* in the pending slot of *column*.

    When every column then holds a selection, the tuple is verified in the
    same step and all slots return to empty whatever the outcome.

    Returns:
        ``(session, result)``; ``result`` is ``None`` unless a tuple was
        verified. Selecting an entity outside the active set, or one that is
        already resolved, leaves the session untouched.

    Raises:
        InvalidColumnError: *column* is not in ``0..column_count-1``.
    """
    if isinstance(column, bool) or not isinstance(column, int) or not 0 <= column < session.column_count:
        raise InvalidColumnError(column, session.column_count)

    if not session.contains(entity_id) or entity_id in session.correct_ids:
        return session, None
    if not allow_reselect_incorrect and entity_id in session.incorrect_marks:
        return session, None

    if clear_incorrect_on_select and session.incorrect_marks:
        session = replace(session, incorrect_marks={})

    pending = list(session.pending)
    pending[column] = None if pending[column] == entity_id else entity_id
    session = replace(session, pending=tuple(pending))

    if not session.all_pending:
        return session, None
    return verify(session, tuple(pending))


def verify(session: Session, ids: Sequence[EntityId]) -> Tuple[Session, MatchResult]:
    """
    Judge one selection per column: correct only when every id is the same
    and that id is not already resolved.

    Either way ``attempts`` goes up by one and the slots are emptied. A
    correct tuple resolves the id and adds it to the recent-match set; a
    wrong one flags every id of the tuple as incorrect (resolved ids are
    never downgraded).
    """
    ids = tuple(ids)
    attempt = session.stats.attempts + 1
    first = ids[0]
    correct = all(entity_id == first for entity_id in ids) and first not in session.correct_ids

    if correct:
        marks = {k: v for k, v in session.incorrect_marks.items() if k != first}
        session = replace(
            session,
            correct_ids=session.correct_ids | {first},
            incorrect_marks=marks,
            recent_matches=session.recent_matches | {first},
            stats=SessionStats(attempts=attempt, correct=session.stats.correct + 1),
        )
    else:
        marks = dict(session.incorrect_marks)
        for entity_id in ids:
            if entity_id not in session.correct_ids:
                marks[entity_id] = attempt
        session = replace(
            session,
            incorrect_marks=marks,
            stats=SessionStats(attempts=attempt, correct=session.stats.correct),
        )

    session = replace(
        session,
        pending=_empty_slots(session.column_count),
        feedback=Feedback(correct=correct, ids=ids, attempt=attempt),
    )
    return session, MatchResult(ids=ids, correct=correct, attempt=attempt, completed=session.completed)


def clear_incorrect(session: Session, ids: Iterable[EntityId], attempt: int) -> Session:
    """Drop the incorrect flags that *attempt* set; later flags on the same ids stay."""
    marks = dict(session.incorrect_marks)
    changed = False
    for entity_id in ids:
        if marks.get(entity_id) == attempt:
            del marks[entity_id]
            changed = True
    return replace(session, incorrect_marks=marks) if changed else session


def clear_recent(session: Session, entity_id: EntityId) -> Session:
    if entity_id not in session.recent_matches:
        return session
    return replace(session, recent_matches=session.recent_matches - {entity_id})


def clear_feedback(session: Session, attempt: int) -> Session:
    """Remove the banner only if it still belongs to *attempt*."""
    if session.feedback is None or session.feedback.attempt != attempt:
        return session
    return replace(session, feedback=None)
