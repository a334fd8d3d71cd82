"""
Scenario tests for MatchingEngine: selection flow, timers, reset and
filter semantics, views.
"""

import logging

import pytest

from prepmatch_app.core.signals import match_attempted, session_reset
from prepmatch_app.modules.matching.engine.matching_engine import MatchingEngine
from prepmatch_app.modules.matching.exceptions import InvalidColumnError, InvalidDatasetError
from prepmatch_app.modules.matching.schemas import GameConfig, MatchStatus, SessionStats

from conftest import RecordingCelebrator, entity


def match(engine, *ids):
    result = None
    for column, entity_id in enumerate(ids):
        result = engine.select(column, entity_id)
    return result


class TestPairScenario:

    def test_full_game(self, make_engine, pair_catalog, clock, celebrator):
        engine = make_engine(pair_catalog)

        assert engine.select(0, 'A') is None
        result = engine.select(1, 'A')
        assert result.correct is True
        assert (engine.stats.attempts, engine.stats.correct) == (1, 1)
        assert engine.feedback.message == 'Correct!'
        assert celebrator.matches == [('general', 'A')]

        result = match(engine, 'B', 'C')
        assert result.correct is False
        assert (engine.stats.attempts, engine.stats.correct) == (2, 1)
        assert engine.status(0, 'B') is MatchStatus.INCORRECT
        assert engine.status(1, 'C') is MatchStatus.INCORRECT

        clock.advance(1499)
        assert engine.status(0, 'B') is MatchStatus.INCORRECT
        clock.advance(1)
        assert engine.status(0, 'B') is MatchStatus.UNMATCHED
        assert engine.status(1, 'C') is MatchStatus.UNMATCHED

        match(engine, 'B', 'B')
        assert (engine.stats.attempts, engine.stats.correct) == (3, 2)
        result = match(engine, 'C', 'C')
        assert result.completed is True
        assert engine.completed is True
        assert (engine.stats.attempts, engine.stats.correct) == (4, 3)
        assert engine.accuracy == 75

        assert celebrator.completions == []
        clock.advance(499)
        engine.tick()
        assert celebrator.completions == []
        clock.advance(1)
        engine.tick()
        assert celebrator.completions == [('general', SessionStats(attempts=4, correct=3))]

        clock.advance(10000)
        engine.tick()
        assert len(celebrator.completions) == 1

    def test_feedback_banner_clears_after_delay(self, make_engine, pair_catalog, clock):
        engine = make_engine(pair_catalog)
        match(engine, 'A', 'B')
        assert engine.feedback.message == 'Try again'
        clock.advance(1999)
        assert engine.feedback is not None
        clock.advance(1)
        assert engine.feedback is None

    def test_newer_feedback_survives_older_timer(self, make_engine, pair_catalog, clock):
        engine = make_engine(pair_catalog)
        match(engine, 'A', 'B')
        clock.advance(1500)
        match(engine, 'C', 'C')
        clock.advance(500)      # first banner's timer is due now
        assert engine.feedback.correct is True
        assert engine.feedback.attempt == 2

    def test_recent_match_window(self, make_engine, pair_catalog, clock):
        engine = make_engine(pair_catalog)
        match(engine, 'A', 'A')
        assert 'A' in engine.session.recent_matches
        clock.advance(1000)
        assert engine.session.recent_matches == frozenset()

    def test_correct_entity_stays_correct(self, make_engine, pair_catalog, clock):
        engine = make_engine(pair_catalog)
        match(engine, 'A', 'A')
        clock.advance(60000)
        assert engine.status(0, 'A') is MatchStatus.CORRECT
        assert engine.select(0, 'A') is None
        assert engine.session.pending == (None, None)


class TestTripleScenario:

    def test_every_id_of_a_wrong_triple_is_flagged(self, make_engine, triple_catalog, clock):
        engine = make_engine(triple_catalog, columns=3)
        result = match(engine, 'A', 'B', 'C')
        assert result.correct is False
        for column in range(3):
            for entity_id in ('A', 'B', 'C'):
                assert engine.status(column, entity_id) is MatchStatus.INCORRECT

        clock.advance(1500)
        assert engine.status(0, 'A') is MatchStatus.INCORRECT
        clock.advance(1500)
        assert engine.status(0, 'A') is MatchStatus.UNMATCHED

    def test_triple_completion(self, make_engine, triple_catalog, celebrator):
        engine = make_engine(triple_catalog, columns=3, theme='royal')
        for entity_id in ('A', 'B', 'C'):
            assert match(engine, entity_id, entity_id, entity_id).correct is True
        assert engine.completed is True
        assert engine.accuracy == 100
        assert [theme for theme, _ in celebrator.matches] == ['royal'] * 3


class TestResetAndFilter:

    def test_reset_zeroes_everything(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog)
        match(engine, 'A', 'A')
        engine.select(0, 'B')
        engine.reset()

        session = engine.session
        assert session.generation == 1
        assert session.stats == SessionStats()
        assert session.correct_ids == frozenset()
        assert session.pending == (None, None)
        assert session.feedback is None
        assert engine.pending_timers == 0

    def test_stale_incorrect_timer_cannot_touch_new_session(self, make_engine, pair_catalog, clock):
        engine = make_engine(pair_catalog)
        match(engine, 'A', 'B')         # generation 0, attempt 1, clears at t=1500
        engine.reset()

        clock.advance(1000)
        match(engine, 'A', 'B')         # generation 1, attempt 1, clears at t=2500
        clock.advance(500)
        assert engine.status(0, 'A') is MatchStatus.INCORRECT
        clock.advance(1000)
        assert engine.status(0, 'A') is MatchStatus.UNMATCHED

    def test_completion_celebration_dropped_by_reset(self, make_engine, pair_catalog, clock, celebrator):
        engine = make_engine(pair_catalog)
        for entity_id in ('A', 'B', 'C'):
            match(engine, entity_id, entity_id)
        engine.reset()
        clock.advance(5000)
        engine.tick()
        assert celebrator.completions == []

    def test_filter_narrows_active_set(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog)
        match(engine, 'A', 'A')

        engine.set_filter({'category': 'History'})
        assert [e.id for e in engine.active_set] == ['A', 'B']
        assert engine.predicate == {'category': 'History'}
        assert engine.stats.attempts == 0
        assert engine.generation == 1
        assert engine.select(0, 'C') is None
        assert engine.session.pending == (None, None)

        for entity_id in ('A', 'B'):
            match(engine, entity_id, entity_id)
        assert engine.completed is True

    def test_filter_fields_are_anded(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, predicate={'category': 'History', 'region': 'England'})
        assert [e.id for e in engine.active_set] == ['A']

    def test_all_sentinel_clears_filter(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, predicate={'region': 'Scotland'})
        engine.set_filter({'region': 'all'})
        assert engine.predicate == {}
        assert len(engine.active_set) == 3

    def test_same_filter_still_resets(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, predicate={'category': 'History'})
        match(engine, 'A', 'A')
        engine.set_filter({'category': 'History'})
        assert engine.stats.attempts == 0

    def test_empty_active_set(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, predicate={'category': 'Science'})
        assert engine.active_set == ()
        assert engine.completed is False
        assert engine.accuracy == 0
        assert engine.columns() == [[], []]

    def test_set_catalog(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog)
        match(engine, 'A', 'A')
        engine.set_catalog([entity('X', 'x1', 'x2'), entity('Y', 'y1', 'y2')])
        assert [e.id for e in engine.active_set] == ['X', 'Y']
        assert engine.stats.attempts == 0

        with pytest.raises(InvalidDatasetError):
            engine.set_catalog([entity('X', 'x1', 'x2'), entity('X', 'x1', 'x2')])

    def test_reset_signal(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog)
        received = []

        def listener(sender, **kwargs):
            received.append(kwargs)

        with session_reset.connected_to(listener, sender=engine.game_id):
            engine.set_filter({'region': 'England'})
        assert received == [{'game_id': engine.game_id, 'reason': 'filter', 'generation': 1}]


class TestViews:

    def test_status_priority(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog)
        engine.select(0, 'A')
        assert engine.status(0, 'A') is MatchStatus.SELECTED
        assert engine.status(1, 'A') is MatchStatus.UNMATCHED

        engine.select(1, 'B')           # A, B flagged
        engine.select(0, 'B')           # reselect a flagged id
        assert engine.status(0, 'B') is MatchStatus.INCORRECT

    def test_reselect_incorrect_disabled(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, allow_reselect_incorrect=False)
        match(engine, 'A', 'B')
        assert engine.select(0, 'A') is None
        assert engine.session.pending == (None, None)

    def test_invalid_column(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog)
        with pytest.raises(InvalidColumnError):
            engine.select(2, 'A')
        with pytest.raises(InvalidColumnError):
            engine.status(-1, 'A')

    def test_unknown_id_is_ignored(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog)
        assert engine.select(0, 'Z') is None
        assert engine.session.pending == (None, None)

    def test_each_column_is_a_permutation(self, make_engine, triple_catalog):
        engine = make_engine(triple_catalog, columns=3)
        for column in engine.columns():
            assert sorted(entry.entity_id for entry in column) == ['A', 'B', 'C']

    def test_column_values_come_from_their_column(self, make_engine, triple_catalog):
        engine = make_engine(triple_catalog, columns=3)
        entries = {entry.entity_id: entry.value for entry in engine.column_view(2)}
        assert entries == {'A': 'a3', 'B': 'b3', 'C': 'c3'}

    def test_sink_resolved(self, make_engine, pair_catalog, clock):
        engine = make_engine(pair_catalog, sink_resolved=True)
        original = [entry.entity_id for entry in engine.column_view(0)]
        match(engine, 'A', 'A')
        assert [entry.entity_id for entry in engine.column_view(0)] == original

        clock.advance(1000)
        order = [entry.entity_id for entry in engine.column_view(0)]
        assert order[-1] == 'A'
        assert order[:-1] == [i for i in original if i != 'A']

    def test_snapshot(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, column_labels=('Question', 'Answer'))
        match(engine, 'A', 'B')
        snap = engine.snapshot()

        assert snap['game_id'] == engine.game_id
        assert snap['seed'] == 0.25
        assert [c['label'] for c in snap['columns']] == ['Question', 'Answer']
        assert snap['stats'] == {'attempts': 1, 'correct': 0, 'accuracy': 0}
        assert snap['feedback']['message'] == 'Try again'
        assert snap['completed'] is False
        assert snap['active_count'] == 3
        assert snap['filter_options'] == {
            'category': ['all', 'History', 'Culture'],
            'region': ['all', 'England', 'Scotland'],
        }
        statuses = {e['id']: e['status'] for e in snap['columns'][0]['entries']}
        assert statuses == {'A': 'incorrect', 'B': 'incorrect', 'C': 'unmatched'}


class TestShuffleReproducibility:

    def test_same_seed_same_orders(self, make_engine, triple_catalog):
        first = make_engine(triple_catalog, columns=3, seed=0.5)
        second = make_engine(triple_catalog, columns=3, seed=0.5)
        assert first.session.column_orders == second.session.column_orders

    def test_fixed_seed_survives_reset(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, seed=0.75)
        orders = engine.session.column_orders
        engine.reset()
        assert engine.session.column_orders == orders
        assert engine.seed == 0.75

    def test_unseeded_draws_seed(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, seed=None)
        assert 0 <= engine.seed < 1

    def test_uniform_strategy_has_no_seed(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog, shuffle='uniform')
        assert engine.seed is None
        for column in engine.columns():
            assert sorted(entry.entity_id for entry in column) == ['A', 'B', 'C']


class TestCollaborators:

    def test_celebrator_failure_is_logged_not_raised(self, pair_catalog, clock, caplog):
        class Broken:
            def celebrate_match(self, theme, entity_id):
                raise RuntimeError('confetti jammed')

            def celebrate_completion(self, theme, stats):
                raise RuntimeError('confetti jammed')

        engine = MatchingEngine(pair_catalog, GameConfig(seed=0.1), celebrator=Broken(), clock=clock)
        with caplog.at_level(logging.ERROR, logger='prepmatch.matching.engine'):
            assert match(engine, 'A', 'A').correct is True
        assert engine.stats.correct == 1
        assert 'celebration celebrate_match failed' in caplog.text

    def test_custom_extractor(self, pair_catalog, clock):
        engine = MatchingEngine(
            pair_catalog, GameConfig(seed=0.1), clock=clock,
            extractor=lambda e, column: f'{e.id}:{column}',
        )
        assert {entry.value for entry in engine.column_view(1)} == {'A:1', 'B:1', 'C:1'}

    def test_match_attempted_signal(self, make_engine, pair_catalog):
        engine = make_engine(pair_catalog)
        received = []

        def listener(sender, **kwargs):
            received.append((kwargs['correct'], kwargs['attempts']))

        with match_attempted.connected_to(listener, sender=engine.game_id):
            match(engine, 'A', 'B')
            match(engine, 'C', 'C')
        assert received == [(False, 1), (True, 2)]

    def test_default_celebrator_sends_signals(self, pair_catalog, clock):
        from prepmatch_app.core.signals import match_celebrated

        engine = MatchingEngine(pair_catalog, GameConfig(seed=0.1), clock=clock)
        received = []

        def listener(sender, **kwargs):
            received.append(kwargs['entity_id'])

        with match_celebrated.connected_to(listener, sender=engine.game_id):
            match(engine, 'C', 'C')
        assert received == ['C']


class SteppingClock:
    """Moves forward by ``step`` ms every time it is read."""

    def __init__(self):
        self.now = 0.0
        self.step = 0.0

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


class TestConsistentRender:

    def _flagged_engine(self):
        clock = SteppingClock()
        engine = MatchingEngine(
            (entity('A', 'a1', 'a2'), entity('B', 'b1', 'b2'), entity('C', 'c1', 'c2')),
            GameConfig(seed=0.4), celebrator=RecordingCelebrator(), clock=clock,
        )
        match(engine, 'A', 'B')            # highlight clears at t=1500
        clock.now, clock.step = 1499, 1
        return engine

    def test_column_view_uses_one_session(self):
        engine = self._flagged_engine()
        statuses = {entry.entity_id: entry.status for entry in engine.column_view(0)}
        assert statuses['A'] is MatchStatus.INCORRECT
        assert statuses['B'] is MatchStatus.INCORRECT

    def test_snapshot_uses_one_session(self):
        engine = self._flagged_engine()
        snap = engine.snapshot()
        flagged = [
            {e['id']: e['status'] for e in column['entries']}
            for column in snap['columns']
        ]
        assert all(column['A'] == column['B'] == 'incorrect' for column in flagged)
        assert snap['feedback']['attempt'] == 1



@pytest.mark.parametrize('seed', [-0.5, float('nan'), float('inf'), 1e305])
def test_unusable_seed_rejected(seed):
    from prepmatch_app.modules.matching.exceptions import InvalidGameConfigError

    with pytest.raises(InvalidGameConfigError) as excinfo:
        GameConfig(seed=seed)
    assert excinfo.value.field == 'seed'
