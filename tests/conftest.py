import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from prepmatch_app import create_app
from prepmatch_app.config import Config
from prepmatch_app.modules.matching.engine.matching_engine import MatchingEngine
from prepmatch_app.modules.matching.schemas import Entity, GameConfig
from prepmatch_app.modules.matching.services.game_registry import game_registry


class TestConfig(Config):
    TESTING = True
    SCHEDULER_ENABLED = False
    LOG_TO_FILE = False
    LOG_LEVEL = 'DEBUG'
    MATCHING_MAX_GAMES = 50


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


class RecordingCelebrator:
    def __init__(self):
        self.matches = []
        self.completions = []

    def celebrate_match(self, theme, entity_id):
        self.matches.append((theme, entity_id))

    def celebrate_completion(self, theme, stats):
        self.completions.append((theme, stats))


def entity(id, *values, category=None, region=None, **attributes):
    return Entity(id=id, column_values=tuple(values), category=category, region=region,
                  attributes=attributes)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def celebrator():
    return RecordingCelebrator()


@pytest.fixture
def pair_catalog():
    return (
        entity('A', 'a-left', 'a-right', category='History', region='England'),
        entity('B', 'b-left', 'b-right', category='History', region='Scotland'),
        entity('C', 'c-left', 'c-right', category='Culture', region='England'),
    )


@pytest.fixture
def triple_catalog():
    return (
        entity('A', 'a1', 'a2', 'a3', era='Medieval'),
        entity('B', 'b1', 'b2', 'b3', era='Medieval'),
        entity('C', 'c1', 'c2', 'c3', era='Modern'),
    )


@pytest.fixture
def make_engine(clock, celebrator):
    def _make(catalog, columns=2, predicate=None, **overrides):
        overrides.setdefault('seed', 0.25)
        config = GameConfig.for_columns(columns, **overrides)
        return MatchingEngine(catalog, config, predicate=predicate, celebrator=celebrator, clock=clock)
    return _make


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    game_registry.clear()


@pytest.fixture
def client(app):
    return app.test_client()
