"""
Matching DTOs
=============
Plain dataclasses shared by the dataset, shuffle, engine and route
layers. No Flask, no I/O.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple

from prepmatch_app.core.defaults import CELEBRATION_THEMES

from .config import MatchingModuleDefaultConfig as Defaults
from .exceptions import InvalidGameConfigError
from .logics.scoring import accuracy_percent

EntityId = Hashable

# field name -> required value ('all' / None = unconstrained); fields are AND-ed
FilterPredicate = Dict[str, Optional[str]]

SHUFFLE_SEEDED = 'seeded'
SHUFFLE_UNIFORM = 'uniform'
SHUFFLE_STRATEGIES = (SHUFFLE_SEEDED, SHUFFLE_UNIFORM)


class MatchStatus(str, Enum):
    """Per-entity visual status exposed to the presentation layer."""

    UNMATCHED = 'unmatched'
    SELECTED = 'selected'
    CORRECT = 'correct'
    INCORRECT = 'incorrect'


@dataclass(frozen=True)
class Entity:
    """
    One logical item to be matched.

    ``column_values[i]`` is what column *i* shows; ``id`` is the only
    thing that decides correctness.
    """

    id: EntityId
    column_values: Tuple[Any, ...]
    category: Optional[str] = None
    region: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def value(self, column: int) -> Any:
        return self.column_values[column]

    def field_value(self, name: str) -> Any:
        """Value of a filterable field (``category``, ``region`` or an attribute)."""
        if name == 'category':
            return self.category
        if name == 'region':
            return self.region
        return self.attributes.get(name)


@dataclass(frozen=True)
class SessionStats:
    attempts: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> int:
        return accuracy_percent(self.correct, self.attempts)

    def to_dict(self) -> Dict[str, int]:
        return {'attempts': self.attempts, 'correct': self.correct, 'accuracy': self.accuracy}


@dataclass(frozen=True)
class Feedback:
    """The "Correct!" / "Try again" banner of one verification."""

    correct: bool
    ids: Tuple[EntityId, ...]
    attempt: int

    @property
    def message(self) -> str:
        return 'Correct!' if self.correct else 'Try again'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'correct': self.correct,
            'message': self.message,
            'ids': list(self.ids),
            'attempt': self.attempt,
        }


@dataclass(frozen=True)
class MatchResult:
    """Outcome of verifying one full tuple of selections."""

    ids: Tuple[EntityId, ...]
    correct: bool
    attempt: int
    completed: bool = False


@dataclass(frozen=True)
class ColumnEntry:
    entity_id: EntityId
    value: Any
    status: MatchStatus

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.entity_id, 'value': self.value, 'status': self.status.value}


@dataclass(frozen=True)
class GameConfig:
    """
    Per-game constants.

    The engine is one implementation parameterized by this object; a
    two-column "pair" game and a three-column "triple" game differ only
    in the values held here.
    """

    column_count: int = 2
    theme: str = Defaults.MATCHING_DEFAULT_THEME
    shuffle: str = Defaults.MATCHING_DEFAULT_SHUFFLE
    seed: Optional[float] = None
    incorrect_delay_ms: int = Defaults.MATCHING_INCORRECT_DELAY_MS_PAIR
    feedback_delay_ms: int = Defaults.MATCHING_FEEDBACK_DELAY_MS
    recent_match_ms: int = Defaults.MATCHING_RECENT_MATCH_MS
    completion_delay_ms: int = Defaults.MATCHING_COMPLETION_DELAY_MS
    allow_reselect_incorrect: bool = True
    clear_incorrect_on_select: bool = False
    sink_resolved: bool = False
    column_labels: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.column_count, int) or self.column_count < 2:
            raise InvalidGameConfigError('column_count must be an integer >= 2', field='column_count')
        if self.theme not in CELEBRATION_THEMES:
            raise InvalidGameConfigError(f"Unknown celebration theme {self.theme!r}", field='theme')
        if self.shuffle not in SHUFFLE_STRATEGIES:
            raise InvalidGameConfigError(
                f"shuffle must be one of {', '.join(SHUFFLE_STRATEGIES)}", field='shuffle'
            )
        for name in ('incorrect_delay_ms', 'feedback_delay_ms', 'recent_match_ms', 'completion_delay_ms'):
            if getattr(self, name) < 0:
                raise InvalidGameConfigError(f'{name} must be >= 0', field=name)
        if self.seed is not None and not (
            math.isfinite(self.seed) and 0 <= self.seed <= Defaults.MATCHING_MAX_SEED
        ):
            raise InvalidGameConfigError(
                f'seed must be a number between 0 and {Defaults.MATCHING_MAX_SEED:g}', field='seed'
            )
        if self.column_labels and len(self.column_labels) != self.column_count:
            raise InvalidGameConfigError('column_labels must name every column', field='column_labels')

    @classmethod
    def for_columns(cls, column_count: int, **overrides) -> 'GameConfig':
        """Config with the incorrect-highlight delay matching the column count."""
        if 'incorrect_delay_ms' not in overrides:
            overrides['incorrect_delay_ms'] = (
                Defaults.MATCHING_INCORRECT_DELAY_MS_PAIR
                if column_count == 2
                else Defaults.MATCHING_INCORRECT_DELAY_MS_TRIPLE
            )
        return cls(column_count=column_count, **overrides)

    def label(self, column: int) -> str:
        if self.column_labels:
            return self.column_labels[column]
        return f'Column {column + 1}'
