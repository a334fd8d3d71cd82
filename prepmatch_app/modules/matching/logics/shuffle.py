"""
Shuffle Service
===============
Per-column display orders for the active set.

Two strategies:

* **seeded** – Fisher–Yates driven by the linear-congruential sequence
  ``next = (next * 9301 + 49297) % 233280``; each column derives its own
  starting value from the session seed, so one seed always yields the
  same set of column orders.
* **uniform** – Fisher–Yates over ``random.Random``; only guarantees a
  permutation.
"""

import math
import random
from typing import List, Optional, Sequence, Tuple, TypeVar

from ..config import MatchingModuleDefaultConfig as Defaults
from ..schemas import SHUFFLE_SEEDED, SHUFFLE_UNIFORM

T = TypeVar('T')

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def column_seed(seed: float, column: int) -> float:
    """Starting LCG value for *column*: ``seed * multiplier + offset``."""
    derivations = Defaults.MATCHING_SEED_DERIVATIONS
    if column < len(derivations):
        multiplier, offset = derivations[column]
    else:
        multiplier, offset = 1000 + 7919 * column, 1234 * column
    return seed * multiplier + offset


def seeded_shuffle(items: Sequence[T], seed: float) -> List[T]:
    shuffled = list(items)
    state = seed
    for i in range(len(shuffled) - 1, 0, -1):
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        j = math.floor(state / LCG_MODULUS * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def uniform_shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def draw_seed() -> float:
    """Fresh session seed in ``[0, 1)``."""
    return random.random()


def column_orders(
    items: Sequence[T],
    column_count: int,
    strategy: str = SHUFFLE_SEEDED,
    seed: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Tuple[T, ...], ...]:
    """
    One independent permutation of *items* per column.

    ``seed`` is required for the seeded strategy and ignored otherwise.
    """
    if strategy == SHUFFLE_SEEDED:
        if seed is None:
            raise ValueError('seeded shuffle needs a seed')
        return tuple(
            tuple(seeded_shuffle(items, column_seed(seed, column)))
            for column in range(column_count)
        )
    if strategy == SHUFFLE_UNIFORM:
        rng = rng or random.Random()
        return tuple(tuple(uniform_shuffle(items, rng)) for _ in range(column_count))
    raise ValueError(f'Unknown shuffle strategy {strategy!r}')
