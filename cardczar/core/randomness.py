"""Random Source — the one capability through which randomness enters the core.

Invariants:
    - Core functions never call the `random` module directly
    - The process-wide source is created once (create_random_source) and injected

Design Decisions:
    - Protocol over a wrapper class: random.Random already satisfies it, tests
      substitute a fixed-sequence stub
"""

import random
from typing import MutableSequence, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Subset of random.Random the game rules rely on."""
    def randrange(self, stop: int) -> int: ...
    def sample(self, population: Sequence[T], k: int) -> list[T]: ...
    def shuffle(self, x: MutableSequence) -> None: ...


def create_random_source(seed: int | None = None) -> random.Random:
    """Build the process-wide source. seed=None draws from OS entropy."""
    return random.Random(seed)
