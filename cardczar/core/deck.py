"""Deck & Hand Mechanics — pure helpers for drawing, picking and extracting cards.

Invariants:
    - No helper mutates its input list; each returns new lists
    - Decks are consumed from the front (index 0)
    - extract_by_indexes keeps extracted cards in the supplied order and the
      remainder in its original order

Design Decisions:
    - Return (value, rest) tuples instead of popping: the state machine only
      commits new lists once every check has passed
"""

from typing import Sequence, TypeVar

from cardczar.core.errors import (
    EmptyDeckError,
    InvalidCardIndexError,
    PopulationTooSmallError,
)
from cardczar.core.randomness import RandomSource

T = TypeVar("T")


def draw_one(deck: Sequence[T], name: str = "deck") -> tuple[T, list[T]]:
    """Take the front card. Raises EmptyDeckError on an empty deck."""
    if not deck:
        raise EmptyDeckError(name)
    return deck[0], list(deck[1:])


def draw_many(deck: Sequence[T], n: int, name: str = "deck") -> tuple[list[T], list[T]]:
    """Take the first n cards. Raises EmptyDeckError when fewer than n remain."""
    if n > len(deck):
        raise EmptyDeckError(name)
    return list(deck[:n]), list(deck[n:])


def random_distinct_indexes(
    n: int, population_size: int, rng: RandomSource,
) -> list[int]:
    """Pick n distinct indexes from range(population_size), uniformly."""
    if n < 0 or population_size < n:
        raise PopulationTooSmallError(n, population_size)
    return rng.sample(range(population_size), n)


def validate_indexes(indexes: Sequence[int], size: int) -> None:
    """Raise InvalidCardIndexError for out-of-range or duplicated indexes."""
    seen: set[int] = set()
    for i in indexes:
        if not isinstance(i, int) or isinstance(i, bool) or i < 0 or i >= size:
            raise InvalidCardIndexError(
                f"Card index {i} is out of range (hand has {size} cards)",
            )
        if i in seen:
            raise InvalidCardIndexError(f"Card index {i} was given more than once")
        seen.add(i)


def extract_by_indexes(
    cards: Sequence[T], indexes: Sequence[int],
) -> tuple[list[T], list[T]]:
    """Split cards into (extracted in index order, remaining in original order)."""
    validate_indexes(indexes, len(cards))
    extracted = [cards[i] for i in indexes]
    picked = set(indexes)
    remaining = [c for i, c in enumerate(cards) if i not in picked]
    return extracted, remaining


def shuffled(cards: Sequence[T], rng: RandomSource) -> list[T]:
    """Return a shuffled copy. Only used when a deck is built."""
    deck = list(cards)
    rng.shuffle(deck)
    return deck
