"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - GameStateStore.checkout is exclusive per id: two checkouts of the same
      game never overlap, so read-modify-write cycles cannot lose updates

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the round machine that USES the returned state is never async itself —
      the shell orchestrates the async calls around the pure logic
"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol, Sequence

from cardczar.core.cards import BlackCard, WhiteCard
from cardczar.core.domain_types import GameStateId
from cardczar.core.game_state import GameState


class GameStateStore(Protocol):
    """Contract for game state persistence — implemented by shell.

    fetch/checkout raise ResourceNotFoundError for unknown ids; update raises
    ConcurrencyError when the state was written by someone else meanwhile.
    """
    async def create(self, state: GameState) -> GameState: ...
    async def fetch(self, state_id: GameStateId) -> GameState: ...
    async def update(self, state: GameState) -> None: ...
    def checkout(
        self, state_id: GameStateId,
    ) -> AbstractAsyncContextManager[GameState]: ...


class CardCatalog(Protocol):
    """Contract for card definitions grouped by expansion — implemented by shell."""
    async def black_cards_for_expansions(
        self, expansions: Sequence[str],
    ) -> list[BlackCard]: ...
    async def white_cards_for_expansions(
        self, expansions: Sequence[str],
    ) -> list[WhiteCard]: ...
    async def available_expansions(self) -> list[str]: ...


class StateNotifier(Protocol):
    """Contract for pushing snapshots to connected clients — implemented by shell."""
    async def publish(self, state_id: GameStateId, state: GameState) -> None: ...
