"""In-Memory Game State Store — per-process GameStateStore with per-id locking.

Invariants:
    - Callers never receive the canonical object: fetch/checkout return clones
    - checkout holds an asyncio.Lock per id for the whole read-modify-write cycle
    - update rejects a state whose version is not the stored version (lost race)
    - Every accepted update bumps version by 1

Design Decisions:
    - One instance created in lifespan (store_backend="memory"): state is
      lost on restart, acceptable for local play and tests
    - Locks come from KeyedLocks and only exist for known ids while a checkout
      holds or awaits them
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

from cardczar.core.domain_types import GameStateId
from cardczar.core.errors import ConcurrencyError, ResourceNotFoundError
from cardczar.core.game_state import GameState
from cardczar.infrastructure.keyed_locks import KeyedLocks

logger = logging.getLogger(__name__)


class InMemoryGameStateStore:
    """GameStateStore backed by a dict of canonical GameState objects."""

    def __init__(self) -> None:
        self._states: dict[GameStateId, GameState] = {}
        self._locks = KeyedLocks()

    async def create(self, state: GameState) -> GameState:
        created = state.clone()
        created.id = GameStateId(uuid.uuid4())
        created.version = 1
        self._states[created.id] = created
        logger.info("Created game state", extra={"game_state_id": str(created.id)})
        return created.clone()

    async def fetch(self, state_id: GameStateId) -> GameState:
        state = self._states.get(state_id)
        if state is None:
            raise ResourceNotFoundError("GameState", str(state_id))
        return state.clone()

    async def update(self, state: GameState) -> None:
        current = self._states.get(state.id)
        if current is None:
            raise ResourceNotFoundError("GameState", str(state.id))
        if current.version != state.version:
            raise ConcurrencyError(
                f"GameState {state.id} was modified concurrently "
                f"(expected version {state.version}, found {current.version})",
            )
        stored = state.clone()
        stored.version += 1
        self._states[state.id] = stored
        state.version = stored.version

    @asynccontextmanager
    async def checkout(self, state_id: GameStateId) -> AsyncIterator[GameState]:
        """Exclusive checkout: yields a clone, caller writes back with update()."""
        if state_id not in self._states:
            raise ResourceNotFoundError("GameState", str(state_id))
        async with self._locks.hold(state_id):
            yield await self.fetch(state_id)

    def __len__(self) -> int:
        return len(self._states)
