"""SQL Game State Store — GameStateStore over the game_states table.

Invariants:
    - update is a single `UPDATE ... WHERE id = :id AND version = :version`:
      a stale writer matches zero rows and gets ConcurrencyError
    - phase, finished and snapshot are written in that same statement, so the
      finished flag can never lag behind the state
    - checkout serializes writers inside this process (asyncio.Lock per id);
      the version column serializes writers across processes
    - checkout of an unknown id fails before any lock is created

Design Decisions:
    - Own short-lived DB session per call (via DatabaseSessionManager): a
      checkout can span a client action without pinning a request session
    - Snapshots go through core/game_state_snapshot.py (pure) — this module only
      moves dicts in and out of rows
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from sqlalchemy import select, update

from cardczar.core.domain_types import GameStateId, Phase
from cardczar.core.errors import ConcurrencyError, ResourceNotFoundError
from cardczar.core.game_state import GameState
from cardczar.core.game_state_snapshot import (
    game_state_from_snapshot,
    game_state_to_snapshot,
)
from cardczar.infrastructure.database import DatabaseSessionManager
from cardczar.infrastructure.keyed_locks import KeyedLocks
from cardczar.models.game_state import GameStateRecord

logger = logging.getLogger(__name__)


class SqlGameStateStore:
    """GameStateStore persisted through SQLAlchemy."""

    def __init__(self, db: DatabaseSessionManager) -> None:
        self._db = db
        self._locks = KeyedLocks()

    async def create(self, state: GameState) -> GameState:
        created = state.clone()
        created.version = 1
        async with self._db.session() as session:
            record = GameStateRecord(
                phase=created.phase.value,
                finished=created.is_finished,
                current_round=created.current_round,
                version=created.version,
                snapshot={},
            )
            session.add(record)
            await session.flush()
            created.id = GameStateId(record.id)
            record.snapshot = game_state_to_snapshot(created)
            await session.commit()
        logger.info("Created game state", extra={"game_state_id": str(created.id)})
        return created

    async def fetch(self, state_id: GameStateId) -> GameState:
        async with self._db.session() as session:
            result = await session.execute(
                select(GameStateRecord).where(GameStateRecord.id == state_id),
            )
            record = result.scalar_one_or_none()
        if record is None:
            raise ResourceNotFoundError("GameState", str(state_id))
        state = game_state_from_snapshot(record.snapshot)
        state.id = GameStateId(record.id)
        state.version = record.version
        return state

    async def update(self, state: GameState) -> None:
        now = datetime.now(timezone.utc)
        new_version = state.version + 1
        stored = state.clone()
        stored.version = new_version
        values = {
            "phase": state.phase.value,
            "finished": state.phase is Phase.FINISHED,
            "current_round": state.current_round,
            "version": new_version,
            "snapshot": game_state_to_snapshot(stored),
            "updated_at": now,
        }
        if state.phase is Phase.FINISHED:
            values["finished_at"] = now
        async with self._db.session() as session:
            result = await session.execute(
                update(GameStateRecord)
                .where(
                    GameStateRecord.id == state.id,
                    GameStateRecord.version == state.version,
                )
                .values(**values),
            )
            if result.rowcount == 0:
                exists = await session.execute(
                    select(GameStateRecord.version).where(GameStateRecord.id == state.id),
                )
                found = exists.scalar_one_or_none()
                if found is None:
                    raise ResourceNotFoundError("GameState", str(state.id))
                raise ConcurrencyError(
                    f"GameState {state.id} was modified concurrently "
                    f"(expected version {state.version}, found {found})",
                )
            await session.commit()
        state.version = new_version

    @asynccontextmanager
    async def checkout(self, state_id: GameStateId) -> AsyncIterator[GameState]:
        """Exclusive checkout: yields a fresh copy, caller writes back with update()."""
        await self._ensure_exists(state_id)
        async with self._locks.hold(state_id):
            yield await self.fetch(state_id)

    async def _ensure_exists(self, state_id: GameStateId) -> None:
        async with self._db.session() as session:
            result = await session.execute(
                select(GameStateRecord.id).where(GameStateRecord.id == state_id),
            )
            if result.scalar_one_or_none() is None:
                raise ResourceNotFoundError("GameState", str(state_id))
