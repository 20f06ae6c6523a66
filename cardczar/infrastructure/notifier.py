"""State Broadcaster — in-process pub/sub that fans GameState changes out to SSE streams.

Invariants:
    - publish() never blocks: a slow subscriber's full queue drops its oldest event
    - Each subscriber gets its own queue; unsubscribing removes only that queue
    - Subscribers receive the GameState clone, and build their own viewer-specific view

Design Decisions:
    - asyncio.Queue per subscriber over a shared broadcast channel: each client
      sees only the hand of its own user
    - Bounded queues (maxsize): a disconnected client that is not yet cleaned
      up cannot grow memory without limit
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from cardczar.core.domain_types import GameStateId
from cardczar.core.game_state import GameState

logger = logging.getLogger(__name__)

SUBSCRIBER_QUEUE_SIZE: int = 16


class StateBroadcaster:
    """StateNotifier implementation for a single-process deployment."""

    def __init__(self, queue_size: int = SUBSCRIBER_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[GameStateId, set[asyncio.Queue]] = {}

    async def publish(self, state_id: GameStateId, state: GameState) -> None:
        for queue in list(self._subscribers.get(state_id, ())):
            if queue.full():
                queue.get_nowait()
                logger.warning(
                    "Subscriber queue full, dropping oldest event",
                    extra={"game_state_id": str(state_id)},
                )
            queue.put_nowait(state.clone())

    @asynccontextmanager
    async def subscribe(self, state_id: GameStateId) -> AsyncIterator[asyncio.Queue]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.setdefault(state_id, set()).add(queue)
        try:
            yield queue
        finally:
            subscribers = self._subscribers.get(state_id)
            if subscribers is not None:
                subscribers.discard(queue)
                if not subscribers:
                    del self._subscribers[state_id]

    def subscriber_count(self, state_id: GameStateId) -> int:
        return len(self._subscribers.get(state_id, ()))
