"""Game State Stream — Server-Sent Events feed of a game's state for one viewer.

Invariants:
    - First event is always the current state; then one event per accepted mutation
    - Every event is the subscriber's own view (build_game_view with their id)
    - The stream closes itself after emitting a FINISHED state
    - Unknown game ids fail with 404 before the stream opens

Design Decisions:
    - Subscribe BEFORE fetching the current state: a mutation landing in between
      is delivered twice rather than lost
    - StreamingResponse for SSE: event_generator yields formatted SSE lines
"""

import asyncio
import json
import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from cardczar.api.dependencies import (
    get_current_user, get_game_service, get_notifier,
)
from cardczar.core.cards import UserRef
from cardczar.core.domain_types import GameStateId
from cardczar.core.errors import CardCzarError
from cardczar.core.game_state_view import build_game_view
from cardczar.infrastructure.notifier import StateBroadcaster
from cardczar.services.game_service import GameService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/game-states", tags=["game-states"])

# SSE headers prevent proxy/browser buffering of streamed events.
_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


def _sse_line(event: dict) -> str:
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


def _state_event(state, viewer_id: str) -> dict:
    return {"type": "state", "data": build_game_view(state, viewer_id)}


@router.get("/{state_id}/stream")
async def stream_game_state(
    state_id: UUID,
    user: UserRef = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
    notifier: StateBroadcaster = Depends(get_notifier),
):
    """SSE stream of the caller's view, pushed after every accepted action."""
    game_id = GameStateId(state_id)
    # Fail fast with 404 before committing to a streaming response
    await service.get(game_id)

    async def event_generator():
        try:
            async with notifier.subscribe(game_id) as queue:
                current = await service.get(game_id)
                yield _sse_line(_state_event(current, user.id))
                if current.is_finished:
                    return
                while True:
                    state = await queue.get()
                    yield _sse_line(_state_event(state, user.id))
                    if state.is_finished:
                        return
        except CardCzarError as e:
            yield _sse_line(e.to_sse_event())
        except asyncio.CancelledError:
            logger.info(
                "Client disconnected from stream",
                extra={"game_state_id": str(game_id)},
            )
            raise

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=_SSE_HEADERS,
    )
