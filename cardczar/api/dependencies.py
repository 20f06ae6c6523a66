"""Route Dependencies — caller identity and shared services for FastAPI routes.

Invariants:
    - Identity comes from X-User-Id / X-User-Name set by the upstream auth proxy;
      this service never authenticates, it only compares ids
    - Services are created once in lifespan and read from app.state

Design Decisions:
    - Depends() getters over module globals: tests swap app.state entries
      without monkeypatching imports
"""

from fastapi import Header, HTTPException, Request, status

from cardczar.core.cards import UserRef
from cardczar.infrastructure.notifier import StateBroadcaster
from cardczar.services.card_catalog import SqlCardCatalog
from cardczar.services.game_service import GameService


async def get_current_user(
    x_user_id: str | None = Header(None),
    x_user_name: str | None = Header(None),
) -> UserRef:
    """Resolve the caller. 401 when the auth proxy did not identify them."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header",
        )
    return UserRef(id=x_user_id.strip(), name=(x_user_name or "").strip())


def get_game_service(request: Request) -> GameService:
    return request.app.state.game_service


def get_card_catalog(request: Request) -> SqlCardCatalog:
    return request.app.state.card_catalog


def get_notifier(request: Request) -> StateBroadcaster:
    return request.app.state.notifier
