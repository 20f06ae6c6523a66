"""Game State Routes — create, inspect and act on a game's round state.

Invariants:
    - Every action response is the caller's own view (build_game_view), never
      the raw state: other players' hands never leave the server
    - Domain errors propagate to the global CardCzarError handler (status + envelope)
    - Accepted actions are published by GameService; routes do not notify

Design Decisions:
    - Actions are POST sub-resources (/play-cards, /choose-winner, ...) mirroring
      the game vocabulary instead of a generic PATCH of the state
    - play-random takes the target player in the body: it is called by the
      timeout scheduler on behalf of a disengaged player
    - The creator owns the game: only they can start it
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from cardczar.api.dependencies import get_current_user, get_game_service
from cardczar.core.cards import UserRef
from cardczar.core.domain_types import GameStateId
from cardczar.core.game_state_view import build_game_view
from cardczar.schemas.game_state import (
    ChooseWinnerRequest,
    GameStateCreated,
    PlayCardsRequest,
    PlayRandomRequest,
    StartGameRequest,
)
from cardczar.services.game_service import GameService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/game-states", tags=["game-states"])


@router.post(
    "", response_model=GameStateCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_game_state(
    user: UserRef = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
):
    """Create an empty game state waiting to be dealt."""
    state = await service.create(user.id)
    logger.info(
        f"Game state created by {user.id}",
        extra={"game_state_id": str(state.id)},
    )
    return GameStateCreated(id=str(state.id), phase=state.phase.value)


@router.get("/{state_id}")
async def get_game_state(
    state_id: UUID,
    user: UserRef = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
):
    """Current state as seen by the caller."""
    state = await service.get(GameStateId(state_id))
    return build_game_view(state, user.id)


@router.post("/{state_id}/start")
async def start_game(
    state_id: UUID,
    body: StartGameRequest,
    user: UserRef = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
):
    """Deal the first round with the given players and options. Owner only."""
    state = await service.start(
        GameStateId(state_id),
        user.id,
        players=[UserRef(id=p.id, name=p.name) for p in body.players],
        expansions=body.expansions,
        hand_size=body.hand_size,
        max_rounds=body.max_rounds,
        random_first_judge=body.random_first_judge,
    )
    return build_game_view(state, user.id)


@router.post("/{state_id}/play-cards")
async def play_cards(
    state_id: UUID,
    body: PlayCardsRequest,
    user: UserRef = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
):
    """Play white cards from the caller's hand for the active prompt."""
    state = await service.play_cards(GameStateId(state_id), user.id, body.card_indexes)
    return build_game_view(state, user.id)


@router.post("/{state_id}/play-random")
async def play_random(
    state_id: UUID,
    body: PlayRandomRequest,
    user: UserRef = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
):
    """Play random cards on behalf of a disengaged player.

    Allowed for seated players and for the configured scheduler id.
    """
    state = await service.play_random(GameStateId(state_id), user.id, body.player_id)
    return build_game_view(state, user.id)


@router.post("/{state_id}/choose-winner")
async def choose_winner(
    state_id: UUID,
    body: ChooseWinnerRequest,
    user: UserRef = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
):
    """Judge picks the winning submission."""
    state = await service.choose_winner(GameStateId(state_id), user.id, body.winner_id)
    return build_game_view(state, user.id)


@router.post("/{state_id}/end")
async def end_game(
    state_id: UUID,
    user: UserRef = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
):
    """Finish the game immediately."""
    state = await service.end(GameStateId(state_id), user.id)
    return build_game_view(state, user.id)
