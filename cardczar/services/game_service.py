"""Game Service — load → validate/mutate (pure core) → persist → notify, per client action.

Invariants:
    - Every mutation runs inside store.checkout(id): one writer per game at a time
    - A domain error aborts before store.update: the stored state is untouched
    - notifier.publish is called only after a successful update
    - User ids are resolved to seat indexes here; the round machine never sees users
      it did not seat
    - Only the owner (the creator) starts the game and ends it before the deal;
      random plays come from a seated player or the configured scheduler id

Design Decisions:
    - Impureim sandwich: async IO (store, catalog, notifier) wraps synchronous
      round_machine calls
    - Decks are built and shuffled here, before checkout: catalog reads never
      hold a game's lock
    - Errors get game_state_id attached to their ErrorContext for logging
"""

import logging
from typing import Callable, Sequence

from cardczar.core import round_machine
from cardczar.core.cards import UserRef
from cardczar.core.deck import shuffled
from cardczar.core.domain_types import UNLIMITED_ROUNDS, GameStateId, UserId
from cardczar.core.errors import (
    ActionForbiddenError,
    CardCzarError,
    InsufficientCardsError,
    InvalidGameOptionsError,
    InvalidPlayerError,
    NotJudgeError,
)
from cardczar.core.game_state import GameState
from cardczar.core.randomness import RandomSource
from cardczar.core.repository_protocols import (
    CardCatalog, GameStateStore, StateNotifier,
)

logger = logging.getLogger(__name__)


class GameService:
    """Application service behind the game-state routes."""

    def __init__(
        self,
        store: GameStateStore,
        catalog: CardCatalog,
        notifier: StateNotifier,
        rng: RandomSource,
        min_black_cards: int = 8,
        min_white_cards: int = 34,
        scheduler_id: UserId | None = None,
    ):
        self.store = store
        self.catalog = catalog
        self.notifier = notifier
        self.rng = rng
        self.min_black_cards = min_black_cards
        self.min_white_cards = min_white_cards
        self.scheduler_id = scheduler_id

    async def create(self, owner_id: UserId) -> GameState:
        """Create an empty game in DEALING_WAIT, owned by its creator."""
        state = await self.store.create(GameState(owner_id=owner_id))
        await self.notifier.publish(state.id, state)
        return state

    async def get(self, state_id: GameStateId) -> GameState:
        return await self.store.fetch(state_id)

    async def start(
        self,
        state_id: GameStateId,
        caller_id: UserId,
        players: Sequence[UserRef],
        expansions: Sequence[str],
        hand_size: int,
        max_rounds: int = UNLIMITED_ROUNDS,
        random_first_judge: bool = False,
    ) -> GameState:
        """Build shuffled decks from the catalog and deal the first round."""
        if not expansions:
            raise InvalidGameOptionsError("Select at least one expansion", "expansions")
        blacks = await self.catalog.black_cards_for_expansions(expansions)
        whites = await self.catalog.white_cards_for_expansions(expansions)
        if len(blacks) < self.min_black_cards:
            raise InsufficientCardsError(
                "Not enough black cards to play a game. Please select more "
                f"expansions. Selected expansions have {len(blacks)} black cards, "
                f"the minimum is {self.min_black_cards}",
            )
        if len(whites) < self.min_white_cards:
            raise InsufficientCardsError(
                "Not enough white cards to play a game. Please select more "
                f"expansions. Selected expansions have {len(whites)} white cards, "
                f"the minimum is {self.min_white_cards}",
            )
        black_deck = shuffled(blacks, self.rng)
        white_deck = shuffled(whites, self.rng)
        logger.info(
            f"Starting game with expansions {list(expansions)}",
            extra={"game_state_id": str(state_id)},
        )

        def action(state: GameState) -> GameState:
            _require_owner(state, caller_id, "start the game")
            if state.owner_id is not None and all(p.id != state.owner_id for p in players):
                raise InvalidGameOptionsError(
                    "The game owner must be one of the players", "players",
                )
            return round_machine.start_round(
                state, players, black_deck, white_deck, hand_size,
                max_rounds=max_rounds,
                random_first_judge=random_first_judge,
                rng=self.rng,
            )
        return await self._apply(state_id, action)

    async def play_cards(
        self, state_id: GameStateId, user_id: UserId, card_indexes: Sequence[int],
    ) -> GameState:
        return await self._apply(state_id, lambda state: round_machine.submit_cards(
            state, _seat_of(state, user_id), card_indexes,
        ))

    async def play_random(
        self, state_id: GameStateId, caller_id: UserId, player_id: UserId,
    ) -> GameState:
        """Auto-play for a disengaged player (called by an external timeout policy)."""
        def action(state: GameState) -> GameState:
            if caller_id != self.scheduler_id and state.player_index_of(caller_id) is None:
                raise ActionForbiddenError(
                    "Only a seated player or the scheduler can play for others",
                )
            return round_machine.submit_random_cards(
                state, _seat_of(state, player_id), self.rng,
            )
        return await self._apply(state_id, action)

    async def choose_winner(
        self, state_id: GameStateId, judge_id: UserId, winner_id: UserId,
    ) -> GameState:
        def action(state: GameState) -> GameState:
            if not state.is_finished and not state.is_current_judge(judge_id):
                raise NotJudgeError()
            return round_machine.choose_winner(state, winner_id)
        return await self._apply(state_id, action)

    async def end(self, state_id: GameStateId, user_id: UserId) -> GameState:
        def action(state: GameState) -> GameState:
            if not state.is_finished:
                if state.players:
                    _seat_of(state, user_id)
                else:
                    # Before the deal nobody is seated yet
                    _require_owner(state, user_id, "end the game")
            return round_machine.end(state)
        return await self._apply(state_id, action)

    async def _apply(
        self, state_id: GameStateId, action: Callable[[GameState], GameState],
    ) -> GameState:
        async with self.store.checkout(state_id) as state:
            try:
                action(state)
            except CardCzarError as e:
                e.context.game_state_id = str(state_id)
                e.context.round_number = state.current_round
                logger.warning(
                    f"Rejected action: {e.message}",
                    extra={"game_state_id": str(state_id), "error_code": e.code},
                )
                raise
            await self.store.update(state)
        await self.notifier.publish(state_id, state)
        return state


def _seat_of(state: GameState, user_id: UserId) -> int:
    index = state.player_index_of(user_id)
    if index is None:
        raise InvalidPlayerError(user_id)
    return index


def _require_owner(state: GameState, user_id: UserId, operation: str) -> None:
    if state.owner_id is not None and user_id != state.owner_id:
        raise ActionForbiddenError(f"Only the game owner can {operation}")
