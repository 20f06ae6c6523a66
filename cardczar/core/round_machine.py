"""Round State Machine — deal → play → judge → score, until a termination condition.

Invariants:
    - Every operation runs its enforce_round checks BEFORE the first mutation:
      a raised error leaves the GameState untouched
    - DEALING_WAIT → PLAYERS_SUBMITTING → JUDGE_CHOOSING → (PLAYERS_SUBMITTING | FINISHED)
    - FINISHED is terminal; no operation mutates a finished game
    - Judge rotates (i + 1) mod n; decks are consumed from the front
    - Running out of cards while re-dealing finishes the game, it is never an error

Design Decisions:
    - Plain functions over a GameState argument (no class): the shell owns the
      state, the machine only transforms it (functional core, imperative shell)
    - Functions return the same state object so callers can publish it directly
    - Randomness only through an explicit RandomSource (random judge, random play)
"""

import logging
from typing import Sequence

from cardczar.core.cards import BlackCard, UserRef, WhiteCard
from cardczar.core.deck import (
    draw_many,
    draw_one,
    extract_by_indexes,
    random_distinct_indexes,
)
from cardczar.core.domain_types import UNLIMITED_ROUNDS, Phase
from cardczar.core.enforce_round import (
    check_can_choose_winner,
    check_can_end,
    check_can_submit,
    check_decks,
    check_phase,
    check_start_options,
    check_submission_count,
    check_winner,
)
from cardczar.core.errors import EmptyBlackDeckError, InvalidGameOptionsError
from cardczar.core.game_state import GameState, Player
from cardczar.core.randomness import RandomSource

logger = logging.getLogger(__name__)


def start_round(
    state: GameState,
    players: Sequence[UserRef],
    black_deck: Sequence[BlackCard],
    white_deck: Sequence[WhiteCard],
    hand_size: int,
    max_rounds: int = UNLIMITED_ROUNDS,
    random_first_judge: bool = False,
    rng: RandomSource | None = None,
) -> GameState:
    """Seat players, deal hands, pick the first judge and put the first prompt in play."""
    error = (
        check_phase(state, Phase.DEALING_WAIT, "start the game")
        or check_start_options(players, hand_size, max_rounds)
        or check_decks(len(players), hand_size, black_deck, white_deck)
    )
    if error:
        raise error
    if random_first_judge and rng is None:
        raise InvalidGameOptionsError(
            "random_first_judge requires a random source", "random_first_judge",
        )

    whites = list(white_deck)
    seated = []
    for user in players:
        hand, whites = draw_many(whites, hand_size, "white deck")
        seated.append(Player(user=user, hand=hand))

    state.players = seated
    state.white_deck = whites
    state.black_deck = list(black_deck)
    state.discard_pile = []
    state.hand_size = hand_size
    state.max_rounds = max_rounds
    state.current_round = 0
    state.current_judge_index = rng.randrange(len(seated)) if random_first_judge else 0
    _put_black_card_in_play(state)

    logger.info(
        f"Game started with {len(seated)} players, judge #{state.current_judge_index}",
        extra={"game_state_id": _sid(state), "round_number": state.current_round},
    )
    return state


def submit_cards(
    state: GameState, player_index: int, card_indexes: Sequence[int],
) -> GameState:
    """Play the given hand positions, in order, for the active prompt."""
    error = (
        check_can_submit(state, player_index)
        or check_submission_count(state, card_indexes)
    )
    if error:
        raise error
    return _play_white_cards(state, player_index, card_indexes)


def submit_random_cards(
    state: GameState, player_index: int, rng: RandomSource,
) -> GameState:
    """Play `blanks` random cards for a disengaged player."""
    error = check_can_submit(state, player_index)
    if error:
        raise error
    hand = state.players[player_index].hand
    card_indexes = random_distinct_indexes(state.blanks, len(hand), rng)
    logger.info(
        f"Player {player_index} played random cards: {card_indexes}",
        extra={"game_state_id": _sid(state), "player_index": player_index},
    )
    return _play_white_cards(state, player_index, card_indexes)


def choose_winner(state: GameState, winner_id: str) -> GameState:
    """Award the prompt to `winner_id`, then start the next prompt or finish."""
    error = check_can_choose_winner(state) or check_winner(state, winner_id)
    if error:
        raise error

    winner = state.players[state.player_index_of(winner_id)]
    winner.points.append(state.black_card_in_play)
    logger.info(
        f"Judge chose {winner.user.name or winner.user.id} as winner",
        extra={"game_state_id": _sid(state), "round_number": state.current_round},
    )
    for player in state.players:
        state.discard_pile.extend(player.submission)
        player.submission = []
    state.black_card_in_play = None

    if state.max_rounds_reached:
        return _finish(state, "max rounds reached")
    if not state.black_deck or not state.white_deck:
        return _finish(state, "deck exhausted")
    if len(state.white_deck) < _cards_needed_to_refill(state):
        return _finish(state, "white deck cannot refill every hand")

    state.current_judge_index = (state.current_judge_index + 1) % len(state.players)
    _put_black_card_in_play(state)
    _players_draw(state)
    return state


def end(state: GameState) -> GameState:
    """Force the game into FINISHED from any non-terminal phase."""
    error = check_can_end(state)
    if error:
        raise error
    # Unjudged cards: prompt goes back on top of its deck, answers to the discard pile
    if state.black_card_in_play is not None:
        state.black_deck.insert(0, state.black_card_in_play)
        state.black_card_in_play = None
    for player in state.players:
        state.discard_pile.extend(player.submission)
        player.submission = []
    return _finish(state, "ended by request")


# --- Internal -----------------------------------------------------------------

def _play_white_cards(
    state: GameState, player_index: int, card_indexes: Sequence[int],
) -> GameState:
    player = state.players[player_index]
    played, remaining = extract_by_indexes(player.hand, card_indexes)
    player.hand = remaining
    player.submission = player.submission + played
    if state.all_players_submitted:
        state.phase = Phase.JUDGE_CHOOSING
        logger.info(
            "All players submitted, judge is choosing",
            extra={"game_state_id": _sid(state), "phase": state.phase.value},
        )
    return state


def _put_black_card_in_play(state: GameState) -> None:
    if not state.black_deck:
        raise EmptyBlackDeckError()
    state.black_card_in_play, state.black_deck = draw_one(state.black_deck, "black deck")
    state.phase = Phase.PLAYERS_SUBMITTING
    state.current_round += 1


def _cards_needed_to_refill(state: GameState) -> int:
    return sum(max(0, state.hand_size - len(p.hand)) for p in state.players)


def _players_draw(state: GameState) -> None:
    for player in state.players:
        missing = state.hand_size - len(player.hand)
        if missing > 0:
            drawn, state.white_deck = draw_many(state.white_deck, missing, "white deck")
            player.hand = player.hand + drawn


def _finish(state: GameState, reason: str) -> GameState:
    state.phase = Phase.FINISHED
    logger.info(
        f"Game finished: {reason}",
        extra={"game_state_id": _sid(state), "round_number": state.current_round},
    )
    return state


def _sid(state: GameState) -> str | None:
    return str(state.id) if state.id is not None else None
