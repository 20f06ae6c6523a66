"""Round Rule Enforcement — pure precondition checks for every state-machine operation.

Invariants:
    - All functions are PURE: no IO, no async, no mutation
    - Return the error to raise on violation, None on success
    - Terminal check always comes first: a FINISHED game reports AlreadyFinished,
      never a phase violation

Design Decisions:
    - Checks separated from round_machine: the machine reads as "check, then
      mutate", and every rule is testable on its own
    - Return errors (not raise): callers chain checks with `or`
"""

from typing import Sequence

from cardczar.core.cards import BlackCard, UserRef, WhiteCard
from cardczar.core.domain_types import (
    MAX_HAND_SIZE, MIN_HAND_SIZE, MIN_PLAYERS, Phase,
)
from cardczar.core.errors import (
    AlreadyFinishedError,
    AlreadySubmittedError,
    CardCzarError,
    InsufficientCardsError,
    InvalidGameOptionsError,
    InvalidPlayerError,
    InvalidSubmissionCountError,
    InvalidWinnerError,
    JudgeCannotSubmitError,
    PhaseViolationError,
    SubmissionsIncompleteError,
)
from cardczar.core.game_state import GameState


def check_phase(
    state: GameState, expected: Phase, operation: str,
) -> CardCzarError | None:
    """Rule #1: operation only valid in `expected`; FINISHED is reported as such."""
    if state.phase.is_terminal:
        return AlreadyFinishedError()
    if state.phase is not expected:
        return PhaseViolationError(operation, state.phase.value)
    return None


# --- start_round --------------------------------------------------------------

def check_start_options(
    players: Sequence[UserRef],
    hand_size: int,
    max_rounds: int,
) -> CardCzarError | None:
    """Rule #2: >= 3 distinct players, hand size 5-30, round cap >= 0."""
    if len(players) < MIN_PLAYERS:
        return InvalidGameOptionsError(
            f"Need at least {MIN_PLAYERS} players, got {len(players)}", "players",
        )
    if len({p.id for p in players}) != len(players):
        return InvalidGameOptionsError("Players must be distinct users", "players")
    if not MIN_HAND_SIZE <= hand_size <= MAX_HAND_SIZE:
        return InvalidGameOptionsError(
            f"Hand size needs to be a number between {MIN_HAND_SIZE} and "
            f"{MAX_HAND_SIZE} (both included), got {hand_size}",
            "hand_size",
        )
    if max_rounds < 0:
        return InvalidGameOptionsError(
            f"max_rounds must be >= 0 (0 = unlimited), got {max_rounds}", "max_rounds",
        )
    return None


def check_decks(
    player_count: int,
    hand_size: int,
    black_deck: Sequence[BlackCard],
    white_deck: Sequence[WhiteCard],
) -> CardCzarError | None:
    """Rule #3: decks cover every hand plus one prompt; no card appears twice.

    Every prompt must be answerable from a full hand: 1 <= blanks <= hand_size.
    """
    if not black_deck:
        return InsufficientCardsError("Black deck is empty")
    for card in black_deck:
        if not 1 <= card.blanks <= hand_size:
            return InvalidGameOptionsError(
                f"Black card {card.card_id} has {card.blanks} blanks, it needs "
                f"between 1 and {hand_size} (the hand size)",
                "decks",
            )
    needed = player_count * hand_size
    if len(white_deck) < needed:
        return InsufficientCardsError(
            f"White deck has {len(white_deck)} cards but {needed} are needed "
            f"to deal {player_count} hands of {hand_size}",
        )
    if len(set(black_deck)) != len(black_deck) or len(set(white_deck)) != len(white_deck):
        return InvalidGameOptionsError("Decks must not contain duplicate cards", "decks")
    return None


# --- submit_cards / submit_random_cards ---------------------------------------

def check_can_submit(state: GameState, player_index: int) -> CardCzarError | None:
    """Rule #4: a seated non-judge who has not yet played, while players submit."""
    error = check_phase(state, Phase.PLAYERS_SUBMITTING, "play white cards")
    if error:
        return error
    if not 0 <= player_index < len(state.players):
        return InvalidPlayerError(player_index)
    if player_index == state.current_judge_index:
        return JudgeCannotSubmitError()
    if state.players[player_index].submission:
        return AlreadySubmittedError()
    return None


def check_submission_count(
    state: GameState, card_indexes: Sequence[int],
) -> CardCzarError | None:
    """Rule #5: exactly `blanks` cards per submission."""
    if len(card_indexes) != state.blanks:
        return InvalidSubmissionCountError(state.blanks, len(card_indexes))
    return None


# --- choose_winner ------------------------------------------------------------

def check_can_choose_winner(state: GameState) -> CardCzarError | None:
    """Rule #6: judge chooses only once every non-judge has played."""
    error = check_phase(state, Phase.JUDGE_CHOOSING, "choose a winner")
    if error:
        return error
    pending = state.pending_players
    if pending:
        return SubmissionsIncompleteError(len(pending))
    return None


def check_winner(state: GameState, winner_id: str) -> CardCzarError | None:
    """Rule #7: the winner is a seated player other than the judge."""
    index = state.player_index_of(winner_id)
    if index is None or index == state.current_judge_index:
        return InvalidWinnerError(winner_id)
    return None


# --- end ----------------------------------------------------------------------

def check_can_end(state: GameState) -> CardCzarError | None:
    """Rule #8: FINISHED is reached once."""
    if state.phase.is_terminal:
        return AlreadyFinishedError()
    return None
