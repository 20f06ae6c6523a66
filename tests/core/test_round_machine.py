"""Round State Machine — pure tests for the deal → play → judge → score cycle.

Invariants:
    - A rejected operation leaves the GameState equal to its pre-call clone
    - Cards are conserved: every card id stays owned by exactly one place
    - Judge rotates (i + 1) mod n after every scored prompt
    - Running out of cards while re-dealing finishes the game, never raises

Tests cover:
    - start_round dealing, first judge (fixed and random), option/deck rejection
    - submit_cards ordering, role/phase/count/index rejection, JUDGE_CHOOSING entry
    - submit_random_cards drawing indexes through the random source
    - choose_winner scoring, rotation, refill and every termination condition
    - end from every phase, AlreadyFinished afterwards
"""

import pytest

from cardczar.core import round_machine
from cardczar.core.domain_types import Phase
from cardczar.core.errors import (
    AlreadyFinishedError,
    AlreadySubmittedError,
    InsufficientCardsError,
    InvalidCardIndexError,
    InvalidGameOptionsError,
    InvalidPlayerError,
    InvalidSubmissionCountError,
    InvalidWinnerError,
    JudgeCannotSubmitError,
    PhaseViolationError,
    SubmissionsIncompleteError,
)
from cardczar.core.game_state import GameState
from tests.core.factories import (
    ANA, BO, CY, DEE, USERS,
    ScriptedRandom,
    card_census,
    first_non_judge,
    make_blacks,
    make_whites,
    play_everyone,
    started_game,
)


# ─── start_round ─────────────────────────────────────────────────

def test_start_puts_first_prompt_in_play():
    state = started_game()
    assert state.phase == Phase.PLAYERS_SUBMITTING
    assert state.current_round == 1
    assert state.current_judge_index == 0
    assert state.black_card_in_play.card_id == 1
    assert [c.card_id for c in state.black_deck] == list(range(2, 9))


def test_start_deals_hands_from_front_in_seat_order():
    state = started_game(hand_size=5, whites=35)
    whites = make_whites(35)
    assert state.players[0].hand == whites[0:5]
    assert state.players[1].hand == whites[5:10]
    assert state.players[2].hand == whites[10:15]
    assert state.white_deck == whites[15:]


def test_start_seats_players_with_empty_submissions_and_points():
    state = started_game()
    assert [p.user for p in state.players] == USERS
    assert all(p.submission == [] and p.points == [] for p in state.players)


def test_start_random_first_judge_uses_random_source():
    rng = ScriptedRandom(randrange_values=[2])
    state = round_machine.start_round(
        GameState(), USERS, make_blacks(8), make_whites(40), 5,
        random_first_judge=True, rng=rng,
    )
    assert state.current_judge_index == 2
    assert state.current_judge.user == CY


def test_start_random_first_judge_without_rng_rejected():
    state = GameState()
    with pytest.raises(InvalidGameOptionsError):
        round_machine.start_round(
            state, USERS, make_blacks(8), make_whites(40), 5, random_first_judge=True,
        )
    assert state == GameState()


def test_start_too_few_players_rejected_without_mutation():
    state = GameState()
    with pytest.raises(InvalidGameOptionsError) as exc:
        round_machine.start_round(state, [ANA, BO], make_blacks(8), make_whites(40), 5)
    assert exc.value.field == "players"
    assert state == GameState()


def test_start_duplicate_players_rejected():
    with pytest.raises(InvalidGameOptionsError):
        round_machine.start_round(
            GameState(), [ANA, BO, ANA], make_blacks(8), make_whites(40), 5,
        )


@pytest.mark.parametrize("hand_size", [4, 31])
def test_start_hand_size_out_of_range_rejected(hand_size):
    with pytest.raises(InvalidGameOptionsError) as exc:
        round_machine.start_round(
            GameState(), USERS, make_blacks(8), make_whites(200), hand_size,
        )
    assert exc.value.field == "hand_size"


def test_start_negative_max_rounds_rejected():
    with pytest.raises(InvalidGameOptionsError):
        round_machine.start_round(
            GameState(), USERS, make_blacks(8), make_whites(40), 5, max_rounds=-1,
        )


def test_start_white_deck_too_small_rejected():
    with pytest.raises(InsufficientCardsError):
        round_machine.start_round(GameState(), USERS, make_blacks(8), make_whites(14), 5)


def test_start_empty_black_deck_rejected():
    with pytest.raises(InsufficientCardsError):
        round_machine.start_round(GameState(), USERS, [], make_whites(40), 5)


def test_start_twice_is_phase_violation():
    state = started_game()
    before = state.clone()
    with pytest.raises(PhaseViolationError):
        round_machine.start_round(state, USERS, make_blacks(8), make_whites(40), 5)
    assert state == before


# ─── submit_cards ────────────────────────────────────────────────

def test_submit_moves_cards_from_hand_to_submission():
    state = started_game()
    hand = list(state.players[1].hand)
    round_machine.submit_cards(state, 1, [2])
    assert state.players[1].submission == [hand[2]]
    assert state.players[1].hand == hand[:2] + hand[3:]
    assert state.phase == Phase.PLAYERS_SUBMITTING


def test_last_submission_moves_to_judge_choosing():
    state = started_game()
    round_machine.submit_cards(state, 1, [0])
    round_machine.submit_cards(state, 2, [0])
    assert state.phase == Phase.JUDGE_CHOOSING
    assert state.pending_players == []


def test_submit_keeps_index_order_for_multi_blank_prompt():
    state = started_game(blanks=2)
    hand = list(state.players[2].hand)
    round_machine.submit_cards(state, 2, [3, 1])
    assert state.players[2].submission == [hand[3], hand[1]]


def test_judge_cannot_submit():
    state = started_game()
    before = state.clone()
    with pytest.raises(JudgeCannotSubmitError):
        round_machine.submit_cards(state, 0, [0])
    assert state == before


def test_submit_twice_rejected():
    state = started_game(blanks=1)
    round_machine.submit_cards(state, 1, [0])
    before = state.clone()
    with pytest.raises(AlreadySubmittedError):
        round_machine.submit_cards(state, 1, [1])
    assert state == before


@pytest.mark.parametrize("indexes", [[], [0, 1]])
def test_submit_wrong_count_rejected(indexes):
    state = started_game(blanks=1)
    before = state.clone()
    with pytest.raises(InvalidSubmissionCountError) as exc:
        round_machine.submit_cards(state, 1, indexes)
    assert exc.value.expected == 1
    assert state == before


def test_submit_out_of_range_index_rejected():
    state = started_game(hand_size=5)
    before = state.clone()
    with pytest.raises(InvalidCardIndexError):
        round_machine.submit_cards(state, 1, [5])
    assert state == before


def test_submit_duplicate_index_rejected():
    state = started_game(blanks=2)
    before = state.clone()
    with pytest.raises(InvalidCardIndexError):
        round_machine.submit_cards(state, 1, [1, 1])
    assert state == before


def test_submit_unknown_seat_rejected():
    state = started_game()
    with pytest.raises(InvalidPlayerError):
        round_machine.submit_cards(state, 7, [0])


def test_submit_while_judge_choosing_is_phase_violation():
    state = play_everyone(started_game())
    with pytest.raises(PhaseViolationError):
        round_machine.submit_cards(state, 1, [0])


def test_submit_before_start_is_phase_violation():
    with pytest.raises(PhaseViolationError):
        round_machine.submit_cards(GameState(), 0, [0])


# ─── submit_random_cards ─────────────────────────────────────────

def test_submit_random_plays_sampled_indexes():
    state = started_game(blanks=2)
    hand = list(state.players[1].hand)
    rng = ScriptedRandom(samples=[[4, 0]])
    round_machine.submit_random_cards(state, 1, rng)
    assert state.players[1].submission == [hand[4], hand[0]]
    assert rng.sample_calls == [(5, 2)]


def test_submit_random_for_judge_rejected_before_sampling():
    state = started_game()
    rng = ScriptedRandom()
    with pytest.raises(JudgeCannotSubmitError):
        round_machine.submit_random_cards(state, 0, rng)
    assert rng.sample_calls == []


def test_submit_random_completes_round():
    state = started_game()
    round_machine.submit_cards(state, 1, [0])
    round_machine.submit_random_cards(state, 2, ScriptedRandom(samples=[[3]]))
    assert state.phase == Phase.JUDGE_CHOOSING


# ─── choose_winner ───────────────────────────────────────────────

def test_choose_winner_scores_and_starts_next_prompt():
    state = play_everyone(started_game())
    prompt = state.black_card_in_play
    round_machine.choose_winner(state, BO.id)

    assert state.players[1].points == [prompt]
    assert state.phase == Phase.PLAYERS_SUBMITTING
    assert state.current_round == 2
    assert state.current_judge_index == 1
    assert state.black_card_in_play.card_id == 2
    assert len(state.discard_pile) == 2
    assert all(p.submission == [] for p in state.players)
    assert all(len(p.hand) == state.hand_size for p in state.players)


def test_choose_winner_refills_from_front_of_white_deck():
    state = play_everyone(started_game())
    next_whites = list(state.white_deck[:2])
    round_machine.choose_winner(state, CY.id)
    assert state.players[1].hand[-1] == next_whites[0]
    assert state.players[2].hand[-1] == next_whites[1]


def test_choose_winner_judge_rejected():
    state = play_everyone(started_game())
    before = state.clone()
    with pytest.raises(InvalidWinnerError):
        round_machine.choose_winner(state, ANA.id)
    assert state == before


def test_choose_winner_unknown_user_rejected():
    state = play_everyone(started_game())
    with pytest.raises(InvalidWinnerError):
        round_machine.choose_winner(state, "u-nobody")


def test_choose_winner_while_submitting_is_phase_violation():
    state = started_game()
    with pytest.raises(PhaseViolationError):
        round_machine.choose_winner(state, BO.id)


def test_choose_winner_with_pending_submission_rejected():
    state = started_game()
    round_machine.submit_cards(state, 1, [0])
    state.phase = Phase.JUDGE_CHOOSING
    before = state.clone()
    with pytest.raises(SubmissionsIncompleteError) as exc:
        round_machine.choose_winner(state, BO.id)
    assert exc.value.pending == 1
    assert state == before


def test_judge_rotates_around_the_table():
    state = started_game(players=[ANA, BO, CY, DEE])
    judges = [state.current_judge_index]
    for _ in range(4):
        play_everyone(state)
        winner = state.players[first_non_judge(state)].user.id
        round_machine.choose_winner(state, winner)
        judges.append(state.current_judge_index)
    assert judges == [0, 1, 2, 3, 0]


def test_judge_rotation_continues_from_random_first_judge():
    state = round_machine.start_round(
        GameState(), USERS, make_blacks(8), make_whites(40), 5,
        random_first_judge=True, rng=ScriptedRandom(randrange_values=[2]),
    )
    judges = [state.current_judge_index]
    for _ in range(2):
        play_everyone(state)
        winner = state.players[first_non_judge(state)].user.id
        round_machine.choose_winner(state, winner)
        judges.append(state.current_judge_index)
    assert judges == [2, 0, 1]


def test_prompt_with_more_blanks_than_hand_size_rejected():
    state = GameState()
    with pytest.raises(InvalidGameOptionsError) as exc:
        round_machine.start_round(
            state, USERS, make_blacks(8, blanks=6), make_whites(40), 5,
        )
    assert exc.value.field == "decks"
    assert state == GameState()


def test_max_rounds_finishes_after_scoring():
    state = play_everyone(started_game(max_rounds=1))
    round_machine.choose_winner(state, BO.id)
    assert state.phase == Phase.FINISHED
    assert state.black_card_in_play is None
    assert state.players[1].score == 1
    assert state.winners() == [BO]


def test_last_black_card_finishes_after_scoring():
    state = play_everyone(started_game(blacks=1))
    assert state.black_deck == []
    round_machine.choose_winner(state, CY.id)
    assert state.phase == Phase.FINISHED
    assert state.players[2].score == 1
    assert state.current_judge_index == 0


def test_empty_white_deck_finishes_after_scoring():
    state = play_everyone(started_game(whites=15))
    assert state.white_deck == []
    round_machine.choose_winner(state, BO.id)
    assert state.phase == Phase.FINISHED
    assert state.players[1].score == 1


def test_white_shortfall_finishes_without_partial_refill():
    state = play_everyone(started_game(whites=16))
    assert len(state.white_deck) == 1
    round_machine.choose_winner(state, BO.id)
    assert state.phase == Phase.FINISHED
    assert len(state.white_deck) == 1
    assert [len(p.hand) for p in state.players] == [5, 4, 4]


def test_tied_winners_in_seat_order():
    state = play_everyone(started_game(max_rounds=2))
    round_machine.choose_winner(state, BO.id)
    play_everyone(state)
    round_machine.choose_winner(state, CY.id)
    assert state.is_finished
    assert state.winners() == [BO, CY]


# ─── end ─────────────────────────────────────────────────────────

def test_end_before_start_finishes():
    state = round_machine.end(GameState())
    assert state.phase == Phase.FINISHED
    assert state.winners() == []


def test_end_mid_round_returns_unjudged_cards():
    state = started_game()
    prompt = state.black_card_in_play
    played = state.players[1].hand[0]
    round_machine.submit_cards(state, 1, [0])
    round_machine.end(state)

    assert state.phase == Phase.FINISHED
    assert state.black_card_in_play is None
    assert state.black_deck[0] == prompt
    assert state.discard_pile == [played]
    assert state.players[1].submission == []


def test_end_twice_rejected():
    state = round_machine.end(started_game())
    with pytest.raises(AlreadyFinishedError):
        round_machine.end(state)


def test_finished_game_rejects_every_operation():
    state = round_machine.end(started_game())
    before = state.clone()
    with pytest.raises(AlreadyFinishedError):
        round_machine.submit_cards(state, 1, [0])
    with pytest.raises(AlreadyFinishedError):
        round_machine.submit_random_cards(state, 1, ScriptedRandom())
    with pytest.raises(AlreadyFinishedError):
        round_machine.choose_winner(state, BO.id)
    with pytest.raises(AlreadyFinishedError):
        round_machine.start_round(state, USERS, make_blacks(8), make_whites(40), 5)
    assert state == before


# ─── Conservation ────────────────────────────────────────────────

def test_cards_conserved_through_a_full_game():
    state = started_game(blacks=8, whites=35)
    census = card_census(state)
    assert sum(census.values()) == 8 + 35
    assert max(census.values()) == 1

    while not state.is_finished:
        play_everyone(state)
        assert card_census(state) == census
        round_machine.choose_winner(state, state.players[first_non_judge(state)].user.id)
        assert card_census(state) == census

    assert state.current_round == 8
    assert sum(p.score for p in state.players) == 8


def test_cards_conserved_when_ended_mid_round():
    state = started_game()
    census = card_census(state)
    round_machine.submit_cards(state, 2, [1])
    round_machine.end(state)
    assert card_census(state) == census
