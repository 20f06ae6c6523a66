"""Game State View — what each viewer may see.

Invariants:
    - A viewer sees only their own hand
    - Submissions are revealed only while the judge is choosing
    - Winners are reported only once the game is finished
"""

from cardczar.core import round_machine
from cardczar.core.game_state import GameState
from cardczar.core.game_state_view import build_game_view
from tests.core.factories import ANA, BO, CY, play_everyone, started_game


def test_viewer_sees_own_hand_only():
    state = started_game()
    view = build_game_view(state, BO.id)
    assert view["my_player_index"] == 1
    assert [c["id"] for c in view["my_hand"]] == [c.card_id for c in state.players[1].hand]
    assert "hand" not in view["players"][0]


def test_spectator_has_no_hand():
    view = build_game_view(started_game(), "u-spectator")
    assert view["my_player_index"] is None
    assert view["my_hand"] == []


def test_submissions_hidden_while_submitting():
    state = started_game()
    round_machine.submit_cards(state, 1, [0])
    view = build_game_view(state, ANA.id)
    assert view["submissions"] == []
    assert view["players"][1]["has_submitted"] is True


def test_submissions_revealed_to_judge_by_player():
    state = play_everyone(started_game())
    view = build_game_view(state, ANA.id)
    assert [s["player_id"] for s in view["submissions"]] == [BO.id, CY.id]
    assert view["submissions"][0]["cards"][0]["id"] == state.players[1].submission[0].card_id


def test_view_reports_judge_prompt_and_deck_sizes():
    state = started_game()
    view = build_game_view(state)
    assert view["phase"] == "players_submitting"
    assert view["current_judge"] == "Ana"
    assert view["players"][0]["is_judge"] is True
    assert view["black_card_in_play"]["blanks"] == 1
    assert view["black_deck_size"] == len(state.black_deck)
    assert view["white_deck_size"] == len(state.white_deck)


def test_winners_only_when_finished():
    state = play_everyone(started_game(max_rounds=1))
    assert build_game_view(state)["winners"] == []
    round_machine.choose_winner(state, CY.id)
    view = build_game_view(state)
    assert view["winners"] == [CY.id]
    assert view["players"][2]["score"] == 1


def test_empty_game_view():
    view = build_game_view(GameState())
    assert view["id"] is None
    assert view["players"] == []
    assert view["current_judge"] is None
    assert view["current_judge_index"] is None
