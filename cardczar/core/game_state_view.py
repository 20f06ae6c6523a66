"""Game State View — viewer-specific public projection of a GameState.

Invariants:
    - A viewer only ever sees their own hand
    - Submissions are hidden while players are still submitting; during
      JUDGE_CHOOSING they are revealed keyed by player id (the judge picks by id)
    - Decks are reported by size only

Design Decisions:
    - One pure builder used by both the REST GET and the SSE stream, so the two
      channels can never disagree on what a client may see
"""

from cardczar.core.domain_types import Phase
from cardczar.core.game_state import GameState
from cardczar.core.game_state_snapshot import black_to_dict, white_to_dict


def build_game_view(state: GameState, viewer_id: str | None = None) -> dict:
    """Project GameState for `viewer_id` (None = spectator). Pure, no IO."""
    judge = state.current_judge
    viewer_index = state.player_index_of(viewer_id) if viewer_id else None
    return {
        "id": str(state.id) if state.id is not None else None,
        "phase": state.phase.value,
        "owner_id": state.owner_id,
        "current_round": state.current_round,
        "max_rounds": state.max_rounds,
        "hand_size": state.hand_size,
        "current_judge_index": state.current_judge_index if judge else None,
        "current_judge": judge.user.name if judge else None,
        "black_card_in_play": (
            black_to_dict(state.black_card_in_play)
            if state.black_card_in_play is not None else None
        ),
        "players": [
            {
                "id": p.user.id,
                "name": p.user.name,
                "score": p.score,
                "has_submitted": p.has_submitted,
                "is_judge": i == state.current_judge_index,
            }
            for i, p in enumerate(state.players)
        ],
        "submissions": _visible_submissions(state),
        "black_deck_size": len(state.black_deck),
        "white_deck_size": len(state.white_deck),
        "discard_pile_size": len(state.discard_pile),
        "my_player_index": viewer_index,
        "my_hand": (
            [white_to_dict(c) for c in state.players[viewer_index].hand]
            if viewer_index is not None else []
        ),
        "winners": (
            [u.id for u in state.winners()] if state.phase is Phase.FINISHED else []
        ),
    }


def _visible_submissions(state: GameState) -> list[dict]:
    if state.phase is not Phase.JUDGE_CHOOSING:
        return []
    return [
        {
            "player_id": p.user.id,
            "cards": [white_to_dict(c) for c in p.submission],
        }
        for i, p in enumerate(state.players)
        if i != state.current_judge_index
    ]
