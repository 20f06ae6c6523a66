"""Game State Snapshot — serialization / deserialization for GameState.

Invariants:
    - to_snapshot produces a JSON-safe dict (no dataclasses, no Enums, no UUIDs)
    - from_snapshot reconstructs a GameState from any valid snapshot dict
    - Missing keys fall back to GameState defaults (forward-compatible)
    - from_snapshot(to_snapshot(s)) == s

Design Decisions:
    - Separate module from game_state.py: persistence shape evolves independently
      of the rules
    - Cards serialized by value (id, text, expansion, blanks): the snapshot is
      self-contained, no catalog lookup needed to restore a game
"""

from uuid import UUID

from cardczar.core.cards import BlackCard, UserRef, WhiteCard
from cardczar.core.domain_types import (
    DEFAULT_HAND_SIZE, UNLIMITED_ROUNDS, GameStateId, Phase,
)
from cardczar.core.game_state import GameState, Player

_SIMPLE_FIELDS: dict[str, object] = {
    "owner_id": None,
    "current_judge_index": 0,
    "hand_size": DEFAULT_HAND_SIZE,
    "current_round": 0,
    "max_rounds": UNLIMITED_ROUNDS,
    "version": 0,
}


def black_to_dict(card: BlackCard) -> dict:
    return {
        "id": card.card_id, "text": card.text,
        "blanks": card.blanks, "expansion": card.expansion,
    }


def white_to_dict(card: WhiteCard) -> dict:
    return {"id": card.card_id, "text": card.text, "expansion": card.expansion}


def black_from_dict(data: dict) -> BlackCard:
    return BlackCard(
        card_id=data["id"], text=data["text"],
        blanks=data.get("blanks", 1), expansion=data.get("expansion", ""),
    )


def white_from_dict(data: dict) -> WhiteCard:
    return WhiteCard(
        card_id=data["id"], text=data["text"], expansion=data.get("expansion", ""),
    )


def _player_to_dict(player: Player) -> dict:
    return {
        "user": {"id": player.user.id, "name": player.user.name},
        "hand": [white_to_dict(c) for c in player.hand],
        "submission": [white_to_dict(c) for c in player.submission],
        "points": [black_to_dict(c) for c in player.points],
    }


def _player_from_dict(data: dict) -> Player:
    user = data.get("user", {})
    return Player(
        user=UserRef(id=user["id"], name=user.get("name", "")),
        hand=[white_from_dict(c) for c in data.get("hand", [])],
        submission=[white_from_dict(c) for c in data.get("submission", [])],
        points=[black_from_dict(c) for c in data.get("points", [])],
    )


def game_state_to_snapshot(state: GameState) -> dict:
    """Serialize GameState to JSON-safe dict. Pure, no IO."""
    return {
        "id": str(state.id) if state.id is not None else None,
        "phase": state.phase.value,
        "players": [_player_to_dict(p) for p in state.players],
        "black_deck": [black_to_dict(c) for c in state.black_deck],
        "white_deck": [white_to_dict(c) for c in state.white_deck],
        "discard_pile": [white_to_dict(c) for c in state.discard_pile],
        "black_card_in_play": (
            black_to_dict(state.black_card_in_play)
            if state.black_card_in_play is not None else None
        ),
        **{key: getattr(state, key) for key in _SIMPLE_FIELDS},
    }


def game_state_from_snapshot(data: dict) -> GameState:
    """Reconstruct GameState from snapshot dict. Pure, no IO."""
    state = GameState()
    if not data:
        return state

    if data.get("id"):
        state.id = GameStateId(UUID(data["id"]))
    phase_val = data.get("phase")
    if phase_val:
        state.phase = Phase(phase_val)

    state.players = [_player_from_dict(p) for p in data.get("players", [])]
    state.black_deck = [black_from_dict(c) for c in data.get("black_deck", [])]
    state.white_deck = [white_from_dict(c) for c in data.get("white_deck", [])]
    state.discard_pile = [white_from_dict(c) for c in data.get("discard_pile", [])]
    in_play = data.get("black_card_in_play")
    state.black_card_in_play = black_from_dict(in_play) if in_play else None

    for key, default in _SIMPLE_FIELDS.items():
        setattr(state, key, data.get(key, default))
    return state
