"""Domain Types — identity types, phase enum and game-wide limits.

Invariants:
    - GameStateId wraps UUID — never use bare UUID in domain logic
    - Phase is a closed str Enum — no raw string matching on phase names
    - Hand size is bounded MIN_HAND_SIZE..MAX_HAND_SIZE (inclusive)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (snapshots + SSE payloads)
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

GameStateId = NewType("GameStateId", UUID)
UserId = NewType("UserId", str)


# ─── Limits ──────────────────────────────────────────────────────

MIN_PLAYERS: int = 3
MIN_HAND_SIZE: int = 5
MAX_HAND_SIZE: int = 30
DEFAULT_HAND_SIZE: int = 10
UNLIMITED_ROUNDS: int = 0
MAX_CARD_TEXT_LENGTH: int = 120
MAX_BLANKS: int = 5


# ─── Enums ───────────────────────────────────────────────────────

class Phase(str, Enum):
    """Round lifecycle. FINISHED is terminal."""
    DEALING_WAIT = "dealing_wait"
    PLAYERS_SUBMITTING = "players_submitting"
    JUDGE_CHOOSING = "judge_choosing"
    FINISHED = "finished"

    @property
    def is_terminal(self) -> bool:
        return self is Phase.FINISHED


class CardKind(str, Enum):
    """Card variant tag — persisted in the cards table."""
    BLACK = "black"
    WHITE = "white"
