"""Game State — per-session round state, pure dataclasses, no IO.

Invariants:
    - 0 <= current_judge_index < len(players) once players are seated
    - black_card_in_play is not None only in PLAYERS_SUBMITTING / JUDGE_CHOOSING
    - The judge's submission is always empty
    - A non-judge submission holds either 0 cards or exactly `blanks` cards
    - Every card is owned by exactly one of: a deck, a hand, a submission,
      the discard pile, or a player's points

Design Decisions:
    - Mutable dataclass (like the store's checked-out copy), mutated only by
      round_machine after all checks pass
    - clone() deep-copies so a checkout never aliases the canonical copy
"""

import copy
from dataclasses import dataclass, field

from cardczar.core.cards import BlackCard, UserRef, WhiteCard
from cardczar.core.domain_types import (
    DEFAULT_HAND_SIZE, UNLIMITED_ROUNDS, GameStateId, Phase, UserId,
)


@dataclass
class Player:
    """A seat in the game for the lifetime of the round."""
    user: UserRef
    hand: list[WhiteCard] = field(default_factory=list)
    submission: list[WhiteCard] = field(default_factory=list)
    points: list[BlackCard] = field(default_factory=list)

    @property
    def score(self) -> int:
        return len(self.points)

    @property
    def has_submitted(self) -> bool:
        return bool(self.submission)


@dataclass
class GameState:
    """One game session's round state."""
    id: GameStateId | None = None
    owner_id: UserId | None = None
    phase: Phase = Phase.DEALING_WAIT
    players: list[Player] = field(default_factory=list)
    black_deck: list[BlackCard] = field(default_factory=list)
    white_deck: list[WhiteCard] = field(default_factory=list)
    discard_pile: list[WhiteCard] = field(default_factory=list)
    current_judge_index: int = 0
    black_card_in_play: BlackCard | None = None
    hand_size: int = DEFAULT_HAND_SIZE
    current_round: int = 0
    max_rounds: int = UNLIMITED_ROUNDS
    version: int = 0

    @property
    def is_finished(self) -> bool:
        return self.phase.is_terminal

    @property
    def current_judge(self) -> Player | None:
        if not self.players:
            return None
        return self.players[self.current_judge_index]

    @property
    def blanks(self) -> int:
        return self.black_card_in_play.blanks if self.black_card_in_play else 0

    @property
    def max_rounds_reached(self) -> bool:
        return (
            self.max_rounds > UNLIMITED_ROUNDS
            and self.current_round >= self.max_rounds
        )

    @property
    def pending_players(self) -> list[int]:
        """Indexes of non-judge players who still owe cards for the prompt."""
        return [
            i for i, p in enumerate(self.players)
            if i != self.current_judge_index and len(p.submission) != self.blanks
        ]

    @property
    def all_players_submitted(self) -> bool:
        return self.black_card_in_play is not None and not self.pending_players

    def player_index_of(self, user_id: UserId) -> int | None:
        for i, p in enumerate(self.players):
            if p.user.id == user_id:
                return i
        return None

    def is_current_judge(self, user_id: UserId) -> bool:
        judge = self.current_judge
        return judge is not None and judge.user.id == user_id

    def scoreboard(self) -> list[tuple[UserRef, int]]:
        """(user, score) pairs in seating order."""
        return [(p.user, p.score) for p in self.players]

    def winners(self) -> list[UserRef]:
        """Users tied for the highest score. Empty before anyone scores."""
        best = max((p.score for p in self.players), default=0)
        if best == 0:
            return []
        return [p.user for p in self.players if p.score == best]

    def clone(self) -> "GameState":
        return copy.deepcopy(self)
