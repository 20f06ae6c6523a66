"""Game State Schemas — Pydantic models for game actions at the API boundary.

Invariants:
    - StartGameRequest.hand_size within MIN_HAND_SIZE..MAX_HAND_SIZE, max_rounds >= 0
    - StartGameRequest.players: distinct user ids, >= MIN_PLAYERS
    - Card indexes are non-negative; upper bound checked by the round machine
      against the player's actual hand

Design Decisions:
    - field_validator for side-effect-free transforms (strip, dedupe) — keeps models pure
    - Boundary checks repeat the core's limits so malformed requests fail with
      field-level detail before a game lock is taken
"""

from pydantic import BaseModel, Field, field_validator

from cardczar.core.domain_types import (
    DEFAULT_HAND_SIZE, MAX_HAND_SIZE, MIN_HAND_SIZE, MIN_PLAYERS,
)


class PlayerRef(BaseModel):
    """A user seated at the table, as known to the identity service."""
    id: str = Field(min_length=1, max_length=64)
    name: str = Field("", max_length=36)


class StartGameRequest(BaseModel):
    """Options for dealing the first round."""
    players: list[PlayerRef] = Field(min_length=MIN_PLAYERS)
    expansions: list[str] = Field(min_length=1)
    hand_size: int = Field(DEFAULT_HAND_SIZE, ge=MIN_HAND_SIZE, le=MAX_HAND_SIZE)
    random_first_judge: bool = False
    max_rounds: int = Field(0, ge=0)

    @field_validator("players")
    @classmethod
    def distinct_players(cls, v: list[PlayerRef]) -> list[PlayerRef]:
        if len({p.id for p in v}) != len(v):
            raise ValueError("players must be distinct users")
        return v

    @field_validator("expansions")
    @classmethod
    def strip_expansions(cls, v: list[str]) -> list[str]:
        cleaned = [e.strip() for e in v if e and e.strip()]
        if not cleaned:
            raise ValueError("select at least one expansion")
        return list(dict.fromkeys(cleaned))


class PlayCardsRequest(BaseModel):
    """Hand positions to play, in the order they fill the blanks."""
    card_indexes: list[int] = Field(min_length=1)

    @field_validator("card_indexes")
    @classmethod
    def non_negative(cls, v: list[int]) -> list[int]:
        if any(i < 0 for i in v):
            raise ValueError("card indexes must be >= 0")
        return v


class PlayRandomRequest(BaseModel):
    """Auto-play request issued by the timeout scheduler for a disengaged player."""
    player_id: str = Field(min_length=1, max_length=64)


class ChooseWinnerRequest(BaseModel):
    """Judge's pick for the current prompt."""
    winner_id: str = Field(min_length=1, max_length=64)


class GameStateCreated(BaseModel):
    """Response for a newly created game."""
    id: str
    phase: str
