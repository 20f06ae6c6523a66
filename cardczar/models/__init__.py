"""ORM Models — SQLAlchemy declarative models for persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - GameStateRecord stores the full GameState as a JSON snapshot; columns
      next to it (phase, finished, current_round) are denormalized for queries

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from cardczar.models.game_state import GameStateRecord  # noqa: F401
from cardczar.models.card import Card  # noqa: F401
