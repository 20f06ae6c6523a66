"""Game State ORM — persists one game session's round state.

Invariants:
    - id is UUID primary key (client-side default)
    - snapshot holds game_state_to_snapshot() output; it is the source of truth
    - version increments on every successful update (optimistic concurrency)
    - finished mirrors phase == "finished" and is written in the same UPDATE

Design Decisions:
    - JSON column for the snapshot: the state is always loaded and saved whole,
      never queried field by field
    - phase/current_round/finished denormalized: list and filter games without
      decoding snapshots
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from cardczar.db.base import Base


class GameStateRecord(Base):
    """Persisted game session state."""
    __tablename__ = "game_states"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    phase: Mapped[str] = mapped_column(
        String(30), nullable=False, default="dealing_wait",
    )
    finished: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    current_round: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    snapshot: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=dict,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    finished_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
