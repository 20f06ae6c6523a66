"""Card ORM — catalog entry for a black (prompt) or white (answer) card.

Invariants:
    - kind is "black" or "white"
    - text is 1..MAX_CARD_TEXT_LENGTH chars, expansion non-empty (validated by
      SqlCardCatalog)
    - blanks >= 1 for black cards, 0 for white cards

Design Decisions:
    - Single table with a kind discriminator: both variants share every column
      but blanks, and the catalog always filters by kind + expansion
"""

from sqlalchemy import Integer, String, Index
from sqlalchemy.orm import Mapped, mapped_column

from cardczar.core.domain_types import MAX_CARD_TEXT_LENGTH
from cardczar.db.base import Base


class Card(Base):
    """Card catalog row."""
    __tablename__ = "cards"
    __table_args__ = (
        Index("ix_cards_kind_expansion", "kind", "expansion"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    text: Mapped[str] = mapped_column(String(MAX_CARD_TEXT_LENGTH), nullable=False)
    expansion: Mapped[str] = mapped_column(String(100), nullable=False)
    blanks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
