"""Card Catalog — SQL-backed CardCatalog plus card creation and folder import.

Invariants:
    - Card text is non-empty and at most max_text_length chars; expansion non-empty
    - Black cards carry 1..max_blanks blanks; white cards carry none
    - Expansion queries keep catalog order (by id) and skip unknown expansions
      with a warning instead of failing
    - Returned cards are immutable core values (BlackCard / WhiteCard)

Design Decisions:
    - Validation here, not in the ORM model: the catalog is the only writer
    - Folder import reads plain text (one card per line): `blacks.txt`,
      `whites.txt`; a black card's blanks are its "_" runs (at least 1)
    - Folder import is all-or-nothing per folder: validate every line, then
      one session and one commit
"""

import logging
import re
from pathlib import Path
from typing import Sequence

from sqlalchemy import select

from cardczar.core.cards import BlackCard, WhiteCard
from cardczar.core.domain_types import MAX_BLANKS, MAX_CARD_TEXT_LENGTH, CardKind
from cardczar.core.errors import InvalidCardError
from cardczar.infrastructure.database import DatabaseSessionManager
from cardczar.models.card import Card

logger = logging.getLogger(__name__)

BLACKS_FILE = "blacks.txt"
WHITES_FILE = "whites.txt"
_BLANK_RUN = re.compile(r"_+")


class SqlCardCatalog:
    """CardCatalog persisted in the cards table."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        max_text_length: int = MAX_CARD_TEXT_LENGTH,
        max_blanks: int = MAX_BLANKS,
    ) -> None:
        self._db = db
        self.max_text_length = max_text_length
        self.max_blanks = max_blanks

    # -- Creation ---------------------------------------------------------------

    async def create_white(self, text: str, expansion: str) -> WhiteCard:
        row = await self._insert(self._white_row(text, expansion))
        return _to_white(row)

    async def create_black(self, text: str, expansion: str, blanks: int = 1) -> BlackCard:
        row = await self._insert(self._black_row(text, expansion, blanks))
        return _to_black(row)

    async def import_folder(self, folder: str | Path, expansion: str) -> tuple[int, int]:
        """Load blacks.txt / whites.txt from `folder`. Returns (blacks, whites) created.

        A missing folder is logged and imports nothing. Every line is validated
        before the first insert, and all cards land in one commit: an invalid
        card leaves the catalog unchanged.
        """
        path = Path(folder)
        if not path.is_dir():
            logger.warning(f"Card folder {path} not found, skipping '{expansion}'")
            return 0, 0
        black_rows = [
            self._black_row(line, expansion, count_blanks(line))
            for line in _read_card_lines(path / BLACKS_FILE)
        ]
        white_rows = [
            self._white_row(line, expansion)
            for line in _read_card_lines(path / WHITES_FILE)
        ]
        async with self._db.session() as session:
            session.add_all(black_rows + white_rows)
            await session.commit()
        blacks, whites = len(black_rows), len(white_rows)
        logger.info(f"Imported expansion '{expansion}': {blacks} black, {whites} white")
        return blacks, whites

    # -- CardCatalog protocol ---------------------------------------------------

    async def black_cards_for_expansions(
        self, expansions: Sequence[str],
    ) -> list[BlackCard]:
        rows = await self._by_kind(CardKind.BLACK, expansions)
        return [_to_black(r) for r in rows]

    async def white_cards_for_expansions(
        self, expansions: Sequence[str],
    ) -> list[WhiteCard]:
        rows = await self._by_kind(CardKind.WHITE, expansions)
        return [_to_white(r) for r in rows]

    async def available_expansions(self) -> list[str]:
        async with self._db.session() as session:
            result = await session.execute(
                select(Card.expansion).distinct(),
            )
            return sorted(result.scalars().all())

    # -- Internal ---------------------------------------------------------------

    def _white_row(self, text: str, expansion: str) -> Card:
        self._validate(text, expansion)
        return Card(kind=CardKind.WHITE.value, text=text, expansion=expansion, blanks=0)

    def _black_row(self, text: str, expansion: str, blanks: int) -> Card:
        self._validate(text, expansion)
        if blanks < 1:
            raise InvalidCardError("Black cards need to have at least 1 blank", "blanks")
        if blanks > self.max_blanks:
            raise InvalidCardError(
                f"Black cards blanks maximum is {self.max_blanks}, but got {blanks}",
                "blanks",
            )
        return Card(kind=CardKind.BLACK.value, text=text, expansion=expansion, blanks=blanks)

    def _validate(self, text: str, expansion: str) -> None:
        if not text or not text.strip():
            raise InvalidCardError("Card text cannot be empty", "text")
        if len(text) > self.max_text_length:
            raise InvalidCardError(
                f"Card text cannot be longer than {self.max_text_length}", "text",
            )
        if not expansion or not expansion.strip():
            raise InvalidCardError("Expansion cannot be empty", "expansion")

    async def _insert(self, row: Card) -> Card:
        async with self._db.session() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
        return row

    async def _by_kind(self, kind: CardKind, expansions: Sequence[str]) -> list[Card]:
        wanted = list(dict.fromkeys(expansions))
        async with self._db.session() as session:
            result = await session.execute(
                select(Card)
                .where(Card.kind == kind.value, Card.expansion.in_(wanted))
                .order_by(Card.id),
            )
            rows = list(result.scalars().all())
        found = {r.expansion for r in rows}
        for exp in wanted:
            if exp not in found:
                logger.warning(f"Could not find {kind.value} cards from expansion {exp}")
        return rows


def count_blanks(text: str) -> int:
    """Number of "_" runs in a prompt, at least 1."""
    return max(1, len(_BLANK_RUN.findall(text)))


def _read_card_lines(path: Path) -> list[str]:
    if not path.is_file():
        return []
    lines = (line.strip() for line in path.read_text(encoding="utf-8").splitlines())
    return [line for line in lines if line and not line.startswith("#")]


def _to_black(row: Card) -> BlackCard:
    return BlackCard(card_id=row.id, text=row.text, blanks=row.blanks, expansion=row.expansion)


def _to_white(row: Card) -> WhiteCard:
    return WhiteCard(card_id=row.id, text=row.text, expansion=row.expansion)
