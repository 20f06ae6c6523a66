"""Cards — immutable black (prompt) and white (answer) card values.

Invariants:
    - Cards are frozen: a card never changes after the catalog hands it out
    - Equality includes card_id, so two cards with the same text stay distinct
    - BlackCard.blanks >= 1 (enforced by the catalog and check_decks); WhiteCard
      has no blanks

Design Decisions:
    - Two frozen dataclasses joined by a Card union (tagged by `kind`) instead of
      one record with a blanks field that only means something for black cards
"""

from dataclasses import dataclass, field
from typing import Union

from cardczar.core.domain_types import CardKind, UserId


@dataclass(frozen=True)
class BlackCard:
    """Prompt card — defines how many white cards each player must play."""
    card_id: int
    text: str
    blanks: int = 1
    expansion: str = field(default="", compare=False)

    @property
    def kind(self) -> CardKind:
        return CardKind.BLACK


@dataclass(frozen=True)
class WhiteCard:
    """Answer card — held in hands, played into submissions."""
    card_id: int
    text: str
    expansion: str = field(default="", compare=False)

    @property
    def kind(self) -> CardKind:
        return CardKind.WHITE


Card = Union[BlackCard, WhiteCard]


@dataclass(frozen=True)
class UserRef:
    """Opaque reference to a user owned by the external identity service.

    Only `id` takes part in equality; the display name is informational.
    """
    id: UserId
    name: str = field(default="", compare=False)
