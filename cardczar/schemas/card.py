"""Card Schemas — catalog write requests.

Invariants:
    - text stripped, 1..MAX_CARD_TEXT_LENGTH chars; expansion stripped, non-empty
    - blanks 1..MAX_BLANKS for black cards
"""

from pydantic import BaseModel, Field, field_validator

from cardczar.core.domain_types import MAX_BLANKS, MAX_CARD_TEXT_LENGTH


class WhiteCardCreate(BaseModel):
    text: str = Field(min_length=1, max_length=MAX_CARD_TEXT_LENGTH)
    expansion: str = Field(min_length=1, max_length=100)

    @field_validator("text", "expansion")
    @classmethod
    def strip_value(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("value cannot be empty or whitespace")
        return v


class BlackCardCreate(WhiteCardCreate):
    blanks: int = Field(1, ge=1, le=MAX_BLANKS)


class CardResponse(BaseModel):
    id: int
    kind: str
    text: str
    expansion: str
    blanks: int = 0
