"""Card Routes — list expansions and add cards to the catalog.

Invariants:
    - Card text/expansion/blanks validated twice: Pydantic at the boundary,
      SqlCardCatalog before insert (single writer)
    - Expansions are returned sorted
"""

from fastapi import APIRouter, Depends, status

from cardczar.api.dependencies import get_card_catalog, get_current_user
from cardczar.core.cards import UserRef
from cardczar.schemas.card import BlackCardCreate, CardResponse, WhiteCardCreate
from cardczar.services.card_catalog import SqlCardCatalog

router = APIRouter(prefix="/api/v1/cards", tags=["cards"])


@router.get("/expansions")
async def list_expansions(
    user: UserRef = Depends(get_current_user),
    catalog: SqlCardCatalog = Depends(get_card_catalog),
):
    """Expansions available for starting a game."""
    return {"expansions": await catalog.available_expansions()}


@router.post(
    "/black", response_model=CardResponse, status_code=status.HTTP_201_CREATED,
)
async def create_black_card(
    body: BlackCardCreate,
    user: UserRef = Depends(get_current_user),
    catalog: SqlCardCatalog = Depends(get_card_catalog),
):
    card = await catalog.create_black(body.text, body.expansion, body.blanks)
    return CardResponse(
        id=card.card_id, kind=card.kind.value, text=card.text,
        expansion=card.expansion, blanks=card.blanks,
    )


@router.post(
    "/white", response_model=CardResponse, status_code=status.HTTP_201_CREATED,
)
async def create_white_card(
    body: WhiteCardCreate,
    user: UserRef = Depends(get_current_user),
    catalog: SqlCardCatalog = Depends(get_card_catalog),
):
    card = await catalog.create_white(body.text, body.expansion)
    return CardResponse(
        id=card.card_id, kind=card.kind.value, text=card.text,
        expansion=card.expansion,
    )
