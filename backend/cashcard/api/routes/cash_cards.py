"""Cash Card Routes — HTTP surface for the five card operations.

Invariants:
    - Every route requires Basic authentication and the card-owner role (get_card_owner)
    - Routes only translate HTTP ↔ CardService; ownership rules live in the service
    - POST answers 201 with Location: /cards/{id} and no body; PUT/DELETE answer 204

Design Decisions:
    - page/size/sort taken as raw strings: the query resolver owns parsing and its errors
"""

from fastapi import APIRouter, Depends, Query, Response, status

from cashcard.api.dependencies import get_card_owner, get_card_service
from cashcard.core.domain_types import CardId, Principal
from cashcard.schemas.card import CardRequest, CardResponse
from cashcard.services.card_service import CardService

router = APIRouter(prefix="/cards", tags=["cards"])


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: int,
    principal: Principal = Depends(get_card_owner),
    service: CardService = Depends(get_card_service),
):
    card = await service.get_by_id(principal, CardId(card_id))
    return CardResponse.from_card(card)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_card(
    body: CardRequest,
    principal: Principal = Depends(get_card_owner),
    service: CardService = Depends(get_card_service),
):
    """Create a card owned by the caller and point to it via Location."""
    card = await service.create(principal, body.amount)
    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"{router.prefix}/{card.id}"},
    )


@router.get("", response_model=list[CardResponse])
async def list_cards(
    page: str | None = Query(None),
    size: str | None = Query(None),
    sort: list[str] | None = Query(None),
    principal: Principal = Depends(get_card_owner),
    service: CardService = Depends(get_card_service),
):
    """List one page of the caller's cards (default: amount ascending)."""
    cards = await service.list(principal, page=page, size=size, sort=sort)
    return [CardResponse.from_card(card) for card in cards]


@router.put("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_card(
    card_id: int,
    body: CardRequest,
    principal: Principal = Depends(get_card_owner),
    service: CardService = Depends(get_card_service),
):
    await service.update(principal, CardId(card_id), body.amount)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(
    card_id: int,
    principal: Principal = Depends(get_card_owner),
    service: CardService = Depends(get_card_service),
):
    await service.delete(principal, CardId(card_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
