"""Card Schemas — Pydantic models for card request/response bodies.

Invariants:
    - CardRequest carries amount only; id/owner sent by clients are ignored (extra="ignore")
    - amount is a finite decimal with at most 2 decimal places and 19 digits
    - Negative amounts are accepted
    - CardResponse.amount serializes as a JSON number, not a string

Design Decisions:
    - Decimal internally, float on the wire: JSON clients expect {"amount": 123.45}
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from cashcard.core.domain_types import Card

WireAmount = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json"),
]


class CardRequest(BaseModel):
    """Create/update payload."""
    model_config = ConfigDict(extra="ignore")

    amount: Decimal = Field(max_digits=19, decimal_places=2, allow_inf_nan=False)


class CardResponse(BaseModel):
    """Card as returned on read paths."""
    id: int
    amount: WireAmount
    owner: str

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(id=card.id, amount=card.amount, owner=card.owner)
