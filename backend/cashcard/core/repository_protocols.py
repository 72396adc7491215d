"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Every mutating store call is scoped to (card_id, owner) in a single statement
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy (ADR: ExMA anti-pattern)
    - CardRepository is async because implementations do IO; Authenticator is sync
      because password hashing is CPU bound and runs in the threadpool
"""

from decimal import Decimal
from typing import Protocol

from cashcard.core.domain_types import Card, CardId, Principal, PrincipalName
from cashcard.core.resolve_query import PageQuery


class CardRepository(Protocol):
    """Contract for card persistence — implemented by shell."""
    async def insert(self, amount: Decimal, owner: PrincipalName) -> Card: ...
    async def find_by_id_and_owner(
        self, card_id: CardId, owner: PrincipalName,
    ) -> Card | None: ...
    async def find_page_by_owner(
        self, owner: PrincipalName, query: PageQuery,
    ) -> list[Card]: ...
    async def update_amount(
        self, card_id: CardId, owner: PrincipalName, amount: Decimal,
    ) -> bool: ...
    async def delete_by_id_and_owner(
        self, card_id: CardId, owner: PrincipalName,
    ) -> bool: ...


class Authenticator(Protocol):
    """Contract for credential verification — implemented by shell."""
    def verify(self, username: str, password: str) -> Principal | None: ...
