"""Card Service — the five card operations, each scoped to the calling principal.

Invariants:
    - Role check runs first in every operation, before any repository call
    - owner always comes from the principal, never from request input
    - update/delete issue at most one repository call scoped to (card_id, owner)
    - Out-of-range ids short-circuit to CardNotFoundError without a repository call
    - No cross-request state: all durable state lives in the repository

Design Decisions:
    - Impureim sandwich: pure decisions from core/enforce_ownership.py around async
      repository IO (ADR: ExMA Functional Core)
    - Non-ALLOW decisions become typed errors here, in one place (_raise_for_decision)
"""

import logging
from decimal import Decimal

from cashcard.core.domain_types import (
    AccessDecision, CARD_OWNER_ROLE, Card, CardId, Principal,
)
from cashcard.core.enforce_ownership import (
    authorize_role, filter_by_id_range, filter_by_ownership,
)
from cashcard.core.errors import CardNotFoundError, ErrorContext, RoleForbiddenError
from cashcard.core.repository_protocols import CardRepository
from cashcard.core.resolve_query import (
    DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, resolve_page_query,
)

logger = logging.getLogger(__name__)


class CardService:
    """Orchestrates role/ownership rules and repository calls for cards."""

    def __init__(
        self,
        repository: CardRepository,
        required_role: str = CARD_OWNER_ROLE,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self._repository = repository
        self._required_role = required_role
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def create(self, principal: Principal, amount: Decimal) -> Card:
        self._require_role(principal)
        card = await self._repository.insert(amount, principal.name)
        logger.info(
            f"Card {card.id} created",
            extra={"principal": principal.name, "card_id": card.id},
        )
        return card

    async def get_by_id(self, principal: Principal, card_id: CardId) -> Card:
        self._require_role(principal)
        _raise_for_decision(filter_by_id_range(card_id), principal, card_id)
        card = await self._repository.find_by_id_and_owner(
            card_id, principal.name,
        )
        _raise_for_decision(
            filter_by_ownership(principal, card), principal, card_id,
        )
        return card

    async def list(
        self,
        principal: Principal,
        page: str | None = None,
        size: str | None = None,
        sort: list[str] | None = None,
    ) -> list[Card]:
        """Return one page of the principal's cards, in server-chosen order."""
        self._require_role(principal)
        query = resolve_page_query(
            page, size, sort,
            default_size=self._default_page_size,
            max_size=self._max_page_size,
        )
        return await self._repository.find_page_by_owner(principal.name, query)

    async def update(
        self, principal: Principal, card_id: CardId, amount: Decimal,
    ) -> None:
        """Replace amount only; id and owner are preserved."""
        self._require_role(principal)
        _raise_for_decision(filter_by_id_range(card_id), principal, card_id)
        updated = await self._repository.update_amount(
            card_id, principal.name, amount,
        )
        if not updated:
            _raise_for_decision(AccessDecision.NOT_FOUND, principal, card_id)
        logger.info(
            f"Card {card_id} updated",
            extra={"principal": principal.name, "card_id": card_id},
        )

    async def delete(self, principal: Principal, card_id: CardId) -> None:
        self._require_role(principal)
        _raise_for_decision(filter_by_id_range(card_id), principal, card_id)
        deleted = await self._repository.delete_by_id_and_owner(
            card_id, principal.name,
        )
        if not deleted:
            _raise_for_decision(AccessDecision.NOT_FOUND, principal, card_id)
        logger.info(
            f"Card {card_id} deleted",
            extra={"principal": principal.name, "card_id": card_id},
        )

    def _require_role(self, principal: Principal) -> None:
        decision = authorize_role(principal, self._required_role)
        if decision is not AccessDecision.ALLOW:
            logger.warning(
                f"Principal lacks role {self._required_role}",
                extra={"principal": principal.name},
            )
            raise RoleForbiddenError(
                self._required_role, ErrorContext(principal=principal.name),
            )


def _raise_for_decision(
    decision: AccessDecision, principal: Principal, card_id: CardId,
) -> None:
    """Map a record-level decision to its error. ALLOW is a no-op."""
    if decision is AccessDecision.ALLOW:
        return
    logger.info(
        f"Card {card_id} not visible to principal",
        extra={"principal": principal.name, "card_id": card_id},
    )
    raise CardNotFoundError(card_id, ErrorContext(principal=principal.name))
