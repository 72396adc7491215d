"""SQLAlchemy Card Repository — CardRepository implementation over AsyncSession.

Invariants:
    - Every query filters by owner; no method can read or write another owner's row
    - update_amount/delete_by_id_and_owner are one scoped statement each; the
      database's row-level atomicity is the only concurrency guard
    - Writes commit before returning; callers never see uncommitted state
    - ORM rows are converted to core Card values before leaving this module
"""

from decimal import Decimal

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cashcard.core.domain_types import (
    Card, CardId, PrincipalName, SortDirection, SortField,
)
from cashcard.core.resolve_query import PageQuery
from cashcard.models.cash_card import CashCardModel

_SORT_COLUMNS = {
    SortField.AMOUNT: CashCardModel.amount,
    SortField.ID: CashCardModel.id,
}


def _to_card(row: CashCardModel) -> Card:
    return Card(
        id=CardId(row.id),
        amount=row.amount,
        owner=PrincipalName(row.owner),
    )


class SqlAlchemyCardRepository:
    """Owner-scoped card persistence."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def insert(self, amount: Decimal, owner: PrincipalName) -> Card:
        row = CashCardModel(amount=amount, owner=owner)
        self._db.add(row)
        await self._db.flush()
        card = _to_card(row)
        await self._db.commit()
        return card

    async def find_by_id_and_owner(
        self, card_id: CardId, owner: PrincipalName,
    ) -> Card | None:
        result = await self._db.execute(
            select(CashCardModel).where(
                CashCardModel.id == card_id,
                CashCardModel.owner == owner,
            ),
        )
        row = result.scalar_one_or_none()
        return _to_card(row) if row else None

    async def find_page_by_owner(
        self, owner: PrincipalName, query: PageQuery,
    ) -> list[Card]:
        order = []
        for field, direction in query.order_by:
            column = _SORT_COLUMNS[field]
            order.append(
                column.desc() if direction is SortDirection.DESC else column.asc(),
            )
        result = await self._db.execute(
            select(CashCardModel)
            .where(CashCardModel.owner == owner)
            .order_by(*order)
            .offset(query.offset)
            .limit(query.limit),
        )
        return [_to_card(row) for row in result.scalars().all()]

    async def update_amount(
        self, card_id: CardId, owner: PrincipalName, amount: Decimal,
    ) -> bool:
        result = await self._db.execute(
            update(CashCardModel)
            .where(
                CashCardModel.id == card_id,
                CashCardModel.owner == owner,
            )
            .values(amount=amount)
            .execution_options(synchronize_session=False),
        )
        await self._db.commit()
        return result.rowcount > 0

    async def delete_by_id_and_owner(
        self, card_id: CardId, owner: PrincipalName,
    ) -> bool:
        result = await self._db.execute(
            delete(CashCardModel)
            .where(
                CashCardModel.id == card_id,
                CashCardModel.owner == owner,
            )
            .execution_options(synchronize_session=False),
        )
        await self._db.commit()
        return result.rowcount > 0
