"""Cash Card ORM — persists one monetary record per row, scoped by owner.

Invariants:
    - id is an integer primary key assigned by the database and never reused
    - owner is non-nullable and written only on insert
    - amount is Numeric(19, 2): exact decimal, no float rounding

Design Decisions:
    - sqlite_autoincrement: plain SQLite rowids can be recycled after deleting the
      highest id; AUTOINCREMENT forbids that (PostgreSQL sequences never recycle)
    - Composite index (owner, amount, id): serves the default owner-scoped listing
"""

from decimal import Decimal

from sqlalchemy import Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from cashcard.db.base import Base


class CashCardModel(Base):
    """A single card row."""
    __tablename__ = "cash_cards"
    __table_args__ = (
        Index("ix_cash_cards_owner_amount_id", "owner", "amount", "id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False,
    )
    owner: Mapped[str] = mapped_column(String(256), nullable=False)

    def __repr__(self) -> str:
        return f"<CashCard {self.id} owner={self.owner}>"
