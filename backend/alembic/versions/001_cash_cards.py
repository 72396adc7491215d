"""Cash cards table.

Revision ID: 001_cash_cards
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_cash_cards"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "cash_cards",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("amount", sa.Numeric(19, 2), nullable=False),
        sa.Column("owner", sa.String(256), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index(
        "ix_cash_cards_owner_amount_id", "cash_cards", ["owner", "amount", "id"],
    )


def downgrade() -> None:
    op.drop_index("ix_cash_cards_owner_amount_id", table_name="cash_cards")
    op.drop_table("cash_cards")
