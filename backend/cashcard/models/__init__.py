"""ORM Models — SQLAlchemy declarative models.

Design Decisions:
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from cashcard.models.cash_card import CashCardModel  # noqa: F401
