"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CardId wraps int — the store assigns it, callers never choose it
    - Card.owner is set once from the authenticated principal and never changes
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, full type-checker support
    - Frozen dataclasses for Card/Principal: values cross the core/shell boundary,
      the ORM model never leaks into core
    - AccessDecision as a closed enum over exceptions: the decision is testable on its
      own, independent of HTTP status mapping
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CardId = NewType("CardId", int)
PrincipalName = NewType("PrincipalName", str)

# cash_cards.id is a 32-bit INTEGER column
MAX_CARD_ID = 2**31 - 1


# ─── Roles ───────────────────────────────────────────────────────

CARD_OWNER_ROLE = "CARD-OWNER"
NON_OWNER_ROLE = "NON-OWNER"


# ─── Enums ───────────────────────────────────────────────────────

class AccessDecision(str, Enum):
    """Outcome of an ownership or role check."""
    ALLOW = "allow"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


class SortField(str, Enum):
    """Closed set of sortable card columns."""
    AMOUNT = "amount"
    ID = "id"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ─── Values ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Principal:
    """Authenticated caller — name plus the roles granted by the credential store."""
    name: PrincipalName
    roles: frozenset[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        return role in self.roles


@dataclass(frozen=True)
class Card:
    """A stored card as seen by core and services."""
    id: CardId
    amount: Decimal
    owner: PrincipalName
