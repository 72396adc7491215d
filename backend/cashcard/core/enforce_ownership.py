"""Ownership Enforcement — decides whether a principal may act on a card.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Role check is record-independent and runs before any lookup
    - "No such card" and "card owned by someone else" both yield NOT_FOUND
    - Ids outside the storable range are NOT_FOUND without any lookup

Design Decisions:
    - Return AccessDecision (not exceptions): callers map the decision to an error,
      keeping HTTP status mapping out of the rule itself (ADR: ExMA Functional Core)
    - FORBIDDEN vs NOT_FOUND are two trust boundaries: "not the kind of actor who may
      touch cards" (403) vs "no visibility into this card" (404)
"""

from cashcard.core.domain_types import AccessDecision, Card, MAX_CARD_ID, Principal


def authorize_role(principal: Principal, required_role: str) -> AccessDecision:
    """Rule 1: only principals holding the card-owner role reach card endpoints."""
    if not principal.has_role(required_role):
        return AccessDecision.FORBIDDEN
    return AccessDecision.ALLOW


def filter_by_ownership(
    principal: Principal, card: Card | None,
) -> AccessDecision:
    """Rule 2: a card is visible only to its owner."""
    if card is None or card.owner != principal.name:
        return AccessDecision.NOT_FOUND
    return AccessDecision.ALLOW


def filter_by_id_range(card_id: int) -> AccessDecision:
    """Rule 3: an id the store could never have issued names no card."""
    if not 1 <= card_id <= MAX_CARD_ID:
        return AccessDecision.NOT_FOUND
    return AccessDecision.ALLOW
