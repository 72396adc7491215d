"""Request Dependencies — authentication and service wiring for card routes.

Invariants:
    - Missing, malformed or rejected credentials raise AuthenticationError (401)
      before any service call
    - Principals without the card-owner role raise RoleForbiddenError (403) before
      path/query/body validation and before any store access
    - get_principal is sync: bcrypt verification runs in FastAPI's threadpool
    - CardService receives a repository bound to the request's DB session

Design Decisions:
    - Role gate as a dependency: FastAPI resolves sub-dependencies before it reports
      parameter errors, so a non-owner never learns which inputs would be valid.
      Syntactically broken JSON bodies are still rejected by FastAPI (400) first
"""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from cashcard.config import get_settings
from cashcard.core.domain_types import AccessDecision, Principal
from cashcard.core.enforce_ownership import authorize_role
from cashcard.core.errors import AuthenticationError, ErrorContext, RoleForbiddenError
from cashcard.core.repository_protocols import Authenticator
from cashcard.infrastructure.card_repository import SqlAlchemyCardRepository
from cashcard.infrastructure.credential_store import get_authenticator
from cashcard.infrastructure.database import get_db
from cashcard.services.card_service import CardService


class _BasicAuth(HTTPBasic):
    """HTTPBasic whose header-decoding failures use the domain 401."""

    async def __call__(self, request: Request) -> HTTPBasicCredentials | None:
        try:
            return await super().__call__(request)
        except HTTPException as e:
            raise AuthenticationError() from e


_basic_auth = _BasicAuth(auto_error=False)


def get_principal(
    credentials: HTTPBasicCredentials | None = Depends(_basic_auth),
    authenticator: Authenticator = Depends(get_authenticator),
) -> Principal:
    """Resolve the Basic credentials into a verified Principal."""
    if credentials is None:
        raise AuthenticationError()
    principal = authenticator.verify(credentials.username, credentials.password)
    if principal is None:
        raise AuthenticationError(ErrorContext(principal=credentials.username))
    return principal


def get_card_owner(principal: Principal = Depends(get_principal)) -> Principal:
    """Verified principal that also holds the card-owner role."""
    required_role = get_settings().card_owner_role
    if authorize_role(principal, required_role) is not AccessDecision.ALLOW:
        raise RoleForbiddenError(required_role, ErrorContext(principal=principal.name))
    return principal


async def get_card_service(
    db: AsyncSession = Depends(get_db),
) -> CardService:
    settings = get_settings()
    return CardService(
        SqlAlchemyCardRepository(db),
        required_role=settings.card_owner_role,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
