"""In-Memory Credential Store — Authenticator implementation backed by bcrypt hashes.

Invariants:
    - Plaintext passwords are hashed once at construction and never retained
    - Unknown user and wrong password are indistinguishable to the caller (both None)
    - An unknown username still pays for one bcrypt check (no timing shortcut)

Design Decisions:
    - Module-level singleton initialized on startup, like db_manager
    - verify() is synchronous: bcrypt is CPU bound, FastAPI runs sync dependencies in
      its threadpool
"""

import logging

import bcrypt

from cashcard.config import UserAccount
from cashcard.core.domain_types import Principal, PrincipalName

logger = logging.getLogger(__name__)


def _encode(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; newer releases reject longer input
    return password.encode("utf-8")[:72]


class InMemoryCredentialStore:
    """Username → (bcrypt hash, roles) lookup."""

    def __init__(self, accounts: list[UserAccount], rounds: int = 12):
        self._accounts: dict[str, tuple[bytes, frozenset[str]]] = {}
        for account in accounts:
            hashed = bcrypt.hashpw(
                _encode(account.password),
                bcrypt.gensalt(rounds=rounds),
            )
            self._accounts[account.username] = (hashed, frozenset(account.roles))
        # Compared against for unknown usernames
        self._dummy_hash = bcrypt.hashpw(
            b"unknown-user", bcrypt.gensalt(rounds=rounds),
        )

    def verify(self, username: str, password: str) -> Principal | None:
        entry = self._accounts.get(username)
        hashed, roles = entry if entry else (self._dummy_hash, frozenset())
        matches = bcrypt.checkpw(_encode(password), hashed)
        if entry is None or not matches:
            logger.info(
                "Rejected credentials", extra={"principal": username},
            )
            return None
        return Principal(name=PrincipalName(username), roles=roles)


# Singleton (initialized on startup)
credential_store: InMemoryCredentialStore | None = None


def init_credentials(
    accounts: list[UserAccount], rounds: int = 12,
) -> InMemoryCredentialStore:
    global credential_store
    credential_store = InMemoryCredentialStore(accounts, rounds=rounds)
    logger.info(f"Credential store loaded with {len(accounts)} account(s)")
    return credential_store


def get_authenticator() -> InMemoryCredentialStore:
    """FastAPI dependency for the credential store."""
    if not credential_store:
        raise RuntimeError("Credential store not initialized")
    return credential_store
