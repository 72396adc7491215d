"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Page-size bounds and the required card role are configuration, not constants in routes

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Demo users as defaults: works out-of-the-box locally; production sets USERS as JSON
"""

from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class UserAccount(BaseModel):
    """A credential provisioned into the in-memory credential store."""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    roles: list[str] = Field(default_factory=list)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://cashcard:cashcard@db:5432/cashcard"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Access control
    card_owner_role: str = "CARD-OWNER"
    bcrypt_rounds: int = Field(12, ge=4, le=31)
    users: list[UserAccount] = [
        UserAccount(username="sarah1", password="abc123", roles=["CARD-OWNER"]),
        UserAccount(username="kumar2", password="xyz789", roles=["CARD-OWNER"]),
        UserAccount(
            username="hank-owns-no-cards", password="qrs456", roles=["NON-OWNER"],
        ),
    ]

    # Paging
    default_page_size: int = Field(20, ge=1)
    max_page_size: int = Field(100, ge=1)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
