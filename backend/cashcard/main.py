"""Cash Card API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Global error handlers map CashCardError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and credential store initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py (ADR: ExMA import fan-out < 10)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cashcard.api.error_handlers import register_error_handlers
from cashcard.api.routes import cash_cards, health
from cashcard.config import get_settings
from cashcard.infrastructure.credential_store import init_credentials
from cashcard.infrastructure.database import init_db
from cashcard.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_credentials(settings.users, rounds=settings.bcrypt_rounds)
    logger.info("Cash Card API started")
    yield
    await manager.dispose()
    logger.info("Cash Card API shutting down")


app = FastAPI(
    title="Cash Card API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location"],
)

app.include_router(health.router)
app.include_router(cash_cards.router)

register_error_handlers(app)
