"""TeamBuilder API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TeamBuilderError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - Expired revoked tokens purged once per startup

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; main only wires them
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from teambuilder.api.error_handlers import register_error_handlers
from teambuilder.api.routes import (
    admin, health, invitations, team_activity, teams, tokens, users,
)
from teambuilder.config import get_settings
from teambuilder.infrastructure import database
from teambuilder.infrastructure.observability import setup_logging
from teambuilder.services.token_revocation import TokenRevocationStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    async with database.db_manager.session() as db:
        await TokenRevocationStore(db).purge_expired()
    logger.info("TeamBuilder API started")
    yield
    if database.db_manager is not None:
        await database.db_manager.engine.dispose()
    logger.info("TeamBuilder API shutting down")


app = FastAPI(
    title="TeamBuilder API", version=health.SERVICE_VERSION, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(teams.router)
app.include_router(team_activity.router)
app.include_router(invitations.router)
app.include_router(tokens.router)
app.include_router(admin.router)

register_error_handlers(app)
