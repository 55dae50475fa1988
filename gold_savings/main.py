"""
Gold Savings Scheme: FastAPI application.

This is the entry point for the application. It owns the
process-wide SessionManager, creates it at startup and
restores any session persisted by a previous run.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from gold_savings.config import get_settings
from gold_savings.logging_config import setup_logging
from gold_savings.models.base import SessionLocal, init_db
from gold_savings.services.session_manager import SessionCache, SessionManager
from gold_savings.api.accounts import router as accounts_router
from gold_savings.api.health import router as health_router
from gold_savings.api.notifications import router as notifications_router
from gold_savings.api.prices import router as prices_router
from gold_savings.api.purchases import router as purchases_router
from gold_savings.api.session import router as session_router

settings = get_settings()
log = logging.getLogger("gold_savings")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(Path(settings.LOG_DIR), settings.LOG_LEVEL)
    if settings.ENVIRONMENT == "development":
        init_db()

    session_manager = SessionManager(
        SessionLocal, SessionCache(settings.SESSION_CACHE_PATH)
    )
    state = session_manager.restore()
    log.info("startup environment=%s session=%s", settings.ENVIRONMENT, state.value)
    app.state.session_manager = session_manager
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Gold savings scheme: member ledger, sessions and live prices",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(session_router)
app.include_router(prices_router)
app.include_router(purchases_router)
app.include_router(accounts_router)
app.include_router(notifications_router)
