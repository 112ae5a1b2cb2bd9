"""
POS Ledger — FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pos_ledger.config import get_settings
from pos_ledger.api.admin import router as admin_router
from pos_ledger.api.health import router as health_router
from pos_ledger.api.ledger import router as ledger_router
from pos_ledger.api.payments import router as payments_router
from pos_ledger.api.reports import router as reports_router
from pos_ledger.api.subledgers import router as subledgers_router
from pos_ledger.models.base import engine
from pos_ledger.services.schema_service import init_accounting_schema

settings = get_settings()
logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup/shutdown.

    Makes sure the accounting tables exist before the first
    request is served.
    """
    configure_logging()
    if settings.INIT_SCHEMA_ON_STARTUP:
        created = init_accounting_schema(engine)
        if created:
            logger.info("Initialized accounting schema on startup")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    description="Double-entry accounting core for a point-of-sale system",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(ledger_router)
app.include_router(payments_router)
app.include_router(subledgers_router)
app.include_router(reports_router)
app.include_router(admin_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pos_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
