from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from supplychain.app.api.v1.router import router as v1_router
from supplychain.app.core.config import get_settings
from supplychain.app.core.errors import SupplyChainError
from supplychain.app.core.logging import configure_logging
from supplychain.app.db.session import SessionLocal
from supplychain.services.alerts import start_low_stock_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    scheduler = None
    if settings.LOW_STOCK_ENABLED:
        scheduler = start_low_stock_scheduler(settings, SessionLocal)
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)
    app.include_router(v1_router, prefix="/v1")

    @app.exception_handler(SupplyChainError)
    async def supply_chain_error_handler(request: Request, exc: SupplyChainError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(
            status_code=409,
            content={"detail": "Operation violates a database constraint", "code": "INTEGRITY_ERROR"},
        )

    return app


app = create_app()
