"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from orderdesk.api.router import api_router
from orderdesk.config import get_settings
from orderdesk.db.engine import create_all, engine
from orderdesk.errors import (
    ConflictError, ForbiddenError, NotFoundError, OrderDeskError, StoreError, ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ValidationError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    StoreError: 503,
}


def configure_logging():
    cfg = get_settings().logging
    logging.basicConfig(level=cfg.level.upper(), format=cfg.format)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await create_all()
    yield
    await engine.dispose()


app = FastAPI(
    title="OrderDesk",
    description="Technician work-order intake with double-dip detection and daily productivity counts.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(api_router)


@app.exception_handler(OrderDeskError)
async def order_desk_error_handler(request: Request, exc: OrderDeskError):
    status_code = _STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.get("/health")
async def health():
    return {"ok": True}
