"""FastAPI application factory for DealDesk."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .errors import CallWebhookError, MutationError, NotAuthenticatedError, NotFoundError
from .log_config import configure_logging

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    # Auto-create tables for SQLite (local dev); PostgreSQL uses Alembic migrations
    if "sqlite" in settings.database_url:
        from .database import engine
        from .models import Base
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield


app = FastAPI(title=settings.app_title, lifespan=lifespan)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(NotAuthenticatedError)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(CallWebhookError)
async def call_webhook_handler(request: Request, exc: CallWebhookError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(MutationError)
async def mutation_error_handler(request: Request, exc: MutationError):
    log.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# Import and register routers
from .routers import (  # noqa: E402
    activities, calls, companies, contacts, dashboard, deals, health, profiles,
)

app.include_router(companies.router)
app.include_router(contacts.router)
app.include_router(deals.router)
app.include_router(activities.router)
app.include_router(profiles.router)
app.include_router(dashboard.router)
app.include_router(calls.router)
app.include_router(health.router)
