from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import analytics, auth, trades
from app.core.config import settings
from app.core.logging import setup_logging
from app.db import base  # noqa: F401
from app.db.migration import run_migrations

setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, description="Trade tracking and analytics API for traders")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event() -> None:
    run_migrations()
    logger.info("%s started (database=%s)", settings.app_name, settings.database_url)


@app.get("/")
def root():
    return {"app": settings.app_name}


@app.get("/health")
def health():
    return {"status": "ok"}


api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(trades.router)
api_router.include_router(analytics.router)

app.include_router(api_router)
