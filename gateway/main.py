"""
gateway/main.py

FastAPI application entry point for the status gateway.
Registers CORS for the browser front-end and the status router.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from gateway.routers.status import router as status_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle: startup and shutdown."""
    logger.info(
        "gateway_starting",
        api_base_configured=bool(settings.api_base),
        timestamp_unit=settings.heart_rate_timestamp_unit,
    )
    yield
    logger.info("gateway_shutting_down")


app = FastAPI(
    title="Life Status Gateway",
    description="Activity classification and availability prediction service",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(status_router)
