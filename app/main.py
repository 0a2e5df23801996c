"""
Radif Backend - FastAPI Application

Main entry point for the application.
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from app.api.errors import register_exception_handlers
from app.api.v1 import router as api_v1_router
from app.core.config import settings
from app.core.database import check_connection, close_db, create_engine, create_session_maker
from app.core.security import TokenIssuer
from app.middleware.request_logging import RequestLoggingMiddleware
from app.services.sms_service import SmsService
from app.services.storage_service import S3Storage


VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Builds the shared collaborators and stores them on ``app.state``.
    A database or object storage failure here aborts startup.
    """
    # Startup
    configure_logging(settings.LOG_LEVEL)
    logger.info(f"Starting Radif Backend (env={settings.ENVIRONMENT})")

    engine = create_engine(settings)
    await check_connection(engine)

    storage = S3Storage.from_settings(settings)
    await run_in_threadpool(storage.ensure_bucket)

    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.storage = storage
    app.state.sms_service = SmsService(settings.ENVIRONMENT)
    app.state.otp_ttl = timedelta(seconds=settings.OTP_EXPIRE_SECONDS)
    app.state.token_issuer = TokenIssuer(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )

    yield

    # Shutdown
    logger.info("Shutting down Radif Backend")
    await close_db(engine)


# Create FastAPI application
app = FastAPI(
    title="Radif Backend",
    description="Phone-number authentication and user profiles.",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Accept", "Authorization", "Content-Type", "X-Request-ID"],
    max_age=300,
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Health status and environment info.
    """
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": VERSION,
    }
