"""FastAPI application entry point"""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from reliefhub.app.api import api_router
from reliefhub.app.core.config import settings
from reliefhub.app.core.cors import CORSHeadersMiddleware
from reliefhub.app.core.exception_handlers import (
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan"""
    logger.info("Starting ReliefHub captcha gateway...")
    if not settings.auth_provider_configured:
        logger.warning("Auth provider is not configured; /auth endpoints will answer 503")
    yield
    logger.info("Shutting down ReliefHub captcha gateway...")


app = FastAPI(
    title="ReliefHub API",
    description="Captcha verification and captcha-gated sign-in for the ReliefHub disaster-reporting app",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(CORSHeadersMiddleware)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)


@app.get("/health", tags=["health"])
async def health_check() -> dict:
    """Liveness probe"""
    return {"status": "healthy"}


@app.get("/health/detailed", tags=["health"])
async def detailed_health_check() -> dict:
    """Health including database connectivity"""
    from sqlalchemy import text

    from reliefhub.app.core.database import engine

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "unhealthy",
        "database": db_status,
        "timestamp": datetime.now(UTC).isoformat(),
    }


app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "reliefhub.app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
