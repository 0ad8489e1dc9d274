import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text

from app.config import settings
from app.api.v1.router import api_router
from app.db.session import init_db, close_db, async_session_maker
from app.core.exceptions import InformatchError
from app.core.firebase import init_firebase, firebase_service
from app.core.middleware import (
    SecurityHeadersMiddleware,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
)
import app.models  # Register models for create_all


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("informatch")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await init_db()
    init_firebase()
    logger.info(f"{settings.APP_NAME} started in {settings.ENVIRONMENT} mode")

    yield

    await close_db()
    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    description="Student matchmaking backend: profiles, connections and interest-based suggestions",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Client-Info", "apikey", "Accept", "Origin"],
    expose_headers=["X-Request-ID"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(RequestSizeLimitMiddleware)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(InformatchError)
async def informatch_error_handler(request: Request, exc: InformatchError):
    """Collapse domain errors into a single failure body."""
    logger.error(f"Error in {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.get("/")
async def root():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health")
async def health_check():
    """
    Detailed health check that actually verifies connectivity.
    Returns status of all critical services.
    """
    health_status = {
        "status": "healthy",
        "services": {
            "database": {"status": "unknown", "latency_ms": None},
            "firebase": {"status": "unknown"},
        },
    }

    # Check Database
    try:
        start = time.perf_counter()
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
        latency = round((time.perf_counter() - start) * 1000, 2)
        health_status["services"]["database"] = {
            "status": "healthy",
            "latency_ms": latency,
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["services"]["database"] = {
            "status": "unhealthy",
            "error": str(e)[:100],
        }
        health_status["status"] = "degraded"

    # Check Firebase (just check if initialized)
    health_status["services"]["firebase"] = {
        "status": "initialized" if firebase_service.is_configured else "not_configured"
    }

    return health_status
