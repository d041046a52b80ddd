"""
Carpool Community API - application entry point.

Rides, bookings, invitations and messages between community members.
Run with: uvicorn carpool.main:app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from carpool.api.middleware import RequestLoggingMiddleware
from carpool.api.router import api_router
from carpool.core.config import get_settings
from carpool.core.exceptions import AppException
from carpool.core.logging import get_logger, setup_logging
from carpool.core.metrics import metrics_endpoint
from carpool.db.session import close_db
from carpool.infrastructure import close_redis, get_redis
from carpool.services.cache_service import get_cache_stats

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(
        "application_starting",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    if await get_redis() is None:
        logger.warning("redis_unavailable", message="Running without ride cache or rate limits")

    yield

    await close_redis()
    await close_db()
    logger.info("application_shutdown")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed input is a plain 400 across the API, not FastAPI's 422
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("database_error", error=str(exc), error_type=type(exc).__name__)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def create_application() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Community carpooling: rides, seat bookings, invitations and messaging",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )

    register_exception_handlers(app)

    # Last added runs first: logging wraps CORS so preflights are logged too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness check; also reports whether the ride cache is connected."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "cache": await get_cache_stats(),
        }

    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)
    return app


app = create_application()
