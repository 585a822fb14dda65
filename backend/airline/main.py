"""
Airline Reservation API - application entry point.

A flight booking service demonstrating:
- Seat allocation that cannot double-book under concurrent requests
- Transactional payments and refunds on an append-only ledger
- Redis caching and rate limiting that degrade gracefully
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from airline.api.errors import register_exception_handlers
from airline.api.middleware import RateLimitMiddleware, RequestLoggingMiddleware
from airline.api.router import api_router
from airline.core.config import get_settings
from airline.core.logging import get_logger, setup_logging
from airline.core.metrics import metrics_endpoint
from airline.db.session import Database
from airline.services.cache_service import close_redis, get_cache_stats, get_redis


def create_app(database: Optional[Database] = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle: startup and shutdown hooks."""
        setup_logging()
        logger = get_logger(__name__)

        logger.info(
            "application_starting",
            app=settings.APP_NAME,
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
        )

        redis_client = await get_redis()
        if redis_client:
            logger.info("redis_ready")
        else:
            logger.warning("redis_unavailable", message="Running without cache or rate limiting")

        yield

        await close_redis()
        await app.state.database.dispose()
        logger.info("application_shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Airline reservation API with concurrency-safe seat booking",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.database = database or Database.from_settings(settings)

    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check for Docker and load balancers."""
        database_ok = await app.state.database.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "database": "connected" if database_ok else "unavailable",
            "cache": await get_cache_stats(),
        }

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return metrics_endpoint()

    return app


app = create_app()
