"""
FastAPI application for the booking engine

Public booking page endpoints plus the establishment dashboard's booking rules
and appointment lifecycle
"""
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from contextlib import asynccontextmanager
import logging

from booking_engine.config.settings import get_settings
from booking_engine.core.errors import register_exception_handlers
from booking_engine.core.middleware import correlation_id_middleware, request_logging_middleware
from booking_engine.core.monitoring import health_router
from booking_engine.api.v1.router import api_v1_router
from booking_engine.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging()
    routes = sorted(
        (route.path, ",".join(sorted(route.methods)))
        for route in app.routes
        if isinstance(route, APIRoute)
    )
    logger.info(f"{settings.APP_NAME} starting up with {len(routes)} routes")
    for path, methods in routes:
        logger.debug(f"  {methods:12} {path}")

    yield

    logger.info(f"{settings.APP_NAME} shutting down")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.APP_NAME,
        description="Availability and booking for multi-tenant appointment scheduling",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
    )

    # The last registered middleware runs first
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    register_exception_handlers(app)

    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1", tags=["api"])

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "booking_engine.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
