"""Main application entry point with app factory and lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from stockresearch.api.app import create_api_app
from stockresearch.cache.store import KeyValueStore
from stockresearch.core.config import settings
from stockresearch.core.logging import get_logger, setup_logging
from stockresearch.research import get_stock_of_day

logger = get_logger("main")


def create_app(store: Optional[KeyValueStore] = None) -> FastAPI:
    """Create the main FastAPI application with the API mounted at /api."""
    api_app = create_api_app(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Environment: {settings.environment}, store: {settings.store_backend}")
        if settings.is_production and settings.uses_default_secret:
            logger.warning("AUTH_SECRET is the development default; session cookies are forgeable")

        # Pin the daily pick's timestamp to server start
        get_stock_of_day()

        yield

        logger.info("Shutting down...")
        await api_app.state.store.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.mount("/api", api_app)
    app.state.api = api_app

    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/api/docs" if settings.debug else None,
            "health": "/api/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "stockresearch.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
