"""API application factory."""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from stockresearch.auth.otp import ChallengeStore
from stockresearch.auth.sessions import SessionManager
from stockresearch.cache.store import KeyValueStore, create_store
from stockresearch.core.config import settings
from stockresearch.core.exceptions import register_exception_handlers
from stockresearch.core.logging import get_logger, request_id_var
from stockresearch.schemas.common import ErrorResponse

from .routes import auth, health, research


logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the store on shutdown."""
    yield

    try:
        await app.state.store.close()
    except Exception as e:
        logger.warning(f"Store cleanup failed: {e}")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"

        if settings.https_enabled:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add request ID to all requests for tracing."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        request_id_var.set(request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request (path only, query strings may hold search terms)."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.monotonic()

        response = await call_next(request)

        duration = time.monotonic() - start_time
        path = request.url.path

        logger.info(
            f"{request.method} {path} -> {response.status_code} ({duration:.3f}s)",
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": int(duration * 1000),
            },
        )

        return response


def create_api_app(store: Optional[KeyValueStore] = None) -> FastAPI:
    """
    Create and configure the API application.

    Args:
        store: Backend for challenges and sessions. Defaults to the one
            selected by ``STORE_BACKEND``.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="One-time-code login and synthesized stock research",
        root_path=settings.root_path,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        responses={
            400: {"model": ErrorResponse, "description": "Bad Request"},
            401: {"model": ErrorResponse, "description": "Unauthorized"},
            404: {"model": ErrorResponse, "description": "Not Found"},
            500: {"model": ErrorResponse, "description": "Internal Server Error"},
        },
    )

    # Shared state; set here rather than in lifespan because mounted apps
    # do not run their own lifespan.
    app.state.store = store or create_store(settings)
    app.state.challenges = ChallengeStore(app.state.store)
    app.state.sessions = SessionManager(app.state.store)

    # Order matters - first added is outermost
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(research.router, tags=["Research"])

    return app
