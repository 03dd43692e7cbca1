"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- auth, users, conversations, messages (HTTP)
- /ws (live channel)
- /health, /metrics
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from relaychat import __version__
from relaychat.config.logging_config import setup_logging, correlation_id_var
from relaychat.config.settings import Config
from relaychat.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    DomainValidationError,
    EntityNotFoundError,
    InvalidOperationError,
    UnauthorizedError,
)
from relaychat.observability import observe_request_latency
from relaychat.presentation.api import (
    auth_router,
    users_router,
    conversations_router,
    messages_router,
    metrics_router,
)
from relaychat.presentation.api.rate_limit import limiter
from relaychat.presentation.ws import chat_socket_router
from relaychat.setup.ioc import build_container

# Setup logging
setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)

logger = logging.getLogger(__name__)

# Domain exception -> HTTP status
_DOMAIN_ERROR_STATUS: dict[type[Exception], int] = {
    EntityNotFoundError: 404,
    AccessDeniedError: 403,
    DomainValidationError: 422,
    InvalidOperationError: 400,
    ConflictError: 409,
    UnauthorizedError: 401,
}


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", "NO Correlation ID")

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records request latency per route template (not raw path)."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)
        if route_path != "/metrics":
            observe_request_latency(
                request.method,
                route_path,
                response.status_code,
                time.perf_counter() - start,
            )
        return response


def _domain_error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        logger.info(f"[{exc.__class__.__name__}] {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    return handler


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: Dishka container to use; a new one is built from Config
            when omitted (tests pass their own)
    """
    container = container or build_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"RelayChat started (storage={Config.STORAGE_BACKEND}, "
            f"redis_cache={Config.REDIS_CACHE_ENABLED})"
        )
        yield
        # Shutdown: close DI container (disconnects Prisma/Redis)
        await container.close()
        logger.info("RelayChat shutdown. DI container closed.")

    app = FastAPI(
        title="RelayChat API",
        description="Real-time direct messaging backend",
        version=__version__,
        lifespan=lifespan,
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container, app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for exc_type, status_code in _DOMAIN_ERROR_STATUS.items():
        app.add_exception_handler(exc_type, _domain_error_handler(status_code))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors())
        logger.info(f"[VALIDATION ERROR] {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "details": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info(f"[HTTP ERROR {exc.status_code}] {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[GLOBAL ERROR] {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    # Register routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(conversations_router)
    app.include_router(messages_router)
    app.include_router(metrics_router)
    app.include_router(chat_socket_router)  # WS /ws

    return app


# Create the app instance
app = create_fastapi_app()
