"""
FastAPI application entry point for the Smellmap API.

This module provides the FastAPI application with:
- Smell profile CRUD endpoints under the API prefix
- Health and readiness endpoints
- Request logging with correlation IDs
- Prometheus metrics
- CORS and security headers
- MongoDB client management
- Graceful startup and shutdown
"""

import time
import uuid
import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Any, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match
from prometheus_client import CONTENT_TYPE_LATEST
from pymongo import MongoClient

from shared.logging import bind_context, configure_logging, unbind_context
from shared.metrics import ApiMetrics, get_metrics_handler, setup_metrics
from smellmap.config import get_settings, Settings
from smellmap.exceptions import PersistenceError, SmellmapError
from smellmap.repositories.smell_profile_repo import SmellProfileRepository
from smellmap.routers import smellmap

logger = structlog.get_logger(__name__)


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Handles:
    - MongoDB client creation and connectivity check
    - Repository initialization
    - Graceful shutdown and resource cleanup
    """
    settings: Settings = app.state.settings

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )

    # ========================================================================
    # Startup: Initialize Resources
    # ========================================================================

    try:
        logger.info(
            "initializing_mongo_client",
            database=settings.active_database_name,
            collection=settings.collection_name
        )

        app.state.mongo_client = MongoClient(
            settings.mongodb_url,
            serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
            connectTimeoutMS=settings.mongodb_connect_timeout_ms,
        )
        database = app.state.mongo_client[settings.active_database_name]

        logger.info("initializing_repositories")
        app.state.smell_profile_repo = SmellProfileRepository(
            database[settings.collection_name]
        )

        if settings.mongodb_ping_on_startup:
            if not app.state.smell_profile_repo.ping():
                raise PersistenceError("MongoDB did not answer the startup ping")
            app.state.metrics.database_up.set(1)
            logger.info("database_connected", database=settings.active_database_name)

        logger.info(
            "application_started",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment
        )

        yield

    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    # ========================================================================
    # Shutdown: Cleanup Resources
    # ========================================================================

    finally:
        logger.info("application_shutting_down")

        if app.state.mongo_client is not None:
            logger.info("closing_mongo_client")
            app.state.mongo_client.close()
            app.state.mongo_client = None
            app.state.smell_profile_repo = None
            logger.info("mongo_client_closed")

        logger.info("application_shutdown_complete")


# ============================================================================
# Middleware
# ============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging, metrics, and correlation IDs."""

    def __init__(self, app, metrics: Optional[ApiMetrics] = None):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        endpoint = self._route_template(request)

        bind_context(correlation_id=correlation_id)

        if self.metrics:
            self.metrics.http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()

        start_time = time.time()

        logger.info(
            "request_started",
            method=method,
            path=path,
            client_ip=client_ip
        )

        try:
            response = await call_next(request)

            duration = time.time() - start_time

            if self.metrics:
                self.metrics.http_requests_total.labels(
                    method=method,
                    endpoint=endpoint,
                    status=response.status_code
                ).inc()
                self.metrics.http_request_duration_seconds.labels(
                    method=method,
                    endpoint=endpoint
                ).observe(duration)

            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration=f"{duration:.3f}s"
            )

            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{duration:.3f}s",
                exc_info=True
            )
            raise

        finally:
            if self.metrics:
                self.metrics.http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()
            unbind_context("correlation_id")

    @staticmethod
    def _route_template(request: Request) -> str:
        """Matched route path (e.g. /api/smellmap/{profile_id}), or the raw path."""
        for route in request.app.routes:
            match, _ = route.matches(request.scope)
            if match == Match.FULL:
                return getattr(route, "path", request.url.path)
        return request.url.path


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


# ============================================================================
# Exception Handlers
# ============================================================================

async def smellmap_exception_handler(request: Request, exc: SmellmapError):
    """Handle smellmap domain and persistence errors."""
    logger.warning(
        "smellmap_error",
        path=request.url.path,
        status_code=exc.status_code,
        error_code=exc.error_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=errors
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# ============================================================================
# Application Factory
# ============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to build with (defaults to cached settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
        environment=settings.environment,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "REST API for smell profiles: reported smells at geographic "
            "coordinates with a category and a free text description."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.metrics = setup_metrics()
    app.state.mongo_client = None
    app.state.smell_profile_repo = None

    # Middleware (last added runs first)
    if settings.security_headers_enabled:
        app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        RequestLoggingMiddleware,
        metrics=app.state.metrics if settings.metrics_enabled else None
    )

    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
        )

    app.add_exception_handler(SmellmapError, smellmap_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    _register_operational_routes(app, settings)

    app.include_router(smellmap.router, prefix=settings.api_prefix)

    return app


def _register_operational_routes(app: FastAPI, settings: Settings) -> None:
    """Attach health, readiness and metrics endpoints."""

    @app.get("/health", tags=["Health"], response_class=JSONResponse)
    def health_check() -> Dict[str, Any]:
        """
        Health check endpoint.

        Returns basic health status without checking dependencies.
        Use for container health checks.
        """
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment
        }

    @app.get("/ready", tags=["Health"], response_class=JSONResponse)
    def readiness_check() -> JSONResponse:
        """
        Readiness check endpoint.

        Returns 200 when MongoDB answers a ping, 503 otherwise.
        """
        checks = {"database": "unknown"}

        repo: Optional[SmellProfileRepository] = app.state.smell_profile_repo
        if repo is not None and repo.ping():
            checks["database"] = "healthy"
        else:
            logger.error("database_health_check_failed")
            checks["database"] = "unhealthy"

        all_healthy = all(check == "healthy" for check in checks.values())
        app.state.metrics.database_up.set(1 if all_healthy else 0)

        return JSONResponse(
            status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ready" if all_healthy else "not_ready",
                "service": settings.app_name,
                "version": settings.app_version,
                "checks": checks
            }
        )

    if settings.metrics_enabled:
        metrics_handler = get_metrics_handler(app.state.metrics)

        @app.get(settings.metrics_endpoint, tags=["Monitoring"], response_class=PlainTextResponse)
        def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(
                content=metrics_handler(),
                media_type=CONTENT_TYPE_LATEST
            )


app = create_app()


def run() -> None:
    """Run the application with Uvicorn."""
    settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "smellmap.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run()
