"""FastAPI application entry point.

Configures the application with logging, CORS, exception handling,
metrics and health checks.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src import __version__
from src.api.dependencies import GatewayServices, build_services
from src.api.routes import router as search_router
from src.api.tmdb_routes import router as tmdb_router
from src.config import get_settings
from src.exceptions import ErrorCode, GatewayError, InvalidInputError, UpstreamHTTPError
from src.logging_config import get_logger, setup_logging
from src.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Server error. Please try again later."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the shared clients on startup unless they were injected,
    and closes them on shutdown.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level)

    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(settings)

    logger.info(
        "Starting media search gateway",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
        },
    )

    yield

    logger.info("Shutting down media search gateway")
    await app.state.services.close()


def create_app(services: GatewayServices | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Prebuilt clients. Built from settings at startup if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Media Search Gateway",
        description="Key-hiding gateway for TMDB, embeddings and vector search",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.services = services

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(GatewayError, gateway_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register routes
    app.include_router(search_router)
    app.include_router(tmdb_router)
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route(
        "/metrics",
        metrics_endpoint,
        methods=["GET"],
        tags=["Observability"],
        include_in_schema=False,
    )

    return app


async def gateway_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert GatewayError exceptions to ``{"error": message}`` responses.

    Shared by the search endpoints and the TMDB passthrough.
    """
    if not isinstance(exc, GatewayError):
        return await unhandled_exception_handler(request, exc)

    status_code = _get_status_code(exc)
    log = logger.warning if status_code < 500 else logger.error
    log(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Answer unexpected failures with a generic ``{"error": message}`` body."""
    logger.exception(
        f"Unhandled error: {exc!r}",
        extra={"path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Report malformed request bodies and parameters as 400s."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    message = _describe_validation_errors(errors) or "Invalid request"
    return await gateway_exception_handler(
        request,
        InvalidInputError(message, details={"errors": errors}),
    )


def _describe_validation_errors(errors: Any) -> str:
    """Render the first validation error as ``field: reason``."""
    if not errors:
        return ""
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query")]
    reason = first.get("msg", "invalid value")
    if not location:
        return reason
    return f"{'.'.join(location)}: {reason}"


def _get_status_code(exc: GatewayError) -> int:
    """Map an error to its HTTP status code."""
    if isinstance(exc, UpstreamHTTPError):
        return exc.status_code

    if exc.code == ErrorCode.INVALID_INPUT:
        return 400

    return 500


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(request: Request) -> dict[str, Any]:
    """Kubernetes readiness probe.

    Reports whether the outbound clients have been built.
    """
    checks: dict[str, str] = {
        "config": "ok",
        "services": "ok" if getattr(request.app.state, "services", None) else "missing",
    }

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe."""
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()
