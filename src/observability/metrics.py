"""Prometheus metrics for the gateway.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Embedding request latency and batch sizes
- Vector query latency and result counts
- Upstream passthrough requests
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.logging_config import get_logger

logger = get_logger(__name__)

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["model", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["model", "status"],
)

EMBEDDING_BATCH_SIZE = Histogram(
    "embedding_batch_size",
    "Embedding batch size",
    ["model"],
    buckets=[1, 2, 5, 10, 25, 50, 96],
)

# Vector Query Metrics
VECTOR_QUERY_DURATION = Histogram(
    "vector_query_duration_seconds",
    "Vector query duration in seconds",
    ["collection", "mode", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

VECTOR_QUERY_TOTAL = Counter(
    "vector_queries_total",
    "Total vector queries",
    ["collection", "mode", "status"],
)

VECTOR_QUERY_RECORDS = Histogram(
    "vector_query_records_returned",
    "Number of records returned per vector query",
    ["collection"],
    buckets=[0, 1, 5, 10, 20, 50, 100],
)

# Upstream Passthrough Metrics
UPSTREAM_REQUEST_DURATION = Histogram(
    "upstream_request_duration_seconds",
    "Upstream passthrough request duration in seconds",
    ["upstream"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

UPSTREAM_REQUEST_TOTAL = Counter(
    "upstream_requests_total",
    "Total upstream passthrough requests",
    ["upstream", "status"],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware."""
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        endpoint = self._normalize_endpoint(request)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, request: Request) -> str:
        """Label requests by matched route template to bound cardinality.

        Unmatched paths all share the ``other`` label.
        """
        route = request.scope.get("route")
        path = getattr(route, "path", None)
        if not isinstance(path, str):
            return "other"
        if path.startswith("/health"):
            return "/health"
        return path


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_embedding_request(
    model: str,
    duration: float,
    batch_size: int,
    success: bool = True,
) -> None:
    """Track embedding request metrics.

    Args:
        model: Embedding model name.
        duration: Request duration in seconds.
        batch_size: Number of texts in the batch.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()
    EMBEDDING_BATCH_SIZE.labels(model=model).observe(batch_size)


def track_vector_query(
    collection: str,
    mode: str,
    duration: float,
    records_returned: int,
    success: bool = True,
) -> None:
    """Track vector query metrics.

    Args:
        collection: Collection searched.
        mode: ``vector`` or ``text``.
        duration: Query duration in seconds.
        records_returned: Number of records sent back.
        success: Whether the query succeeded.
    """
    status = "success" if success else "error"

    VECTOR_QUERY_DURATION.labels(
        collection=collection, mode=mode, status=status
    ).observe(duration)
    VECTOR_QUERY_TOTAL.labels(collection=collection, mode=mode, status=status).inc()
    if success:
        VECTOR_QUERY_RECORDS.labels(collection=collection).observe(records_returned)


def track_upstream_request(upstream: str, duration: float, status: str) -> None:
    """Track a passthrough request to an upstream API."""
    UPSTREAM_REQUEST_DURATION.labels(upstream=upstream).observe(duration)
    UPSTREAM_REQUEST_TOTAL.labels(upstream=upstream, status=status).inc()
