"""Observability module for metrics and monitoring."""

from src.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    track_embedding_request,
    track_upstream_request,
    track_vector_query,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "track_embedding_request",
    "track_upstream_request",
    "track_vector_query",
]
