"""Embedding service module."""

from src.embeddings.averaging import average_embeddings
from src.embeddings.generator import EmbeddingGenerator
from src.embeddings.models import EmbeddingResult, EmbedRequest
from src.embeddings.service import EmbeddingService, HTTPEmbeddingService

__all__ = [
    "EmbedRequest",
    "EmbeddingGenerator",
    "EmbeddingResult",
    "EmbeddingService",
    "HTTPEmbeddingService",
    "average_embeddings",
]
