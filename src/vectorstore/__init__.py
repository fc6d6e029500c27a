"""Vector store module."""

from src.vectorstore.executor import VectorQueryExecutor
from src.vectorstore.models import (
    LibrarySearchRequest,
    MovieSearchRequest,
    QueryResult,
    VectorQuery,
)
from src.vectorstore.service import AstraVectorStore, QdrantVectorStore, VectorStore

__all__ = [
    "AstraVectorStore",
    "LibrarySearchRequest",
    "MovieSearchRequest",
    "QdrantVectorStore",
    "QueryResult",
    "VectorQuery",
    "VectorQueryExecutor",
    "VectorStore",
]
