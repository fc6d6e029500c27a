"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.api.dependencies import GatewayServices
from src.embeddings.models import EmbeddingResult
from src.embeddings.service import EmbeddingService
from src.tmdb.client import TMDBClient
from src.vectorstore.models import QueryResult, VectorQuery
from src.vectorstore.service import VectorStore


class FakeEmbeddingService(EmbeddingService):
    """Returns canned vectors and records each batch it was asked for."""

    def __init__(
        self,
        vectors: list[list[float]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.vectors = vectors or []
        self.error = error
        self.calls: list[list[str]] = []
        self.closed = False

    @property
    def model_name(self) -> str:
        return "fake-embed"

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        self.calls.append(list(texts))
        if self.error is not None:
            raise self.error
        return [
            EmbeddingResult(
                text=text,
                embedding=vector,
                model=self.model_name,
                dimensions=len(vector),
            )
            for text, vector in zip(texts, self.vectors, strict=False)
        ]

    async def close(self) -> None:
        self.closed = True


class FakeVectorStore(VectorStore):
    """Returns canned records and records each query it received."""

    vector_field = "$vector"

    def __init__(
        self,
        records: QueryResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.records = records or []
        self.error = error
        self.queries: list[VectorQuery] = []
        self.closed = False

    async def find(self, query: VectorQuery) -> QueryResult:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return [dict(record) for record in self.records]

    async def close(self) -> None:
        self.closed = True


def make_records(count: int, dimensions: int = 3) -> list[dict[str, Any]]:
    """Astra-shaped documents that still carry their vector."""
    return [
        {"_id": f"doc-{i}", "title": f"Title {i}", "$vector": [0.1] * dimensions}
        for i in range(count)
    ]


@pytest.fixture
def embedding_service() -> FakeEmbeddingService:
    return FakeEmbeddingService(vectors=[[1.0, 2.0], [3.0, 4.0]])


@pytest.fixture
def vector_store() -> FakeVectorStore:
    return FakeVectorStore(records=make_records(3))


@pytest.fixture
def tmdb_client() -> TMDBClient:
    # Tests that call TMDB replace this via dependency overrides
    return TMDBClient()


@pytest.fixture
def services(
    embedding_service: FakeEmbeddingService,
    vector_store: FakeVectorStore,
    tmdb_client: TMDBClient,
) -> GatewayServices:
    return GatewayServices(
        embedding_service=embedding_service,
        vector_store=vector_store,
        tmdb_client=tmdb_client,
    )


@pytest.fixture
def test_app(services: GatewayServices) -> FastAPI:
    return create_app(services=services)


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=test_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
