"""Construction and injection of the gateway's long-lived clients."""

from dataclasses import dataclass

from fastapi import Request

from src.config import Settings, VectorStoreBackend, get_settings
from src.embeddings.generator import EmbeddingGenerator
from src.embeddings.service import EmbeddingService, HTTPEmbeddingService
from src.exceptions import ConfigurationError
from src.logging_config import get_logger
from src.tmdb.client import TMDBClient
from src.vectorstore.executor import VectorQueryExecutor
from src.vectorstore.service import AstraVectorStore, QdrantVectorStore, VectorStore

logger = get_logger(__name__)


@dataclass
class GatewayServices:
    """Clients shared by all requests for the lifetime of the app."""

    embedding_service: EmbeddingService
    vector_store: VectorStore
    tmdb_client: TMDBClient

    async def close(self) -> None:
        await self.embedding_service.close()
        await self.vector_store.close()
        await self.tmdb_client.close()


def build_vector_store(settings: Settings) -> VectorStore:
    """Create the configured vector store backend."""
    if settings.vector_store_backend == VectorStoreBackend.QDRANT:
        return QdrantVectorStore(
            settings=settings.qdrant,
            timeout=settings.vector_store_timeout,
        )
    return AstraVectorStore(
        settings=settings.astra,
        timeout=settings.vector_store_timeout,
    )


def build_services(settings: Settings | None = None) -> GatewayServices:
    """Create every outbound client from settings.

    Clients connect lazily, so building never touches the network.
    """
    settings = settings or get_settings()
    logger.info(
        "Building gateway services",
        extra={"vector_store_backend": settings.vector_store_backend.value},
    )
    return GatewayServices(
        embedding_service=HTTPEmbeddingService(settings=settings.embedding),
        vector_store=build_vector_store(settings),
        tmdb_client=TMDBClient(settings=settings.tmdb),
    )


def get_services(request: Request) -> GatewayServices:
    """Fetch the services attached to the running app."""
    services: GatewayServices | None = getattr(request.app.state, "services", None)
    if services is None:
        raise ConfigurationError("Gateway services are not initialized")
    return services


def get_embedding_generator(request: Request) -> EmbeddingGenerator:
    return EmbeddingGenerator(get_services(request).embedding_service)


def get_vector_query_executor(request: Request) -> VectorQueryExecutor:
    return VectorQueryExecutor(get_services(request).vector_store)


def get_tmdb_client(request: Request) -> TMDBClient:
    return get_services(request).tmdb_client
