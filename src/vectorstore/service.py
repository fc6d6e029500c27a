"""Vector store interface with Astra Data API and Qdrant implementations."""

from abc import ABC, abstractmethod
from typing import Any

import httpx
from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Document

from src.config import AstraSettings, QdrantSettings, get_settings
from src.exceptions import ErrorCode, VectorStoreError
from src.logging_config import get_logger
from src.vectorstore.models import ASTRA_VECTOR_FIELD, QueryResult, VectorQuery

logger = get_logger(__name__)


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Implementations run one similarity search per call and return raw
    records in the store's ranking order.
    """

    # Record key holding the stored vector, if the store returns one
    vector_field: str | None = None

    @abstractmethod
    async def find(self, query: VectorQuery) -> QueryResult:
        """Run a similarity search.

        Args:
            query: Search key, collection and limit.

        Returns:
            Records ordered by similarity.

        Raises:
            VectorStoreError: If the search fails.
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""
        return None


class AstraVectorStore(VectorStore):
    """DataStax Astra DB store, queried through the JSON Data API."""

    vector_field = ASTRA_VECTOR_FIELD

    def __init__(
        self,
        settings: AstraSettings | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the Astra store.

        Args:
            settings: Astra configuration.
            client: Existing HTTP client (for testing).
            timeout: Request timeout in seconds.
        """
        self._settings = settings or get_settings().astra
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout or get_settings().vector_store_timeout

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _collection_url(self, collection: str) -> str:
        endpoint = self._settings.api_endpoint.rstrip("/")
        return f"{endpoint}/api/json/v1/{self._settings.keyspace}/{collection}"

    def _find_command(self, query: VectorQuery) -> dict[str, Any]:
        if query.vector is not None:
            sort: dict[str, Any] = {"$vector": query.vector}
        else:
            sort = {"$vectorize": query.text}
        return {
            "find": {
                "filter": {},
                "sort": sort,
                "projection": {ASTRA_VECTOR_FIELD: 0},
                "options": {"limit": query.limit},
            }
        }

    async def find(self, query: VectorQuery) -> QueryResult:
        """Run a ``find`` command sorted by vector similarity."""
        client = await self._get_client()
        url = self._collection_url(query.collection)
        headers = {"Token": self._settings.application_token.get_secret_value()}

        try:
            response = await client.post(
                url, json=self._find_command(query), headers=headers
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(
                f"Vector store request failed: {status_code}",
                extra={"collection": query.collection, "status": status_code},
            )
            message = _data_api_message(_json_or_none(e.response)) or (
                f"Vector store returned {status_code}"
            )
            raise VectorStoreError(
                message,
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": query.collection, "status_code": status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(
                f"Vector store request error: {e!r}",
                extra={"collection": query.collection},
            )
            raise VectorStoreError(
                f"Failed to connect to vector store: {e!r}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": query.collection},
            ) from e
        except ValueError as e:
            raise VectorStoreError(
                f"Invalid response from vector store: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": query.collection},
            ) from e

        # The Data API reports command failures with a 200 and an errors array
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            message = _data_api_message(body) or "Vector store command failed"
            logger.error(
                f"Vector store command failed: {message}",
                extra={"collection": query.collection, "errors": errors},
            )
            raise VectorStoreError(
                message,
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": query.collection, "errors": errors},
            )

        try:
            documents = body["data"]["documents"]
        except (KeyError, TypeError) as e:
            raise VectorStoreError(
                f"Invalid response from vector store: missing {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": query.collection},
            ) from e

        if not isinstance(documents, list) or not all(
            isinstance(document, dict) for document in documents
        ):
            raise VectorStoreError(
                "Invalid response from vector store: documents are not objects",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": query.collection},
            )

        return [dict(document) for document in documents]


class QdrantVectorStore(VectorStore):
    """Qdrant vector store implementation.

    Text queries rely on Qdrant inference to vectorize server-side.
    """

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: AsyncQdrantClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize Qdrant vector store.

        Args:
            settings: Qdrant configuration.
            client: Existing client (for testing).
            timeout: Request timeout in seconds.
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout or get_settings().vector_store_timeout

    async def _get_client(self) -> AsyncQdrantClient:
        """Get or create Qdrant client."""
        if self._client is None:
            api_key = None
            if self._settings.api_key:
                api_key = self._settings.api_key.get_secret_value() or None

            self._client = AsyncQdrantClient(
                url=self._settings.url,
                api_key=api_key,
                timeout=int(self._timeout),
                cloud_inference=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the Qdrant client."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    async def find(self, query: VectorQuery) -> QueryResult:
        """Search for the nearest points, payload only."""
        client = await self._get_client()

        search_key: list[float] | Document
        if query.vector is not None:
            search_key = query.vector
        else:
            search_key = Document(
                text=query.text or "",
                model=self._settings.inference_model,
            )

        try:
            results = await client.query_points(
                collection_name=query.collection,
                query=search_key,
                limit=query.limit,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            logger.error(
                f"Vector store search failed: {e}",
                extra={"collection": query.collection},
            )
            raise VectorStoreError(
                f"Failed to search: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": query.collection, "error": str(e)},
            ) from e

        return [
            {
                "_id": str(point.id),
                "$similarity": point.score,
                **(dict(point.payload) if point.payload else {}),
            }
            for point in results.points
        ]


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _data_api_message(body: Any) -> str | None:
    """First error message from a Data API body, if it carries one."""
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0]
    if isinstance(first, dict) and isinstance(first.get("message"), str):
        return first["message"] or None
    if isinstance(first, str) and first:
        return first
    return None
