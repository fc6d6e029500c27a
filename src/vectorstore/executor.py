"""Similarity search over a named collection, vector field stripped."""

import time
from numbers import Real
from typing import Any

from src.exceptions import InvalidInputError, VectorStoreError
from src.logging_config import get_logger
from src.observability.metrics import track_vector_query
from src.vectorstore.models import QueryResult, VectorQuery
from src.vectorstore.service import VectorStore

logger = get_logger(__name__)


class VectorQueryExecutor:
    """Runs top-K searches against a vector store.

    Every returned record has the vector field removed and the list is
    never longer than the requested limit.
    """

    def __init__(self, vector_store: VectorStore) -> None:
        self._vector_store = vector_store

    async def find_by_vector(
        self,
        collection: str,
        vector: Any,
        limit: int,
    ) -> QueryResult:
        """Search with a precomputed vector.

        Raises:
            InvalidInputError: If the vector is missing, empty, or not a
                list of numbers, or the limit is not positive.
            VectorStoreError: If the store call fails.
        """
        if vector is None:
            raise InvalidInputError("vector is required")
        if not isinstance(vector, list | tuple):
            raise InvalidInputError("vector must be an array of numbers")
        if not vector:
            raise InvalidInputError("vector must not be empty")
        if not all(isinstance(x, Real) and not isinstance(x, bool) for x in vector):
            raise InvalidInputError("vector must be an array of numbers")

        query = VectorQuery(
            collection=collection,
            vector=[float(x) for x in vector],
            limit=_validate_limit(limit),
        )
        return await self._execute(query, mode="vector")

    async def find_by_text(
        self,
        collection: str,
        text: Any,
        limit: int,
    ) -> QueryResult:
        """Search with raw text, vectorized by the store.

        Raises:
            InvalidInputError: If the text is missing, blank or not a
                string, or the limit is not positive.
            VectorStoreError: If the store call fails.
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Query provided is not a string.")

        query = VectorQuery(
            collection=collection,
            text=text,
            limit=_validate_limit(limit),
        )
        return await self._execute(query, mode="text")

    async def _execute(self, query: VectorQuery, mode: str) -> QueryResult:
        start = time.perf_counter()
        try:
            records = await self._vector_store.find(query)
        except VectorStoreError:
            track_vector_query(
                collection=query.collection,
                mode=mode,
                duration=time.perf_counter() - start,
                records_returned=0,
                success=False,
            )
            raise

        vector_field = self._vector_store.vector_field
        stripped = [
            {k: v for k, v in record.items() if k != vector_field}
            for record in records[: query.limit]
        ]

        track_vector_query(
            collection=query.collection,
            mode=mode,
            duration=time.perf_counter() - start,
            records_returned=len(stripped),
        )
        logger.debug(
            f"Vector query returned {len(stripped)} records",
            extra={"collection": query.collection, "mode": mode},
        )
        return stripped


def _validate_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidInputError("limit must be a positive integer")
    return limit
