"""Turn one or more texts into a single query vector."""

from collections.abc import Sequence
from typing import Any

from src.embeddings.averaging import average_embeddings
from src.embeddings.service import EmbeddingService
from src.exceptions import InvalidInputError
from src.logging_config import get_logger

logger = get_logger(__name__)


class EmbeddingGenerator:
    """Embeds a batch of texts and combines them into one vector.

    The provider is called once per ``generate`` call, with every text
    in the same batch.
    """

    def __init__(self, embedding_service: EmbeddingService) -> None:
        self._embedding_service = embedding_service

    async def generate(self, texts: Any) -> list[float]:
        """Embed ``texts`` and return their combined vector.

        Args:
            texts: Non-empty list of strings.

        Returns:
            The single embedding when one text is given, otherwise the
            element-wise mean of all embeddings.

        Raises:
            InvalidInputError: If ``texts`` is missing, not a list of
                strings, or empty.
            DimensionMismatchError: If the provider returns vectors of
                differing lengths.
            EmbeddingError: If the provider call fails.
        """
        validated = _validate_texts(texts)

        results = await self._embedding_service.embed_batch(validated)
        vectors = [result.embedding for result in results]

        logger.debug(
            "Generated embeddings",
            extra={
                "texts": len(validated),
                "model": self._embedding_service.model_name,
            },
        )
        return average_embeddings(vectors)


def _validate_texts(texts: Any) -> list[str]:
    if texts is None:
        raise InvalidInputError("texts is required")
    if isinstance(texts, str) or not isinstance(texts, Sequence):
        raise InvalidInputError("texts must be an array of strings")
    if not texts:
        raise InvalidInputError("texts must not be empty")
    if not all(isinstance(text, str) for text in texts):
        raise InvalidInputError("texts must be an array of strings")
    return list(texts)
