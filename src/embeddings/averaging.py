"""Element-wise averaging of embedding vectors."""

from collections.abc import Sequence

from src.exceptions import DimensionMismatchError, InvalidInputError


def average_embeddings(vectors: Sequence[Sequence[float]]) -> list[float]:
    """Combine a batch of vectors into their element-wise mean.

    A batch of one vector is returned as-is, without division.

    Args:
        vectors: Equal-length embedding vectors.

    Returns:
        The averaged vector, same length as each input.

    Raises:
        InvalidInputError: If the batch is empty.
        DimensionMismatchError: If the vectors differ in length.
    """
    if not vectors:
        raise InvalidInputError("Cannot average an empty batch of vectors")

    lengths = {len(vector) for vector in vectors}
    if len(lengths) > 1:
        raise DimensionMismatchError(
            "Embedding vectors in a batch must have the same length",
            details={"lengths": sorted(lengths)},
        )

    if len(vectors) == 1:
        return list(vectors[0])

    count = len(vectors)
    return [sum(column) / count for column in zip(*vectors, strict=True)]
