"""Vector store data models."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

# Field holding the stored vector on Astra documents
ASTRA_VECTOR_FIELD = "$vector"

QueryResult = list[dict[str, Any]]


class VectorQuery(BaseModel):
    """A similarity search against one collection.

    Exactly one of ``vector`` or ``text`` is set. ``text`` queries are
    vectorized by the store itself.

    Attributes:
        collection: Collection to search.
        vector: Precomputed query vector.
        text: Raw text for store-side vectorization.
        limit: Upper bound on returned records.
    """

    collection: str = Field(min_length=1, description="Collection name")
    vector: list[float] | None = Field(default=None, min_length=1)
    text: str | None = Field(default=None, min_length=1)
    limit: int = Field(default=10, ge=1, description="Maximum records")

    @model_validator(mode="after")
    def _one_search_key(self) -> "VectorQuery":
        if (self.vector is None) == (self.text is None):
            raise ValueError("exactly one of vector or text must be set")
        return self


class MovieSearchRequest(BaseModel):
    """Request body for the precomputed-vector movie search."""

    vector: list[float] = Field(min_length=1, description="Query vector")


class LibrarySearchRequest(BaseModel):
    """Request body for the text library search."""

    expression: str = Field(min_length=1, description="Free-text query")
