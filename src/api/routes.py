"""API routes for embedding and vector search."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_embedding_generator, get_vector_query_executor
from src.config import Settings, get_settings
from src.embeddings.generator import EmbeddingGenerator
from src.embeddings.models import EmbedRequest
from src.vectorstore.executor import VectorQueryExecutor
from src.vectorstore.models import LibrarySearchRequest, MovieSearchRequest, QueryResult

router = APIRouter(prefix="/api", tags=["Search"])

GeneratorDep = Annotated[EmbeddingGenerator, Depends(get_embedding_generator)]
ExecutorDep = Annotated[VectorQueryExecutor, Depends(get_vector_query_executor)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.post("/embed", response_model=list[float])
async def embed_endpoint(body: EmbedRequest, generator: GeneratorDep) -> list[float]:
    """Embed the given texts and return one combined vector."""
    return await generator.generate(body.texts)


@router.post("/datastrax/db/movie")
async def movie_search_endpoint(
    body: MovieSearchRequest,
    executor: ExecutorDep,
    settings: SettingsDep,
) -> QueryResult:
    """Find the movies closest to a precomputed query vector."""
    return await executor.find_by_vector(
        settings.movie_collection,
        body.vector,
        limit=settings.movie_query_limit,
    )


@router.post("/datastrax/library")
async def library_search_endpoint(
    body: LibrarySearchRequest,
    executor: ExecutorDep,
    settings: SettingsDep,
) -> QueryResult:
    """Find library records matching free text, vectorized by the store."""
    return await executor.find_by_text(
        settings.library_collection,
        body.expression,
        limit=settings.library_query_limit,
    )
