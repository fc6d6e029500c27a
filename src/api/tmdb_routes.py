"""TMDB passthrough routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_tmdb_client
from src.tmdb.client import TMDBClient

router = APIRouter(prefix="/api", tags=["TMDB"])

TMDBDep = Annotated[TMDBClient, Depends(get_tmdb_client)]
TitleId = Annotated[str, Query(alias="id", min_length=1)]
GenreId = Annotated[str, Query(alias="id", min_length=1)]


@router.get("/trending/all")
async def trending_all(tmdb: TMDBDep) -> Any:
    return await tmdb.trending("all")


@router.get("/trending/movies")
async def trending_movies(tmdb: TMDBDep) -> Any:
    return await tmdb.trending("movie")


@router.get("/trending/shows")
async def trending_shows(tmdb: TMDBDep) -> Any:
    return await tmdb.trending("tv")


@router.get("/movie/upcoming")
async def upcoming_movies(tmdb: TMDBDep) -> Any:
    return await tmdb.upcoming_movies()


@router.get("/movie/details")
async def movie_details(tmdb: TMDBDep, title_id: TitleId) -> Any:
    return await tmdb.details("movie", title_id)


@router.get("/tv/details")
async def tv_details(tmdb: TMDBDep, title_id: TitleId) -> Any:
    return await tmdb.details("tv", title_id)


@router.get("/movie/genre")
async def movies_by_genre(tmdb: TMDBDep, genre_id: GenreId) -> Any:
    return await tmdb.discover_by_genre("movie", genre_id)


@router.get("/tv/genre")
async def shows_by_genre(tmdb: TMDBDep, genre_id: GenreId) -> Any:
    return await tmdb.discover_by_genre("tv", genre_id)


@router.get("/search")
async def search(tmdb: TMDBDep, query: Annotated[str, Query(min_length=1)]) -> Any:
    """Multi search across movies, shows and people."""
    return await tmdb.search(query)
