"""Tests for the TMDB passthrough routes."""

import httpx
import pytest
from httpx import AsyncClient

from src.config import TMDBSettings
from src.tmdb.client import TMDBClient

_requests: list[httpx.Request] = []


def _handler(request: httpx.Request) -> httpx.Response:
    _requests.append(request)
    if request.url.path.endswith("/movie/0"):
        return httpx.Response(
            404,
            json={"status_message": "The resource you requested could not be found."},
        )
    return httpx.Response(200, json={"path": request.url.path})


@pytest.fixture
def tmdb_client() -> TMDBClient:
    _requests.clear()
    settings = TMDBSettings(base_url="https://tmdb.test/3", api_key="tmdb-key")
    return TMDBClient(
        settings=settings,
        client=httpx.AsyncClient(transport=httpx.MockTransport(_handler)),
    )


class TestTMDBRoutes:
    """Each route maps onto one TMDB resource."""

    @pytest.mark.parametrize(
        ("route", "tmdb_path"),
        [
            ("/api/trending/all", "/3/trending/all/week"),
            ("/api/trending/movies", "/3/trending/movie/week"),
            ("/api/trending/shows", "/3/trending/tv/week"),
            ("/api/movie/upcoming", "/3/movie/upcoming"),
            ("/api/movie/details?id=603", "/3/movie/603"),
            ("/api/tv/details?id=1399", "/3/tv/1399"),
            ("/api/movie/genre?id=28", "/3/discover/movie"),
            ("/api/tv/genre?id=18", "/3/discover/tv"),
            ("/api/search?query=matrix", "/3/search/multi"),
        ],
    )
    async def test_route_relays_json(
        self, client: AsyncClient, route: str, tmdb_path: str
    ) -> None:
        response = await client.get(route)

        assert response.status_code == 200
        assert response.json() == {"path": tmdb_path}

    async def test_api_key_stays_server_side(self, client: AsyncClient) -> None:
        response = await client.get("/api/trending/all")

        assert _requests[0].url.params["api_key"] == "tmdb-key"
        assert "tmdb-key" not in response.text

    async def test_genre_passed_through(self, client: AsyncClient) -> None:
        await client.get("/api/movie/genre?id=28")

        assert _requests[0].url.params["with_genres"] == "28"

    async def test_missing_genre_id(self, client: AsyncClient) -> None:
        response = await client.get("/api/tv/genre")

        assert response.status_code == 400
        assert response.json()["error"].startswith("id")

    async def test_upstream_status_relayed(self, client: AsyncClient) -> None:
        response = await client.get("/api/movie/details?id=0")

        assert response.status_code == 404
        assert response.json() == {
            "error": "The resource you requested could not be found."
        }

    async def test_missing_id(self, client: AsyncClient) -> None:
        response = await client.get("/api/movie/details")

        assert response.status_code == 400
        assert response.json()["error"].startswith("id")
        assert _requests == []

    async def test_missing_search_query(self, client: AsyncClient) -> None:
        response = await client.get("/api/search")

        assert response.status_code == 400
