"""Tests for the TMDB passthrough client."""

import httpx
import pytest

from src.config import TMDBSettings
from src.exceptions import ErrorCode, ProviderError, UpstreamHTTPError
from src.tmdb.client import SERVER_ERROR_MESSAGE, TMDBClient


def _client(handler: httpx.MockTransport) -> TMDBClient:
    settings = TMDBSettings(base_url="https://tmdb.test/3", api_key="tmdb-key")
    return TMDBClient(settings=settings, client=httpx.AsyncClient(transport=handler))


class TestTMDBClient:
    """Tests for TMDBClient."""

    async def test_trending_adds_api_key(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": [{"id": 1}]})

        tmdb = _client(httpx.MockTransport(handler))
        data = await tmdb.trending("movie")

        assert data == {"results": [{"id": 1}]}
        assert seen[0].url.path == "/3/trending/movie/week"
        assert seen[0].url.params["api_key"] == "tmdb-key"

    async def test_details_appends_extras(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": 603})

        tmdb = _client(httpx.MockTransport(handler))
        await tmdb.details("movie", "603")

        assert seen[0].url.path == "/3/movie/603"
        assert (
            seen[0].url.params["append_to_response"]
            == "images,videos,recommendations,credits"
        )

    async def test_discover_and_search_params(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": []})

        tmdb = _client(httpx.MockTransport(handler))
        await tmdb.discover_by_genre("tv", "18")
        await tmdb.search("the matrix")

        assert seen[0].url.path == "/3/discover/tv"
        assert seen[0].url.params["with_genres"] == "18"
        assert seen[1].url.path == "/3/search/multi"
        assert seen[1].url.params["query"] == "the matrix"

    async def test_upstream_error_relays_status_and_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                401,
                json={"status_code": 7, "status_message": "Invalid API key"},
            )

        tmdb = _client(httpx.MockTransport(handler))

        with pytest.raises(UpstreamHTTPError) as exc_info:
            await tmdb.upcoming_movies()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid API key"

    async def test_upstream_error_nested_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": {"message": "Not found"}})

        tmdb = _client(httpx.MockTransport(handler))

        with pytest.raises(UpstreamHTTPError, match="Not found"):
            await tmdb.details("tv", "0")

    async def test_upstream_error_without_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        tmdb = _client(httpx.MockTransport(handler))

        with pytest.raises(UpstreamHTTPError, match="HTTP error: 502"):
            await tmdb.trending("all")

    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        tmdb = _client(httpx.MockTransport(handler))

        with pytest.raises(ProviderError) as exc_info:
            await tmdb.trending("all")

        assert exc_info.value.message == SERVER_ERROR_MESSAGE
        assert exc_info.value.code == ErrorCode.UPSTREAM_UNAVAILABLE
