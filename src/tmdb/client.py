"""Passthrough client for The Movie Database (TMDB) v3 API."""

import time
from typing import Any

import httpx

from src.config import TMDBSettings, get_settings
from src.exceptions import ErrorCode, ProviderError, UpstreamHTTPError
from src.logging_config import get_logger
from src.observability.metrics import track_upstream_request

logger = get_logger(__name__)

DETAILS_APPENDS = "images,videos,recommendations,credits"
SERVER_ERROR_MESSAGE = "Server error. Please try again later."


class TMDBClient:
    """Fetches TMDB resources and relays their JSON unchanged.

    The API key is added to every request server-side and never leaves
    the gateway.
    """

    def __init__(
        self,
        settings: TMDBSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or get_settings().tmdb
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def trending(self, media_type: str) -> Any:
        """This week's trending ``all``, ``movie`` or ``tv`` titles."""
        return await self.fetch(f"/trending/{media_type}/week")

    async def upcoming_movies(self) -> Any:
        return await self.fetch("/movie/upcoming")

    async def details(self, media_type: str, title_id: str) -> Any:
        """Movie or TV details with images, videos, recommendations and credits."""
        return await self.fetch(
            f"/{media_type}/{title_id}",
            params={"append_to_response": DETAILS_APPENDS},
        )

    async def discover_by_genre(self, media_type: str, genre_id: str) -> Any:
        return await self.fetch(
            f"/discover/{media_type}",
            params={"with_genres": genre_id},
        )

    async def search(self, query: str) -> Any:
        return await self.fetch("/search/multi", params={"query": query})

    async def fetch(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a TMDB path and return the decoded JSON body.

        Args:
            path: Path below the API base URL.
            params: Extra query parameters.

        Returns:
            Decoded JSON body.

        Raises:
            UpstreamHTTPError: If TMDB answers with a non-success status.
            ProviderError: If TMDB cannot be reached or sends invalid JSON.
        """
        client = await self._get_client()
        url = f"{self._settings.base_url.rstrip('/')}{path}"
        query = {"api_key": self._settings.api_key.get_secret_value(), **(params or {})}

        start = time.perf_counter()
        try:
            response = await client.get(url, params=query)
        except httpx.RequestError as e:
            track_upstream_request("tmdb", time.perf_counter() - start, status="error")
            logger.error(f"Fetch or network error: {e!r}", extra={"path": path})
            raise ProviderError(
                SERVER_ERROR_MESSAGE,
                code=ErrorCode.UPSTREAM_UNAVAILABLE,
                details={"path": path, "error": repr(e)},
            ) from e

        track_upstream_request(
            "tmdb", time.perf_counter() - start, status=str(response.status_code)
        )

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                f"TMDB returned {response.status_code}",
                extra={"path": path, "upstream_message": message},
            )
            raise UpstreamHTTPError(
                message,
                status_code=response.status_code,
                details={"path": path},
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                SERVER_ERROR_MESSAGE,
                code=ErrorCode.UPSTREAM_UNAVAILABLE,
                details={"path": path, "error": str(e)},
            ) from e


def _error_message(response: httpx.Response) -> str:
    """Pull the upstream error message, falling back to the status line."""
    fallback = f"HTTP error: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if not isinstance(body, dict):
        return fallback

    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    status_message = body.get("status_message")
    if isinstance(status_message, str) and status_message:
        return status_message
    return fallback
