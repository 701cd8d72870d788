"""httpx wrapper for the dictionary backend.

- `build_async_client` standardizes base URL, timeout and headers (including
  the bearer token) for every request.
- `DictionaryApiClient` implements `core.interfaces.dictionary_api.DictionaryAPI`
  and turns every failure into `RequestFailedError`.

Tests substitute the network with `httpx.MockTransport` via `transport=`.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from core.config import AppSettings
from core.domain.errors import AuthenticationError, RequestFailedError
from core.domain.models import (
    AuthResponse,
    DictionaryEntriesPage,
    FavoritesPage,
    HistoryPage,
    SignInCredentials,
    WordDetail,
    WordDetailResponse,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    token: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` bound to the backend base URL.

    The token is an explicit argument: nothing here reads session state.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.require_backend_url(),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def word_path(word: str, *suffix: str) -> str:
    """Path of an entry, with the word encoded as a single path segment."""

    parts = ["/dictionary/entries/en", quote(word, safe="")]
    parts.extend(suffix)
    return "/".join(parts)


class DictionaryApiClient:
    """Async client for the dictionary REST backend.

    Usage::

        async with DictionaryApiClient(settings, token=store.token) as api:
            page = await api.fetch_entries(1, limit=5)
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = build_async_client(self._settings, token=token, transport=transport)

    async def __aenter__(self) -> "DictionaryApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise RequestFailedError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            logger.warning("%s %s returned HTTP %s", method, path, response.status_code)
            raise RequestFailedError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def _get_model(
        self,
        path: str,
        model: type[ModelT],
        *,
        params: dict[str, Any] | None = None,
    ) -> ModelT:
        response = await self._send("GET", path, params=params)
        return _parse(response, model)

    async def fetch_entries(self, page: int, *, limit: int) -> DictionaryEntriesPage:
        return await self._get_model(
            "/dictionary/entries/en",
            DictionaryEntriesPage,
            params={"limit": limit, "page": page},
        )

    async def fetch_word_detail(self, word: str) -> WordDetail:
        payload = await self._get_model(word_path(word), WordDetailResponse)
        if not payload.results:
            raise RequestFailedError(f"no entry returned for {word!r}")
        return payload.results[0]

    async def fetch_favorites(self) -> FavoritesPage:
        return await self._get_model("/user/me/favorites", FavoritesPage)

    async def add_favorite(self, word: str) -> None:
        await self._send("PATCH", word_path(word, "favorite"), json={"word": word})

    async def remove_favorite(self, word: str) -> None:
        await self._send("PATCH", word_path(word, "unfavorite"), json={"word": word})

    async def fetch_history(self, page: int, *, limit: int) -> HistoryPage:
        return await self._get_model(
            "/user/me/history",
            HistoryPage,
            params={"page": page, "limit": limit},
        )

    async def signin(self, credentials: SignInCredentials) -> AuthResponse:
        try:
            response = await self._send(
                "POST",
                "/auth/signin",
                json=credentials.model_dump(mode="json"),
            )
            return _parse(response, AuthResponse)
        except RequestFailedError as exc:
            raise AuthenticationError("Authentication failed", status_code=exc.status_code) from exc


def _parse(response: httpx.Response, model: type[ModelT]) -> ModelT:
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise RequestFailedError(
            f"unexpected payload from {response.request.url.path}: {exc}",
            status_code=response.status_code,
        ) from exc
