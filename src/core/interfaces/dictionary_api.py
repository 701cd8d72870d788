"""Contract of the dictionary backend.

A structural Protocol: the httpx adapter implements it, and tests can hand
the controllers any stub with the same coroutine methods.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import (
    AuthResponse,
    DictionaryEntriesPage,
    FavoritesPage,
    HistoryPage,
    SignInCredentials,
    WordDetail,
)


@runtime_checkable
class DictionaryAPI(Protocol):
    """Operations the views need from the backend.

    Design rules:
    - Every method is async because it performs HTTP I/O.
    - Failures raise `RequestFailedError`; no method returns error sentinels.
    """

    async def fetch_entries(self, page: int, *, limit: int) -> DictionaryEntriesPage:
        ...

    async def fetch_word_detail(self, word: str) -> WordDetail:
        ...

    async def fetch_favorites(self) -> FavoritesPage:
        ...

    async def add_favorite(self, word: str) -> None:
        ...

    async def remove_favorite(self, word: str) -> None:
        ...

    async def fetch_history(self, page: int, *, limit: int) -> HistoryPage:
        ...

    async def signin(self, credentials: SignInCredentials) -> AuthResponse:
        ...
