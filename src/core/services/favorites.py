"""Favorites: loading the list and toggling membership.

`toggle()` updates local membership first and only then sends the PATCH.
If the remote call fails the local change is NOT rolled back; the failure is
logged and kept in `last_error`. Known gap, left as is.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from core.domain.errors import RequestFailedError
from core.domain.models import FavoriteEntry
from core.interfaces.dictionary_api import DictionaryAPI

logger = logging.getLogger(__name__)

FAVORITES_ERROR = "Could not load favorites"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class FavoritesController:
    def __init__(self, api: DictionaryAPI) -> None:
        self._api = api
        self._entries: list[FavoriteEntry] = []
        self._words: set[str] = set()
        self._generation = 0
        self._closed = False
        self.loading = False
        self.loaded = False
        self.error = ""
        self.last_error: str | None = None

    @property
    def entries(self) -> list[FavoriteEntry]:
        return list(self._entries)

    @property
    def words(self) -> list[str]:
        return [entry.word for entry in self._entries]

    @property
    def has_more(self) -> bool:
        # The favorites endpoint is read in a single request.
        return not self.loaded

    def is_favorite(self, word: str) -> bool:
        return word in self._words

    async def load(self) -> None:
        if self._closed or self.loading:
            return
        generation = self._generation
        self.loading = True
        self.error = ""
        try:
            page = await self._api.fetch_favorites()
        except RequestFailedError as exc:
            if generation != self._generation:
                return
            logger.warning("Loading favorites failed: %s", exc)
            self.error = FAVORITES_ERROR
        else:
            if generation != self._generation:
                return
            self._entries = list(page.results)
            self._words = {entry.word for entry in self._entries}
            self.loaded = True
        finally:
            if generation == self._generation:
                self.loading = False

    async def toggle(self, word: str) -> bool:
        """Flip membership of `word`; returns the new local membership."""

        if word in self._words:
            self._words.discard(word)
            self._entries = [entry for entry in self._entries if entry.word != word]
            remote = self._api.remove_favorite
            now_favorite = False
        else:
            self._words.add(word)
            self._entries.append(FavoriteEntry(word=word, added=_now_iso()))
            remote = self._api.add_favorite
            now_favorite = True

        self.last_error = None
        try:
            await remote(word)
        except RequestFailedError as exc:
            logger.warning("Favorite update for %r failed, local state kept: %s", word, exc)
            self.last_error = str(exc)
        return now_favorite

    def close(self) -> None:
        self._generation += 1
        self._closed = True
        self.loading = False
