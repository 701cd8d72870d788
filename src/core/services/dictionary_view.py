"""Dictionary page state: tabs, selected word, detail panel and favorites.

This is the UI-agnostic composition the CLI renders. Switching tabs tears
down the list controller of the tab being left and mounts a fresh one for
the new tab, so every visit starts again from page 1.
"""

from __future__ import annotations

import logging
from enum import Enum

from core.config import AppSettings
from core.domain.models import HistoryEntry
from core.interfaces.dictionary_api import DictionaryAPI
from core.services.favorites import FavoritesController
from core.services.pagination import PaginatedList, history_list, word_list
from core.services.word_detail import WordDetailController

logger = logging.getLogger(__name__)

GRID_COLUMNS = 3


class Tab(str, Enum):
    """Tabs of the dictionary page; the value is what `t <tab>` accepts."""

    WORDS = "words"
    FAVORITES = "favorites"
    HISTORY = "history"

    def label(self) -> str:
        return {
            Tab.WORDS: "Word list",
            Tab.FAVORITES: "Favorites",
            Tab.HISTORY: "History",
        }[self]


def chunk_rows(words: list[str], columns: int = GRID_COLUMNS) -> list[list[str]]:
    """Lay words out row by row, `columns` per row (the last row may be short)."""

    return [words[i : i + columns] for i in range(0, len(words), columns)]


class DictionaryView:
    """State of the whole dictionary page.

    Owns:
    - the active tab and the list controller mounted for it;
    - the selected word and its `WordDetailController`;
    - the favorites set, loaded once on `open()` so the word grid can mark
      favorites on any tab.

    Note:
    - Signed-out users never trigger favorites or history requests; `notice`
      carries the message to show instead.
    """

    def __init__(
        self,
        api: DictionaryAPI,
        settings: AppSettings | None = None,
        *,
        authenticated: bool = False,
    ) -> None:
        self._api = api
        self._settings = settings or AppSettings()
        self.authenticated = authenticated
        self.active_tab = Tab.WORDS
        self.selected_word: str | None = None
        self.notice: str | None = None
        self.detail = WordDetailController(api)
        self.favorites = FavoritesController(api)
        self.words: PaginatedList[str] | None = None
        self.history: PaginatedList[HistoryEntry] | None = None

    async def open(self) -> None:
        """Mount the initial tab; favorites are loaded for the grid markers."""

        if self.authenticated:
            await self.favorites.load()
        await self._mount(self.active_tab)

    async def select_tab(self, tab: Tab) -> None:
        """Switch tabs, clearing the selection and restarting the new tab's list."""

        self._unmount(self.active_tab)
        self.active_tab = tab
        self.selected_word = None
        self.detail.clear()
        await self._mount(tab)

    async def select_word(self, word: str) -> None:
        self.selected_word = word
        await self.detail.load(word)

    async def toggle_favorite(self, word: str) -> bool | None:
        """Toggle `word`; returns the new membership, or None when signed out."""

        if not self.authenticated:
            self.notice = "Sign in to manage favorites"
            return None
        self.notice = None
        return await self.favorites.toggle(word)

    def is_favorite(self, word: str) -> bool:
        return self.favorites.is_favorite(word)

    async def next_page(self) -> bool:
        """Near-end-of-list signal for the active tab."""

        active = self._active_list()
        if active is None:
            return False
        return await active.request_next_page()

    async def retry(self) -> bool:
        """Retry the active tab after an error (favorites reload in full)."""

        if self.active_tab is Tab.FAVORITES:
            if not self.authenticated:
                return False
            await self.favorites.load()
            return True
        active = self._active_list()
        if active is None:
            return False
        return await active.retry()

    def word_rows(self) -> list[list[str]]:
        if self.words is None:
            return []
        return chunk_rows(self.words.items)

    def close(self) -> None:
        """Unmount everything; in-flight results are dropped."""

        self._unmount(self.active_tab)
        self.favorites.close()
        self.detail.clear()

    def _active_list(self) -> PaginatedList | None:
        if self.active_tab is Tab.WORDS:
            return self.words
        if self.active_tab is Tab.HISTORY:
            return self.history
        return None

    async def _mount(self, tab: Tab) -> None:
        self.notice = None
        if tab is Tab.WORDS:
            self.words = word_list(self._api, self._settings)
            await self.words.start()
            return
        if not self.authenticated:
            self.notice = f"Sign in to see {tab.label().lower()}"
            return
        if tab is Tab.FAVORITES:
            await self.favorites.load()
        elif tab is Tab.HISTORY:
            self.history = history_list(self._api, self._settings)
            await self.history.start()

    def _unmount(self, tab: Tab) -> None:
        if tab is Tab.WORDS and self.words is not None:
            self.words.close()
            self.words = None
        elif tab is Tab.HISTORY and self.history is not None:
            self.history.close()
            self.history = None
        logger.debug("Unmounted %s tab", tab.value)
