"""Detail panel state for the selected word."""

from __future__ import annotations

import logging

from core.domain.errors import RequestFailedError
from core.domain.models import WordDetail
from core.interfaces.dictionary_api import DictionaryAPI

logger = logging.getLogger(__name__)

WORD_DETAIL_ERROR = "Could not load word detail"


class WordDetailController:
    """Loads one word at a time; a newer `load()` supersedes an older one."""

    def __init__(self, api: DictionaryAPI) -> None:
        self._api = api
        self._generation = 0
        self.word: str | None = None
        self.detail: WordDetail | None = None
        self.loading = False
        self.error = ""

    async def load(self, word: str) -> WordDetail | None:
        if not word:
            return None
        self._generation += 1
        generation = self._generation
        self.word = word
        self.loading = True
        self.error = ""
        try:
            detail = await self._api.fetch_word_detail(word)
        except RequestFailedError as exc:
            if generation != self._generation:
                return None
            logger.warning("Loading detail for %r failed: %s", word, exc)
            self.error = WORD_DETAIL_ERROR
            self.loading = False
            return None
        if generation != self._generation:
            return None
        self.detail = detail
        self.loading = False
        return detail

    def clear(self) -> None:
        self._generation += 1
        self.word = None
        self.detail = None
        self.loading = False
        self.error = ""
