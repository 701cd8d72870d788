"""Incremental pagination for the dictionary lists.

`PaginatedList` owns a page cursor and the accumulated items of one list
(word grid, history). It advances only when the UI asks for the next page,
the terminal equivalent of the last row scrolling into view.

Rules:
- A batch is appended as returned by the server; nothing is de-duplicated.
- `has_more` turns false as soon as a batch is shorter than `page_size`.
- While `loading` is true every advance request is ignored.
- A failed batch leaves `items` untouched and keeps the cursor where it
  was, so the next request asks for the same page again.
- `close()` / `reset()` invalidate in-flight loads; their results are dropped.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, TypeVar

from core.config import AppSettings
from core.domain.errors import RequestFailedError
from core.domain.models import HistoryEntry
from core.interfaces.dictionary_api import DictionaryAPI

logger = logging.getLogger(__name__)

T = TypeVar("T")

BatchLoader = Callable[[int], Awaitable[list[T]]]

WORDS_ERROR = "Could not load words"
HISTORY_ERROR = "Could not load history"


@dataclass
class ListState(Generic[T]):
    """Cursor, items and the three flags of a list."""

    page: int = 1
    items: list[T] = field(default_factory=list)
    loading: bool = False
    has_more: bool = True
    error: str = ""


class PaginatedList(Generic[T]):
    """One incrementally loaded list.

    `loader(page)` returns the batch for a cursor value; `page_step` is how far
    the cursor moves per batch (the word grid fetches two pages per batch).
    """

    def __init__(
        self,
        loader: BatchLoader[T],
        *,
        page_size: int,
        error_message: str,
        page_step: int = 1,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        if page_step < 1:
            raise ValueError("page_step must be >= 1")
        self._loader = loader
        self._page_size = page_size
        self._page_step = page_step
        self._error_message = error_message
        self._state: ListState[T] = ListState()
        self._generation = 0
        self._started = False
        self._closed = False

    @property
    def page(self) -> int:
        return self._state.page

    @property
    def items(self) -> list[T]:
        return list(self._state.items)

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def has_more(self) -> bool:
        return self._state.has_more

    @property
    def error(self) -> str:
        return self._state.error

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> None:
        """Load the first page (once)."""

        if self._started or self._closed:
            return
        self._started = True
        await self._load()

    async def request_next_page(self) -> bool:
        """Advance to the next page if allowed; returns whether a load ran."""

        if self._closed or self._state.loading or not self._state.has_more:
            return False
        if not self._started:
            await self.start()
            return True
        if not self._state.error:
            self._state.page += self._page_step
        await self._load()
        return True

    async def retry(self) -> bool:
        """Re-request the current page (after an error)."""

        if self._closed or self._state.loading or not self._state.has_more:
            return False
        self._started = True
        await self._load()
        return True

    def reset(self) -> None:
        """Start over from page 1, discarding anything in flight."""

        self._generation += 1
        self._state = ListState()
        self._started = False
        self._closed = False

    def close(self) -> None:
        """Tear down: results that arrive afterwards are ignored."""

        self._generation += 1
        self._closed = True
        self._state.loading = False

    async def _load(self) -> None:
        generation = self._generation
        page = self._state.page
        self._state.loading = True
        self._state.error = ""
        try:
            batch = await self._loader(page)
        except RequestFailedError as exc:
            if generation != self._generation:
                return
            logger.warning("Loading page %s failed: %s", page, exc)
            self._state.error = self._error_message
        else:
            if generation != self._generation:
                logger.debug("Dropping stale batch for page %s", page)
                return
            self._state.items.extend(batch)
            if len(batch) < self._page_size:
                self._state.has_more = False
        finally:
            if generation == self._generation:
                self._state.loading = False


def word_batch_loader(
    api: DictionaryAPI,
    *,
    limit: int = 5,
    pages_per_batch: int = 2,
) -> BatchLoader[str]:
    """Fetch `pages_per_batch` entry pages concurrently, concatenated in page order.

    If any page fails the others are cancelled and the error propagates.
    """

    async def load(page: int) -> list[str]:
        tasks = [
            asyncio.ensure_future(api.fetch_entries(page + offset, limit=limit))
            for offset in range(pages_per_batch)
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # A failed (or cancelled) page abandons the whole batch.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        words: list[str] = []
        for result in results:
            words.extend(result.words())
        return words

    return load


def history_batch_loader(api: DictionaryAPI, *, limit: int = 10) -> BatchLoader[HistoryEntry]:
    async def load(page: int) -> list[HistoryEntry]:
        result = await api.fetch_history(page, limit=limit)
        return list(result.results)

    return load


def word_list(api: DictionaryAPI, settings: AppSettings | None = None) -> PaginatedList[str]:
    settings = settings or AppSettings()
    limit = settings.word_page_limit
    pages = settings.words_pages_per_batch
    return PaginatedList(
        word_batch_loader(api, limit=limit, pages_per_batch=pages),
        page_size=limit * pages,
        page_step=pages,
        error_message=WORDS_ERROR,
    )


def history_list(
    api: DictionaryAPI,
    settings: AppSettings | None = None,
) -> PaginatedList[HistoryEntry]:
    settings = settings or AppSettings()
    limit = settings.history_page_limit
    return PaginatedList(
        history_batch_loader(api, limit=limit),
        page_size=limit,
        error_message=HISTORY_ERROR,
    )
