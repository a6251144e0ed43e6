"""Lazy iteration over paged API listings.

The first page of a listing is fetched when the iterator is created, so
configuration mistakes (unknown calendar, missing scope, malformed dates)
raise immediately. Later pages are fetched one at a time, only when the
consumer asks for an item beyond the pages already seen.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cronofy_client.models import Page

if TYPE_CHECKING:
    from cronofy_client.executor import RequestExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PagedQuery:
    """One listing query: how to decode its pages and where to start."""

    decoder: Callable[[dict[str, Any]], Page]
    items_key: str
    url: str
    params: dict[str, Any] = field(default_factory=dict)


class PagedResultIterator:
    """Re-iterable sequence of the items of a paged listing.

    Each traversal replays the cached first page, then fetches the following
    pages again from the server; pages after the first are never cached.
    Materialize the sequence (e.g. ``list(results)``) for single-pass reads.

    Example:
        >>> events = client.read_events(from_=date(2024, 1, 1))
        >>> for event in events:
        ...     print(event.summary)
    """

    def __init__(self, executor: RequestExecutor, query: PagedQuery):
        self.executor = executor
        self.query = query
        self._first_page = self.fetch_page(query.url, query.params)

    @property
    def first_page(self) -> Page:
        """The page fetched at construction."""
        return self._first_page

    def fetch_page(self, url: str, params: dict[str, Any] | None = None) -> Page:
        """GET and decode one page. Errors propagate as CronofyError."""
        logger.debug(f"Fetching page of {self.query.items_key}: {url}")
        data = self.executor.get(url, params)
        return self.query.decoder(data or {})

    def __iter__(self) -> PageCursor:
        return PageCursor(self)


class PageCursor(Iterator):
    """Position within one traversal of a PagedResultIterator.

    Holds the current page and the index of the next item in it. Asking for
    the item after the last one of a page fetches the page at its
    ``next_page`` locator. After a failed fetch the cursor is finished.
    """

    def __init__(self, results: PagedResultIterator):
        self._results = results
        self._items_key = results.query.items_key
        self._page: Page | None = results.first_page
        self._position = 0

    def __next__(self) -> Any:
        while self._page is not None:
            items = self._page[self._items_key]
            if self._position < len(items):
                item = items[self._position]
                self._position += 1
                return item

            next_page = self._page.pages.next_page
            # Cleared before fetching so a failed fetch ends the traversal
            self._page = None
            if next_page is None:
                break
            self._page = self._results.fetch_page(next_page)
            self._position = 0

        raise StopIteration
