"""
Cursor pagination

Square list endpoints return a page of items plus an optional ``cursor``.
CursorPager turns that into a lazy async sequence. Every ``async for``
starts again from the first page, and a page without a cursor is the last.
"""

import logging
from typing import AsyncIterator, Awaitable, Callable, Generic, List, Optional, Tuple, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchPage = Callable[[Optional[str]], Awaitable[Tuple[List[T], Optional[str]]]]


class CursorPager(Generic[T]):
    """Lazy, restartable async iterable over every item of a paginated listing"""

    def __init__(self, fetch_page: FetchPage, cursor: Optional[str] = None):
        """
        Args:
            fetch_page: Coroutine taking a cursor (None for the first page)
                and returning (items, next_cursor)
            cursor: Optional cursor to start from instead of the first page
        """
        self._fetch_page = fetch_page
        self._start_cursor = cursor

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        async for page in self.pages():
            for item in page:
                yield item

    async def pages(self) -> AsyncIterator[List[T]]:
        """Yield one list of items per page fetched"""
        cursor = self._start_cursor
        page_number = 0
        while True:
            page_number += 1
            items, cursor = await self._fetch_page(cursor)
            logger.debug(f"Fetched page {page_number} with {len(items)} items")
            yield items
            if not cursor:
                break

    async def collect(self, limit: Optional[int] = None) -> List[T]:
        """
        Drain the listing into a list

        Args:
            limit: Stop after this many items (no further pages are fetched)
        """
        results: List[T] = []
        if limit is not None and limit <= 0:
            return results
        async for item in self:
            results.append(item)
            if limit is not None and len(results) >= limit:
                break
        return results
