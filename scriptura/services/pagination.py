# scriptura/services/pagination.py
"""
Search result pager.

A Pager drives forward/backward navigation over search results whose
total may be unknown. It holds no result cache: every transition fetches
the target page again. Transitions are serialized with an asyncio lock so
a second click waits for the first fetch to finish.

States:
    Active(page, total_pages | unknown)  -- after a successful start()
    Expired                               -- inactivity timeout or expire()

When the backend reports no total, "next" keeps fetching until a page
comes back empty (or short); that page index becomes the known last page
and "next" is disabled from then on.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from scriptura.services.presenter import PAGE_SIZE, clamp_page, total_pages
from scriptura.services.references.results import Failure, SearchSet
from scriptura.utils.errors import ScripturaError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120

FetchPage = Callable[[int], Awaitable[Union[SearchSet, Failure]]]


class PagerExpired(ScripturaError):
    """Raised when navigating a pager after its inactivity window closed."""
    pass


@dataclass
class PageState:
    """
    Mutable per-interaction paging state.

    Attributes:
        page: Current 0-based page
        total_items: Total results if the backend reports it
        page_size: Results per page (fixed)
        last_activity: Clock reading of creation or last transition
        known_last_page: Last page discovered by probing (unknown totals)
    """
    page: int = 0
    total_items: Optional[int] = None
    page_size: int = PAGE_SIZE
    last_activity: float = 0.0
    known_last_page: Optional[int] = None

    @property
    def total_pages(self) -> Optional[int]:
        return total_pages(self.total_items, self.page_size)

    @property
    def last_page(self) -> Optional[int]:
        """Highest valid page index, if known."""
        pages = self.total_pages
        if pages is not None:
            return pages - 1
        return self.known_last_page

    @property
    def exhausted(self) -> bool:
        last = self.last_page
        return last is not None and self.page >= last


class Pager:
    """
    Usage:
        async def fetch(page):
            return await asyncio.to_thread(resolver.fetch_search_page, tr, query, page)

        pager = Pager(fetch)
        first = await pager.start()
        if isinstance(first, Failure) or not pager.started:
            ...  # show error / "No results found." instead of controls
        result = await pager.next()
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        page_size: int = PAGE_SIZE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.fetch_page = fetch_page
        self.timeout = timeout
        self.clock = clock
        self.state = PageState(page_size=page_size, last_activity=clock())
        self.current: Optional[SearchSet] = None
        self.started = False
        self._expired = False
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def page(self) -> int:
        return self.state.page

    @property
    def total_pages(self) -> Optional[int]:
        return self.state.total_pages

    @property
    def has_prev(self) -> bool:
        return self.started and not self._expired and self.state.page > 0

    @property
    def has_next(self) -> bool:
        return self.started and not self._expired and not self.state.exhausted

    @property
    def needs_controls(self) -> bool:
        """False when everything fits on the first page."""
        return self.has_prev or self.has_next

    def is_expired(self) -> bool:
        if self._expired:
            return True
        return self.clock() - self.state.last_activity >= self.timeout

    def expire(self):
        self._expired = True

    def _touch(self):
        self.state.last_activity = self.clock()

    def _absorb(self, result: SearchSet, page: int):
        """Record a non-empty page as current."""
        if isinstance(result.total, int):
            self.state.total_items = result.total
        self.state.page = page
        self.current = result
        if self.state.total_items is None and len(result.entries) < self.state.page_size:
            self.state.known_last_page = page

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def start(self, first: Optional[SearchSet] = None) -> Union[SearchSet, Failure]:
        """
        Load page 0.

        Args:
            first: Page 0 when the caller already has it (e.g. from the
                   initial resolve); fetched otherwise

        On failure or zero entries the pager is not started and the
        outcome is returned for the caller to report directly.
        """
        async with self._lock:
            result = first if first is not None else await self.fetch_page(0)
            if isinstance(result, SearchSet) and result.entries:
                self._absorb(result, 0)
                self.started = True
                self._touch()
            return result

    async def next(self) -> Union[SearchSet, Failure]:
        return await self._move(lambda page: page + 1)

    async def prev(self) -> Union[SearchSet, Failure]:
        return await self._move(lambda page: page - 1)

    async def go_to(self, target: int) -> Union[SearchSet, Failure]:
        """
        Move to a page, re-fetching it.

        Returns:
            The page now displayed, or the Failure of the fetch (the
            current page is left unchanged)

        Raises:
            PagerExpired: if the inactivity window has closed
            RuntimeError: if start() did not succeed
        """
        return await self._move(lambda page: target)

    async def _move(self, step: Callable[[int], int]) -> Union[SearchSet, Failure]:
        # The target is computed under the lock so queued clicks build on each other
        async with self._lock:
            if not self.started:
                raise RuntimeError("Pager has not been started.")
            if self.is_expired():
                self._expired = True
                raise PagerExpired("Pagination has expired.")

            target = clamp_page(step(self.state.page), self.total_pages)
            if self.state.known_last_page is not None:
                target = min(target, self.state.known_last_page)

            result = await self.fetch_page(target)
            self._touch()

            if isinstance(result, Failure):
                logger.warning(f"Page {target} fetch failed: {result.message}")
                return result

            if not result.entries:
                if target > self.state.page:
                    self.state.known_last_page = self.state.page
                return self.current

            self._absorb(result, target)
            return result
