"""
Page Registry - Central repository for mounted detail pages.

Each browser session owns at most one mounted page. Navigating a session to a
different inventory identifier unmounts its current page and mounts a new one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterator

from smartinv.core import NotFoundError
from smartinv.core.events import EventBus
from smartinv.core.loader import FetchDetail
from smartinv.core.routing import RoutePaths, resolve_route
from smartinv.view.page import SmartInventoryPage

logger = logging.getLogger(__name__)


class PageRegistry:
    """
    Registry of mounted pages, keyed by session id.

    Thread-safety: This class uses an asyncio lock for safe concurrent
    access from multiple coroutines.
    """

    def __init__(
        self,
        fetch_detail: FetchDetail,
        *,
        paths: RoutePaths | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """
        Initialize an empty page registry.

        Args:
            fetch_detail: Fetch capability handed to every page's loader.
            paths: URL layout shared by all pages.
            event_bus: Bus receiving state and breadcrumb events.
        """
        self._fetch_detail = fetch_detail
        self.paths = paths or RoutePaths()
        self._event_bus = event_bus
        self._pages: dict[str, SmartInventoryPage] = {}
        self._lock = asyncio.Lock()

    async def navigate(self, session_id: str, path: str) -> SmartInventoryPage:
        """
        Deliver a navigation to a session's page, mounting one if needed.

        Args:
            session_id: The browser session.
            path: The new location path.

        Returns:
            The page now showing `path`.

        Raises:
            NotFoundError: If `path` does not address a resource.
        """
        route = resolve_route(path, self.paths)
        if route.resource_id is None:
            raise NotFoundError(f"No inventory in path {path}")

        replaced: SmartInventoryPage | None = None
        async with self._lock:
            page = self._pages.get(session_id)
            if page is not None and page.resource_id != route.resource_id:
                replaced = page
                page = None

            if page is None:
                page = SmartInventoryPage(
                    session_id,
                    route.resource_id,
                    self._fetch_detail,
                    paths=self.paths,
                    event_bus=self._event_bus,
                )
                self._pages[session_id] = page
                logger.info("Mounted page for inventory %s (session %s)", route.resource_id, session_id)

            page.navigate(route.path)

        # Unmount outside the lock to avoid holding it while the old load winds down
        if replaced is not None:
            logger.info(
                "Session %s moved from inventory %s to %s",
                session_id,
                replaced.resource_id,
                route.resource_id,
            )
            await replaced.unmount()

        return page

    async def get(self, session_id: str) -> SmartInventoryPage | None:
        """Look up the page mounted for a session."""
        async with self._lock:
            return self._pages.get(session_id)

    async def close(self, session_id: str) -> SmartInventoryPage | None:
        """
        Unmount and remove a session's page.

        Returns:
            The removed page, or None if the session had none.
        """
        async with self._lock:
            page = self._pages.pop(session_id, None)

        if page is not None:
            await page.unmount()
            logger.info("Closed page for inventory %s (session %s)", page.resource_id, session_id)
        return page

    async def prune_expired(self, timeout_s: float) -> list[str]:
        """
        Unmount pages idle for longer than `timeout_s`.

        Returns:
            Session ids whose pages were removed.
        """
        async with self._lock:
            expired = [
                (session_id, page)
                for session_id, page in self._pages.items()
                if page.is_expired(timeout_s)
            ]
            for session_id, _ in expired:
                del self._pages[session_id]

        for session_id, page in expired:
            await page.unmount()
            logger.debug("Expired page for inventory %s (session %s)", page.resource_id, session_id)

        if expired:
            logger.info("Pruned %d idle pages (%d remaining)", len(expired), len(self._pages))
        return [session_id for session_id, _ in expired]

    async def close_all(self) -> None:
        """
        Unmount every page and clear the registry.

        This is typically called during server shutdown.
        """
        async with self._lock:
            pages = list(self._pages.values())
            self._pages.clear()

        for page in pages:
            try:
                await page.unmount()
            except Exception as e:
                logger.warning("Error unmounting page %s: %s", page.page_id, e)

        logger.info("All pages closed (%d total)", len(pages))

    def __len__(self) -> int:
        """Return the number of mounted pages."""
        return len(self._pages)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._pages

    def __iter__(self) -> Iterator[str]:
        """Iterate over session ids with a mounted page."""
        return iter(self._pages)

    def __bool__(self) -> bool:
        """A registry instance is always truthy, even when empty."""
        return True
