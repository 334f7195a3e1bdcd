"""
A mounted smart inventory detail page.

The page ties the loader to the router. Each navigation is classified once
into a PathTransition, and the reload effect runs for exactly two of them:

    MOUNT              first navigation of this page
    RETURN_TO_DETAILS  from somewhere under the resource root back to /details

Any other tab switch reuses the loaded inventory. A page is bound to one
resource identifier for its whole life; a different identifier is a
different page.
"""

from __future__ import annotations

import asyncio
import logging
import time

from smartinv.core import CoreError
from smartinv.core.events import BreadcrumbEvent, EventBus
from smartinv.core.i18n import Translator
from smartinv.core.loader import BreadcrumbNotifier, FetchDetail, ResourceLoader
from smartinv.core.models import SmartInventory
from smartinv.core.routing import (
    PathTransition,
    RouteContext,
    RoutePaths,
    classify_transition,
    resolve_route,
)
from smartinv.core.state import LoadState
from smartinv.view.composer import RenderDecision, ViewComposer

logger = logging.getLogger(__name__)

# Transitions that (re)fetch the inventory
RELOAD_TRANSITIONS = frozenset({PathTransition.MOUNT, PathTransition.RETURN_TO_DETAILS})


class PageMismatchError(CoreError):
    """Raised when a page is navigated to a path for another resource."""


class SmartInventoryPage:
    """
    Detail page state for one resource identifier.

    Usage:
        page = SmartInventoryPage("session-1", "42", client.read_detail)
        page.navigate("/inventories/smart_inventory/42/details")
        await page.wait_settled()
        decision = page.render(translate)
    """

    def __init__(
        self,
        page_id: str,
        resource_id: str,
        fetch_detail: FetchDetail,
        *,
        paths: RoutePaths | None = None,
        event_bus: EventBus | None = None,
        notify_breadcrumb: BreadcrumbNotifier | None = None,
    ) -> None:
        self.page_id = page_id
        self.resource_id = resource_id
        self.paths = paths or RoutePaths()
        self.composer = ViewComposer(self.paths)

        self._event_bus = event_bus
        self.loader = ResourceLoader(
            fetch_detail,
            notify_breadcrumb or self._publish_breadcrumb,
            event_bus=event_bus,
            page_id=page_id,
        )

        self._route: RouteContext | None = None
        self._load_task: asyncio.Task[None] | None = None
        self._unmounted = False
        self.last_seen = time.time()

    def touch(self) -> None:
        """Update last_seen timestamp."""
        self.last_seen = time.time()

    def is_expired(self, timeout_s: float) -> bool:
        """Check if the page has been idle for longer than `timeout_s`."""
        return (time.time() - self.last_seen) > timeout_s

    @property
    def mounted(self) -> bool:
        return self._route is not None and not self._unmounted

    @property
    def root(self) -> str:
        """The bare resource root this page is bound to."""
        return self.paths.root_for(self.resource_id)

    @property
    def route(self) -> RouteContext | None:
        """The route of the current location (None before mount)."""
        return self._route

    @property
    def state(self) -> LoadState:
        return self.loader.state

    @property
    def loading(self) -> bool:
        """True while a load task is still running."""
        return self._load_task is not None and not self._load_task.done()

    def navigate(self, path: str, *, location_changed: bool = True) -> PathTransition:
        """
        Handle a location change.

        Args:
            path: The new location path.
            location_changed: False when the same location is re-delivered
                (e.g. a re-render without history change).

        Returns:
            How the navigation was classified; MOUNT and RETURN_TO_DETAILS
            started a new load.
        """
        if self._unmounted:
            raise CoreError(f"Page {self.page_id} has been unmounted")

        route = resolve_route(path, self.paths)
        if route.resource_id != self.resource_id:
            raise PageMismatchError(
                f"Page for inventory {self.resource_id} cannot show {route.path}"
            )

        self.touch()
        previous = self._route.path if self._route is not None else None
        transition = classify_transition(
            previous,
            route.path,
            self.resource_id,
            self.paths,
            location_changed=location_changed,
        )
        self._route = route

        logger.debug(
            "Page %s: %s -> %s (%s)",
            self.page_id,
            previous,
            route.path,
            transition.value,
        )

        if transition in RELOAD_TRANSITIONS:
            self._start_load()

        return transition

    def render(self, translate: Translator) -> RenderDecision:
        """Compose what the page shows right now."""
        if self._route is None:
            raise CoreError(f"Page {self.page_id} has not been mounted")
        self.touch()
        return self.composer.compose(self.state, self._route, translate)

    async def wait_settled(self) -> LoadState:
        """Wait until no load is in flight and return the final state."""
        while self._load_task is not None and not self._load_task.done():
            # asyncio.wait neither raises for a cancelled (superseded) task
            # nor cancels it if the waiter goes away.
            await asyncio.wait({self._load_task})
        return self.state

    async def unmount(self) -> None:
        """Cancel any in-flight load and detach the page."""
        self._unmounted = True
        task = self._load_task
        self._load_task = None

        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})

        logger.debug("Page %s for inventory %s unmounted", self.page_id, self.resource_id)

    def _start_load(self) -> None:
        previous = self._load_task
        if previous is not None and not previous.done():
            logger.debug("Cancelling superseded load for inventory %s", self.resource_id)
            previous.cancel()

        self._load_task = self.loader.start(self.resource_id)

    async def _publish_breadcrumb(self, inventory: SmartInventory) -> None:
        if self._event_bus is None:
            return

        await self._event_bus.publish(
            BreadcrumbEvent(
                page_id=self.page_id,
                inventory_id=inventory.id,
                name=inventory.name,
                path=self.root,
            )
        )
