"""
Breadcrumb trail for the navigation chrome.

Listens for breadcrumb events from page loaders and remembers, per session,
the name of the inventory its page last loaded.
"""

from __future__ import annotations

import logging
from typing import Any

from smartinv.core.events import BreadcrumbEvent, Event, EventBus
from smartinv.core.i18n import Translator
from smartinv.core.routing import RoutePaths

logger = logging.getLogger(__name__)


class BreadcrumbTrail:
    """Per-session breadcrumb labels."""

    def __init__(self, paths: RoutePaths) -> None:
        self.paths = paths
        self._crumbs: dict[str, BreadcrumbEvent] = {}

    async def attach(self, bus: EventBus) -> None:
        """Start following breadcrumb events on a bus."""
        await bus.subscribe("inventory.breadcrumb", self._on_event)

    async def detach(self, bus: EventBus) -> None:
        await bus.unsubscribe("inventory.breadcrumb", self._on_event)

    async def _on_event(self, event: Event) -> None:
        if isinstance(event, BreadcrumbEvent):
            self._crumbs[event.page_id] = event
            logger.debug("Breadcrumb for %s: %s", event.page_id, event.name)

    def forget(self, session_id: str) -> None:
        self._crumbs.pop(session_id, None)

    def for_session(self, session_id: str, root: str, translate: Translator) -> list[dict[str, Any]]:
        """
        Build the trail shown above the page.

        The listing page is always first; the inventory's name follows once
        the page bound to `root` has loaded it. A crumb left over from an
        inventory the session showed earlier is not shown.
        """
        trail: list[dict[str, Any]] = [
            {"label": translate("Inventories"), "href": self.paths.listing_path},
        ]
        crumb = self._crumbs.get(session_id)
        if crumb is not None and crumb.path == root:
            trail.append({"label": crumb.name, "href": crumb.path})
        return trail
