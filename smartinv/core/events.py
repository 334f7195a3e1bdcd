"""
Event Bus for smartinv.

This module provides a simple pub/sub event system for decoupled communication
between components. The loader publishes state transitions and breadcrumb
updates; the web layer and tests subscribe to them.

Event types:
- inventory.state: A page's load state changed (loading/loaded/errored)
- inventory.breadcrumb: A page loaded its inventory; navigation chrome may
  display its name

Usage:
    from smartinv.core.events import event_bus

    async def on_breadcrumb(event: BreadcrumbEvent) -> None:
        print(f"{event.path} is now labelled {event.name}")

    await event_bus.subscribe("inventory.breadcrumb", on_breadcrumb)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

# Type alias for event handlers
EventHandler = Callable[["Event"], Coroutine[Any, Any, None]]


@dataclass
class Event:
    """Base class for all events."""

    event_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for JSON serialization."""
        return {"type": self.event_type}


@dataclass
class LoadStateEvent(Event):
    """Fired whenever a page's load state changes.

    `generation` identifies the load that produced the transition; consumers
    can use it to correlate a Loading event with its outcome.
    """

    event_type: str = field(default="inventory.state", init=False)
    page_id: str = ""
    inventory_id: str = ""
    state: str = ""  # loading, loaded, errored
    generation: int = 0
    error_kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.event_type,
            "page_id": self.page_id,
            "inventory_id": self.inventory_id,
            "state": self.state,
            "generation": self.generation,
        }
        if self.error_kind is not None:
            result["error_kind"] = self.error_kind
        return result


@dataclass
class BreadcrumbEvent(Event):
    """Fired when a page has loaded its inventory."""

    event_type: str = field(default="inventory.breadcrumb", init=False)
    page_id: str = ""
    inventory_id: int = 0
    name: str = ""
    path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.event_type,
            "page_id": self.page_id,
            "inventory_id": self.inventory_id,
            "name": self.name,
            "path": self.path,
        }


class EventBus:
    """
    Async pub/sub keyed by exact event type.

    Handlers run one after another in subscription order. A failing handler
    is logged and skipped; the remaining handlers still receive the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._lock = asyncio.Lock()

    async def subscribe(self, event_type: str, handler: EventHandler) -> None:
        async with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
        logger.debug("Subscribed to %s: %s", event_type, handler)

    async def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """Remove a handler. Returns False if it was not subscribed."""
        async with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler not in handlers:
                return False
            handlers.remove(handler)
        logger.debug("Unsubscribed from %s: %s", event_type, handler)
        return True

    async def publish(self, event: Event) -> int:
        """
        Deliver an event to the handlers subscribed to its type.

        Every subscriber sees a page's Loading event before the Loaded or
        Errored event that follows it.

        Returns:
            Number of handlers that accepted the event without raising.
        """
        async with self._lock:
            handlers = list(self._handlers.get(event.event_type, ()))

        delivered = 0
        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.exception("Error in event handler for %s: %s", event.event_type, e)
            else:
                delivered += 1

        return delivered


# Global event bus instance
event_bus = EventBus()
