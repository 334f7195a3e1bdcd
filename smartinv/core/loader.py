"""
Resource loader for the detail page.

Owns the single LoadState slot of a page. A load:

1. bumps the generation counter and publishes Loading
2. awaits the fetch (the only suspension point)
3. on success notifies the breadcrumb collaborator and publishes Loaded
4. on failure publishes Errored with the classified error

Latest-wins: a response whose generation is no longer current is dropped, so
a slow earlier fetch can never overwrite the result of a later one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from smartinv.core.events import EventBus, LoadStateEvent
from smartinv.core.models import SmartInventory
from smartinv.core.state import Errored, LoadState, Loaded, Loading, classify_error

logger = logging.getLogger(__name__)

FetchDetail = Callable[[str], Awaitable[SmartInventory]]
BreadcrumbNotifier = Callable[[SmartInventory], Awaitable[None]]


class ResourceLoader:
    """
    Fetches one smart inventory and tracks the resulting LoadState.

    Usage:
        loader = ResourceLoader(client.read_detail, notify_breadcrumb=on_loaded)
        await loader.load("42")
        if isinstance(loader.state, Loaded):
            ...

    Fetch failures never escape `load()`; they become `Errored` states.
    """

    def __init__(
        self,
        fetch_detail: FetchDetail,
        notify_breadcrumb: BreadcrumbNotifier | None = None,
        *,
        event_bus: EventBus | None = None,
        page_id: str = "",
    ) -> None:
        """
        Initialize the loader.

        Args:
            fetch_detail: Async capability returning the inventory for an id.
            notify_breadcrumb: Called with the inventory after each successful load.
            event_bus: Optional bus receiving a LoadStateEvent per transition.
            page_id: Identifies the owning page in published events.
        """
        self._fetch_detail = fetch_detail
        self._notify_breadcrumb = notify_breadcrumb
        self._event_bus = event_bus
        self._page_id = page_id

        self._state: LoadState = Loading()
        self._generation = 0

    @property
    def state(self) -> LoadState:
        """The current load state."""
        return self._state

    @property
    def generation(self) -> int:
        """Generation of the most recently issued load (0 before the first)."""
        return self._generation

    async def load(self, resource_id: str) -> None:
        """
        Fetch the inventory and publish the outcome.

        Cancellation propagates to the caller; every other failure is
        classified and published as Errored.
        """
        generation = self._begin(resource_id)
        await self._run(resource_id, generation)

    def start(self, resource_id: str) -> asyncio.Task[None]:
        """
        Start a load in the background.

        The state is already Loading when this returns, so a render issued
        before the task first runs never shows the previous outcome.
        """
        generation = self._begin(resource_id)
        return asyncio.create_task(
            self._run(resource_id, generation),
            name=f"load-inventory-{resource_id}-{generation}",
        )

    def _begin(self, resource_id: str) -> int:
        self._generation += 1
        self._state = Loading()
        logger.debug("Loading inventory %s (generation %d)", resource_id, self._generation)
        return self._generation

    async def _run(self, resource_id: str, generation: int) -> None:
        if self._is_stale(generation):
            # Superseded before it got to run
            return

        await self._set_state(Loading(), resource_id, generation)

        try:
            resource = await self._fetch_detail(resource_id)
        except asyncio.CancelledError:
            logger.debug("Load of inventory %s cancelled (generation %d)", resource_id, generation)
            raise
        except Exception as e:
            if self._is_stale(generation):
                logger.info(
                    "Ignoring stale failure for inventory %s (gen=%d, current gen=%d)",
                    resource_id,
                    generation,
                    self._generation,
                )
                return
            error = classify_error(e)
            logger.warning(
                "Failed to load inventory %s: %s (%s)",
                resource_id,
                error.message,
                error.kind.value,
            )
            await self._set_state(Errored(error), resource_id, generation)
            return

        if self._is_stale(generation):
            logger.info(
                "Ignoring stale response for inventory %s (gen=%d, current gen=%d)",
                resource_id,
                generation,
                self._generation,
            )
            return

        if self._notify_breadcrumb is not None:
            try:
                await self._notify_breadcrumb(resource)
            except Exception as e:
                logger.exception("Breadcrumb update failed for inventory %s: %s", resource_id, e)

        logger.info("Loaded inventory %s (%s)", resource.id, resource.name)
        await self._set_state(Loaded(resource), resource_id, generation)

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def _set_state(self, state: LoadState, resource_id: str, generation: int) -> None:
        if self._is_stale(generation):
            return

        self._state = state

        if self._event_bus is None:
            return

        await self._event_bus.publish(
            LoadStateEvent(
                page_id=self._page_id,
                inventory_id=str(resource_id),
                state=state.tag,
                generation=generation,
                error_kind=state.error.kind.value if isinstance(state, Errored) else None,
            )
        )
