"""
Tests for smartinv.view.page and smartinv.view.registry.

These tests drive a page through navigations and check when the inventory
is fetched and what the page renders:
- mounting fetches exactly once before any sub-view renders
- only a return to the details tab from under the resource root refetches
- the bare root redirects without an extra fetch
- superseded loads are cancelled, and a new identifier remounts the page
"""

from __future__ import annotations

import asyncio
import time
from unittest.mock import AsyncMock

import pytest

from smartinv.core import CoreError, NotFoundError
from smartinv.core.events import BreadcrumbEvent, Event, EventBus
from smartinv.core.routing import PathTransition, RouteTag
from smartinv.core.state import ErrorKind, Errored, Loaded, Loading
from smartinv.view.composer import ErrorScreen, LoadingIndicator, Redirect, Render, SubView
from smartinv.view.page import PageMismatchError, SmartInventoryPage
from smartinv.view.registry import PageRegistry

from fakes import FakeInventories

ROOT = "/inventories/smart_inventory/42"


def identity(message: str) -> str:
    return message


@pytest.fixture
def page(inventories: FakeInventories) -> SmartInventoryPage:
    return SmartInventoryPage("session-1", "42", inventories.read_detail)


# =============================================================================
# Mount and load
# =============================================================================


class TestMount:
    """Mounting a page issues exactly one fetch."""

    async def test_mount_fetches_before_rendering_subview(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        gate = inventories.hold()

        assert page.navigate(f"{ROOT}/details") is PathTransition.MOUNT
        decision = page.render(identity)
        assert isinstance(decision, Render)
        assert isinstance(decision.content, LoadingIndicator)
        assert decision.chrome is None
        assert page.loading is True

        gate.set()
        await page.wait_settled()

        assert inventories.calls == ["42"]
        decision = page.render(identity)
        assert isinstance(decision.content, SubView)
        assert decision.content.route is RouteTag.DETAILS

    async def test_success_notifies_breadcrumb(self, inventories: FakeInventories) -> None:
        notify = AsyncMock()
        page = SmartInventoryPage("s", "42", inventories.read_detail, notify_breadcrumb=notify)

        page.navigate(f"{ROOT}/details")
        state = await page.wait_settled()

        assert state == Loaded(inventories.inventories["42"])
        notify.assert_awaited_once_with(inventories.inventories["42"])
        assert page.loading is False

    async def test_breadcrumb_event_on_bus(self, inventories: FakeInventories) -> None:
        """Without an explicit notifier the page announces the name on the bus."""
        bus = EventBus()
        seen: list[Event] = []

        async def record(event: Event) -> None:
            seen.append(event)

        await bus.subscribe("inventory.breadcrumb", record)
        page = SmartInventoryPage("s", "42", inventories.read_detail, event_bus=bus)

        page.navigate(f"{ROOT}/details")
        await page.wait_settled()

        assert len(seen) == 1
        assert isinstance(seen[0], BreadcrumbEvent)
        assert seen[0].name == "Web servers"
        assert seen[0].path == ROOT

    async def test_not_found_renders_listing_link(self, inventories: FakeInventories) -> None:
        page = SmartInventoryPage("s", "7", inventories.read_detail)

        page.navigate("/inventories/smart_inventory/7/details")
        state = await page.wait_settled()

        assert isinstance(state, Errored)
        assert state.error.kind is ErrorKind.NOT_FOUND
        decision = page.render(identity)
        assert isinstance(decision.content, ErrorScreen)
        assert decision.content.presentation.link is not None
        assert decision.content.presentation.link.href == "/inventories"

    async def test_other_error_renders_no_link(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        inventories.fail(42, RuntimeError("connection reset"))

        page.navigate(f"{ROOT}/hosts")
        state = await page.wait_settled()

        assert isinstance(state, Errored)
        assert state.error.kind is ErrorKind.OTHER
        decision = page.render(identity)
        assert decision.chrome is None
        assert decision.content.presentation.link is None

    def test_render_before_mount_raises(self, page: SmartInventoryPage) -> None:
        with pytest.raises(CoreError):
            page.render(identity)


# =============================================================================
# Navigation
# =============================================================================


class TestNavigation:
    """Only qualifying transitions refetch."""

    async def test_access_to_details_refetches_once(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        page.navigate(f"{ROOT}/access")
        await page.wait_settled()

        assert page.navigate(f"{ROOT}/details") is PathTransition.RETURN_TO_DETAILS
        assert isinstance(page.state, Loading)
        await page.wait_settled()

        assert inventories.calls == ["42", "42"]
        assert isinstance(page.state, Loaded)

    async def test_details_to_hosts_does_not_refetch(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        page.navigate(f"{ROOT}/details")
        await page.wait_settled()

        assert page.navigate(f"{ROOT}/hosts") is PathTransition.OTHER
        await page.wait_settled()

        assert inventories.calls == ["42"]
        assert page.render(identity).content.route is RouteTag.HOSTS

    async def test_root_redirect_without_extra_fetch(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        page.navigate(ROOT)
        assert page.render(identity) == Redirect(location=f"{ROOT}/details")

        page.navigate(f"{ROOT}/details")
        await page.wait_settled()

        assert inventories.calls == ["42"]
        assert isinstance(page.render(identity).content, SubView)

    async def test_edit_suppresses_chrome(self, page: SmartInventoryPage) -> None:
        page.navigate(f"{ROOT}/edit")
        await page.wait_settled()

        decision = page.render(identity)
        assert decision.chrome is None
        assert decision.content == SubView(RouteTag.EDIT, {"inventory": page.state.resource})

    async def test_unknown_suffix_renders_fallback(self, page: SmartInventoryPage) -> None:
        page.navigate(f"{ROOT}/nonsense")
        await page.wait_settled()

        decision = page.render(identity)
        assert isinstance(decision.content, ErrorScreen)
        assert decision.content.not_found_route is True
        assert decision.content.presentation.link.href == f"{ROOT}/details"

    async def test_same_location_redelivered_does_not_refetch(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        page.navigate(f"{ROOT}/access")
        await page.wait_settled()

        page.navigate(f"{ROOT}/details", location_changed=False)
        await page.wait_settled()

        assert inventories.calls == ["42"]

    async def test_edit_then_details_shows_fresh_inventory(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        """Saving in the edit view and returning to details shows the new name."""
        page.navigate(f"{ROOT}/edit")
        await page.wait_settled()

        inventories.add(42, "Renamed")
        page.navigate(f"{ROOT}/details")
        await page.wait_settled()

        assert page.state.resource.name == "Renamed"

    def test_other_identifier_is_rejected(self, page: SmartInventoryPage) -> None:
        with pytest.raises(PageMismatchError):
            page.navigate("/inventories/smart_inventory/43/details")


class TestSupersededLoads:
    """A newer qualifying navigation replaces the in-flight load."""

    async def test_rapid_return_to_details_keeps_latest(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        page.navigate(f"{ROOT}/access")
        await page.wait_settled()

        inventories.add(42, "stale")
        slow = inventories.hold()
        page.navigate(f"{ROOT}/details")
        await asyncio.sleep(0)

        page.navigate(f"{ROOT}/access")
        fresh = inventories.add(42, "fresh")
        page.navigate(f"{ROOT}/details")
        await page.wait_settled()
        slow.set()
        await asyncio.sleep(0)

        assert page.state == Loaded(fresh)

    async def test_unmount_cancels_in_flight_load(
        self, page: SmartInventoryPage, inventories: FakeInventories
    ) -> None:
        inventories.hold()
        page.navigate(f"{ROOT}/details")
        await asyncio.sleep(0)

        await page.unmount()

        assert page.loading is False
        assert page.mounted is False
        with pytest.raises(CoreError):
            page.navigate(f"{ROOT}/details")


# =============================================================================
# Registry
# =============================================================================


class TestPageRegistry:
    """Tests for PageRegistry."""

    @pytest.fixture
    def registry(self, inventories: FakeInventories) -> PageRegistry:
        return PageRegistry(inventories.read_detail)

    async def test_first_navigation_mounts(
        self, registry: PageRegistry, inventories: FakeInventories
    ) -> None:
        page = await registry.navigate("s1", f"{ROOT}/details")
        await page.wait_settled()

        assert "s1" in registry
        assert len(registry) == 1
        assert await registry.get("s1") is page
        assert inventories.calls == ["42"]

    async def test_same_identifier_reuses_page(
        self, registry: PageRegistry, inventories: FakeInventories
    ) -> None:
        page = await registry.navigate("s1", f"{ROOT}/details")
        again = await registry.navigate("s1", f"{ROOT}/hosts")
        await again.wait_settled()

        assert again is page
        assert inventories.calls == ["42"]

    async def test_new_identifier_remounts(
        self, registry: PageRegistry, inventories: FakeInventories
    ) -> None:
        inventories.add(43, "Databases")
        first = await registry.navigate("s1", f"{ROOT}/hosts")
        await first.wait_settled()

        second = await registry.navigate("s1", "/inventories/smart_inventory/43/hosts")
        await second.wait_settled()

        assert second is not first
        assert first.mounted is False
        assert second.state.resource.name == "Databases"
        assert inventories.calls == ["42", "43"]

    async def test_sessions_are_independent(self, registry: PageRegistry) -> None:
        a = await registry.navigate("a", f"{ROOT}/details")
        b = await registry.navigate("b", f"{ROOT}/details")
        await a.wait_settled()
        await b.wait_settled()

        assert a is not b
        assert sorted(registry) == ["a", "b"]

    async def test_path_without_identifier_is_rejected(self, registry: PageRegistry) -> None:
        with pytest.raises(NotFoundError):
            await registry.navigate("s1", "/somewhere/else")

    async def test_close_and_close_all(self, registry: PageRegistry) -> None:
        await registry.navigate("a", f"{ROOT}/details")
        await registry.navigate("b", f"{ROOT}/details")

        closed = await registry.close("a")
        assert closed is not None and closed.mounted is False
        assert await registry.close("a") is None

        await registry.close_all()
        assert len(registry) == 0
        assert bool(registry) is True

    async def test_prune_expired_unmounts_idle_pages(self, registry: PageRegistry) -> None:
        idle = await registry.navigate("idle", f"{ROOT}/details")
        active = await registry.navigate("active", f"{ROOT}/details")
        await idle.wait_settled()
        await active.wait_settled()
        idle.last_seen = time.time() - 3600

        pruned = await registry.prune_expired(1800)

        assert pruned == ["idle"]
        assert "idle" not in registry
        assert "active" in registry
        assert idle.mounted is False
        assert await registry.prune_expired(1800) == []

    async def test_navigation_keeps_page_alive(self, registry: PageRegistry) -> None:
        page = await registry.navigate("s1", f"{ROOT}/details")
        page.last_seen = time.time() - 3600

        await registry.navigate("s1", f"{ROOT}/hosts")
        await page.wait_settled()

        assert page.is_expired(1800) is False
        assert await registry.prune_expired(1800) == []
