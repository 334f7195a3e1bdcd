"""
Tests for smartinv.view.composer, smartinv.view.errors and smartinv.core.tabs.

These tests verify the render decision for every (state, route) pair:
- redirect of the bare root
- error screen only while errored
- loading indicator only while loading
- tab chrome and sub-view props once loaded
"""

from __future__ import annotations

import pytest

from smartinv.core.i18n import MessageCatalog
from smartinv.core.models import SmartInventory
from smartinv.core.routing import RoutePaths, RouteTag, resolve_route
from smartinv.core.state import ErrorInfo, ErrorKind, Errored, Loaded, Loading
from smartinv.core.tabs import build_tabs
from smartinv.view.composer import (
    ErrorScreen,
    LoadingIndicator,
    Redirect,
    Render,
    SubView,
    ViewComposer,
    job_filter,
)
from smartinv.view.errors import present_error, present_unmatched_route

ROOT = "/inventories/smart_inventory/42"
INVENTORY = SmartInventory(id=42, name="Web servers", host_filter="name__icontains=web")
LOADED = Loaded(INVENTORY)
NOT_FOUND = Errored(ErrorInfo(ErrorKind.NOT_FOUND, "HTTP 404", 404))
FAILED = Errored(ErrorInfo(ErrorKind.OTHER, "connection refused"))


def identity(message: str) -> str:
    return message


@pytest.fixture
def composer() -> ViewComposer:
    return ViewComposer(RoutePaths())


def compose(composer: ViewComposer, state, path: str) -> Render | Redirect:
    return composer.compose(state, resolve_route(path, composer.paths), identity)


# =============================================================================
# Tabs
# =============================================================================


class TestTabs:
    """Tests for build_tabs()."""

    def test_four_tabs_in_order(self) -> None:
        tabs = build_tabs("42", identity, RoutePaths())
        assert [(t.label, t.path, t.order) for t in tabs] == [
            ("Details", f"{ROOT}/details", 0),
            ("Access", f"{ROOT}/access", 1),
            ("Hosts", f"{ROOT}/hosts", 2),
            ("Completed Jobs", f"{ROOT}/completed_jobs", 3),
        ]

    def test_labels_are_translated(self) -> None:
        catalog = MessageCatalog({"es": {"Details": "Detalles", "Hosts": "Servidores"}})
        tabs = build_tabs("42", catalog.translator("es"), RoutePaths())
        assert [t.label for t in tabs] == ["Detalles", "Access", "Servidores", "Completed Jobs"]

    def test_tab_serialization(self) -> None:
        tab = build_tabs("42", identity, RoutePaths())[3]
        assert tab.to_dict() == {"name": "Completed Jobs", "link": f"{ROOT}/completed_jobs", "id": 3}


# =============================================================================
# Error presentation
# =============================================================================


class TestErrorPresenter:
    """Tests for present_error() and present_unmatched_route()."""

    def test_not_found_links_to_listing(self) -> None:
        presentation = present_error(NOT_FOUND.error, identity, RoutePaths())
        assert presentation.title == "Not Found"
        assert presentation.notice == "Inventory not found."
        assert presentation.link is not None
        assert presentation.link.href == "/inventories"
        assert presentation.link.label == "View all Inventories."

    def test_other_failure_has_no_link(self) -> None:
        presentation = present_error(FAILED.error, identity, RoutePaths())
        assert presentation.title == "Something went wrong..."
        assert presentation.detail == "connection refused"
        assert presentation.notice is None
        assert presentation.link is None
        assert "link" not in presentation.to_dict()

    def test_unmatched_route_links_to_details(self) -> None:
        presentation = present_unmatched_route("42", identity, RoutePaths())
        assert presentation.link is not None
        assert presentation.link.href == f"{ROOT}/details"
        assert presentation.link.label == "View Inventory Details"

    def test_unmatched_route_without_id_has_no_link(self) -> None:
        assert present_unmatched_route(None, identity, RoutePaths()).link is None


# =============================================================================
# Composition
# =============================================================================


class TestRootRedirect:
    """The bare resource root redirects to the details tab."""

    @pytest.mark.parametrize("state", [Loading(), LOADED])
    def test_root_redirects(self, composer: ViewComposer, state) -> None:
        decision = compose(composer, state, ROOT)
        assert decision == Redirect(location=f"{ROOT}/details")

    def test_errored_root_shows_error(self, composer: ViewComposer) -> None:
        """A failed load wins over the redirect."""
        decision = compose(composer, NOT_FOUND, ROOT)
        assert isinstance(decision, Render)
        assert isinstance(decision.content, ErrorScreen)


class TestErroredState:
    """While errored only the error screen renders."""

    @pytest.mark.parametrize("suffix", ["details", "edit", "access", "hosts", "completed_jobs", "bogus"])
    def test_error_screen_for_every_path(self, composer: ViewComposer, suffix: str) -> None:
        decision = compose(composer, FAILED, f"{ROOT}/{suffix}")
        assert isinstance(decision, Render)
        assert decision.chrome is None
        assert isinstance(decision.content, ErrorScreen)
        assert decision.content.not_found_route is False
        assert decision.state == "errored"

    def test_not_found_error_renders_listing_link(self, composer: ViewComposer) -> None:
        decision = compose(composer, NOT_FOUND, f"{ROOT}/details")
        body = decision.to_dict()
        assert body["content"]["kind"] == "error"
        assert body["content"]["link"] == {"label": "View all Inventories.", "href": "/inventories"}

    def test_other_error_renders_no_link(self, composer: ViewComposer) -> None:
        body = compose(composer, FAILED, f"{ROOT}/details").to_dict()
        assert "link" not in body["content"]


class TestLoadingState:
    """While loading only the loading indicator renders."""

    @pytest.mark.parametrize("suffix", ["details", "edit", "access", "hosts", "completed_jobs", "bogus"])
    def test_loading_indicator_only(self, composer: ViewComposer, suffix: str) -> None:
        decision = compose(composer, Loading(), f"{ROOT}/{suffix}")
        assert isinstance(decision, Render)
        assert decision.chrome is None
        assert isinstance(decision.content, LoadingIndicator)


class TestLoadedState:
    """Once loaded the matched sub-view renders with its props."""

    def test_details(self, composer: ViewComposer) -> None:
        decision = compose(composer, LOADED, f"{ROOT}/details")
        assert decision.chrome is not None
        assert decision.content == SubView(
            RouteTag.DETAILS, {"inventory": INVENTORY, "has_inventory_loading": False}
        )

    def test_edit_hides_chrome(self, composer: ViewComposer) -> None:
        decision = compose(composer, LOADED, f"{ROOT}/edit")
        assert decision.chrome is None
        assert decision.content == SubView(RouteTag.EDIT, {"inventory": INVENTORY})

    def test_access(self, composer: ViewComposer) -> None:
        decision = compose(composer, LOADED, f"{ROOT}/access")
        assert decision.content == SubView(
            RouteTag.ACCESS, {"resource": INVENTORY, "api_model": "inventories"}
        )

    def test_hosts_passes_subpath(self, composer: ViewComposer) -> None:
        decision = compose(composer, LOADED, f"{ROOT}/hosts/7")
        assert decision.content == SubView(RouteTag.HOSTS, {"inventory": INVENTORY, "subpath": "7"})

    def test_completed_jobs_filter(self, composer: ViewComposer) -> None:
        decision = compose(composer, LOADED, f"{ROOT}/completed_jobs")
        assert decision.content == SubView(
            RouteTag.COMPLETED_JOBS,
            {
                "default_params": {
                    "or__job__inventory": 42,
                    "or__adhoccommand__inventory": 42,
                    "or__inventoryupdate__inventory_source__inventory": 42,
                    "or__workflowjob__inventory": 42,
                }
            },
        )
        assert job_filter(42) == decision.content.props["default_params"]

    def test_unknown_suffix_renders_fallback(self, composer: ViewComposer) -> None:
        decision = compose(composer, LOADED, f"{ROOT}/bogus")
        assert decision.chrome is not None
        assert isinstance(decision.content, ErrorScreen)
        assert decision.content.not_found_route is True
        assert decision.content.presentation.link is not None
        assert decision.content.presentation.link.href == f"{ROOT}/details"

    def test_chrome_has_tabs_and_close(self, composer: ViewComposer) -> None:
        decision = compose(composer, LOADED, f"{ROOT}/hosts")
        chrome = decision.to_dict()["chrome"]
        assert [tab["name"] for tab in chrome["tabs"]] == ["Details", "Access", "Hosts", "Completed Jobs"]
        assert chrome["close"] == {"label": "Close", "href": "/inventories"}

    def test_serialized_subview_props(self, composer: ViewComposer) -> None:
        body = compose(composer, LOADED, f"{ROOT}/details").to_dict()
        assert body["state"] == "loaded"
        assert body["content"]["view"] == "details"
        assert body["content"]["props"]["inventory"]["name"] == "Web servers"
        assert body["content"]["props"]["inventory"]["host_filter"] == "name__icontains=web"
