"""
View composition for the detail page.

Maps (LoadState, RouteContext) to exactly one render decision:

    root path (not errored)   -> Redirect to the details tab
    Errored                   -> error screen only
    Loading                   -> loading indicator only
    Loaded + known sub-route  -> tab chrome + sub-view with its props
    Loaded + unknown path     -> tab chrome + not-found fallback

Tab chrome is never shown while loading or when the path ends in "edit".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union, assert_never

from smartinv.core.i18n import Translator
from smartinv.core.models import Link, SmartInventory, Tab
from smartinv.core.routing import RouteContext, RoutePaths, RouteTag
from smartinv.core.state import Errored, LoadState, Loaded, Loading
from smartinv.core.tabs import build_tabs
from smartinv.view.errors import ErrorPresentation, present_error, present_unmatched_route

# Access list sub-view resolves roles through this API model
ACCESS_API_MODEL = "inventories"

# Job list filter fields that tie a job to an inventory
JOB_FILTER_FIELDS: tuple[str, ...] = (
    "or__job__inventory",
    "or__adhoccommand__inventory",
    "or__inventoryupdate__inventory_source__inventory",
    "or__workflowjob__inventory",
)


@dataclass(frozen=True, slots=True)
class Chrome:
    """Tab header plus its close action."""

    tabs: tuple[Tab, ...]
    close_link: Link

    def to_dict(self) -> dict[str, Any]:
        return {
            "tabs": [tab.to_dict() for tab in self.tabs],
            "close": self.close_link.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class LoadingIndicator:
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "loading", "label": self.label}


@dataclass(frozen=True, slots=True)
class SubView:
    """A sub-view and the props it must be given."""

    route: RouteTag
    props: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "subview",
            "view": self.route.value,
            "props": {key: _jsonable(value) for key, value in self.props.items()},
        }


@dataclass(frozen=True, slots=True)
class ErrorScreen:
    """A terminal error: failed load (`not_found_route=False`) or unknown path."""

    presentation: ErrorPresentation
    not_found_route: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "not_found" if self.not_found_route else "error",
            **self.presentation.to_dict(),
        }


Content = Union[LoadingIndicator, SubView, ErrorScreen]


@dataclass(frozen=True, slots=True)
class Redirect:
    location: str

    def to_dict(self) -> dict[str, Any]:
        return {"redirect": self.location}


@dataclass(frozen=True, slots=True)
class Render:
    """Render the page body: optional chrome and exactly one content block."""

    state: str
    content: Content
    chrome: Chrome | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "chrome": self.chrome.to_dict() if self.chrome is not None else None,
            "content": self.content.to_dict(),
        }


RenderDecision = Union[Redirect, Render]


def job_filter(inventory_id: int) -> dict[str, int]:
    """Default job list params matching every job type run against the inventory."""
    return {name: inventory_id for name in JOB_FILTER_FIELDS}


class ViewComposer:
    """Decides what the detail page shows for a given state and route."""

    def __init__(self, paths: RoutePaths | None = None) -> None:
        self.paths = paths or RoutePaths()

    def compose(self, state: LoadState, route: RouteContext, translate: Translator) -> RenderDecision:
        """
        Compose the render decision.

        Args:
            state: Current load state of the page.
            route: Resolved route of the current location.
            translate: Locale-bound translate function.
        """
        if route.tag is RouteTag.ROOT and route.resource_id and not isinstance(state, Errored):
            return Redirect(location=self.paths.details_path(route.resource_id))

        if isinstance(state, Errored):
            presentation = present_error(state.error, translate, self.paths)
            return Render(state=state.tag, content=ErrorScreen(presentation))

        if isinstance(state, Loading):
            return Render(state=state.tag, content=LoadingIndicator(translate("Loading...")))

        resource = state.resource
        chrome = None
        if not route.path.endswith("edit"):
            chrome = self.chrome(route.resource_id or resource.id, translate)

        return Render(
            state=state.tag,
            chrome=chrome,
            content=self._content_for(route, resource, translate),
        )

    def chrome(self, resource_id: str | int, translate: Translator) -> Chrome:
        """Build the tab header for a resource."""
        return Chrome(
            tabs=build_tabs(resource_id, translate, self.paths),
            close_link=Link(label=translate("Close"), href=self.paths.listing_path),
        )

    def _content_for(self, route: RouteContext, resource: SmartInventory, translate: Translator) -> Content:
        tag = route.tag

        if tag is RouteTag.DETAILS:
            # The detail view takes a loading flag; sub-views only render once Loaded
            return SubView(tag, {"inventory": resource, "has_inventory_loading": False})
        elif tag is RouteTag.EDIT:
            return SubView(tag, {"inventory": resource})
        elif tag is RouteTag.ACCESS:
            return SubView(tag, {"resource": resource, "api_model": ACCESS_API_MODEL})
        elif tag is RouteTag.HOSTS:
            return SubView(tag, {"inventory": resource, "subpath": route.subpath})
        elif tag is RouteTag.COMPLETED_JOBS:
            return SubView(tag, {"default_params": job_filter(resource.id)})
        elif tag is RouteTag.UNMATCHED:
            presentation = present_unmatched_route(route.resource_id, translate, self.paths)
            return ErrorScreen(presentation, not_found_route=True)
        elif tag is RouteTag.ROOT:
            # The bare root always redirects unless errored, see compose()
            raise ValueError(f"Cannot compose content for bare root {route.path}")
        else:
            assert_never(tag)


def _jsonable(value: Any) -> Any:
    if isinstance(value, SmartInventory):
        return value.to_dict()
    return value
