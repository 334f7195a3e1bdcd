"""
Route resolution for the detail page.

Every navigation is resolved exactly once into a RouteContext carrying an
enumerated RouteTag. The rest of the core switches on the tag instead of
re-testing path prefixes.

Paths look like:

    /inventories/smart_inventory/42                 -> ROOT
    /inventories/smart_inventory/42/details         -> DETAILS
    /inventories/smart_inventory/42/hosts/7/facts   -> HOSTS (subpath "7/facts")
    /inventories/smart_inventory/42/bogus           -> UNMATCHED
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_RESOURCE_ROOT = "/inventories/smart_inventory"
DEFAULT_LISTING_PATH = "/inventories"


class RouteTag(Enum):
    """The sub-route a path resolves to."""

    ROOT = ""
    DETAILS = "details"
    EDIT = "edit"
    ACCESS = "access"
    HOSTS = "hosts"
    COMPLETED_JOBS = "completed_jobs"
    UNMATCHED = "*"


# Suffixes that map to a sub-view, in declaration order
SUBVIEW_TAGS: tuple[RouteTag, ...] = (
    RouteTag.DETAILS,
    RouteTag.EDIT,
    RouteTag.ACCESS,
    RouteTag.HOSTS,
    RouteTag.COMPLETED_JOBS,
)

_TAGS_BY_SUFFIX = {tag.value: tag for tag in SUBVIEW_TAGS}


class PathTransition(Enum):
    """How a navigation relates to the previous location (drives reloads)."""

    MOUNT = "mount"
    RETURN_TO_DETAILS = "return_to_details"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class RoutePaths:
    """Where the page lives in the URL space."""

    resource_root: str = DEFAULT_RESOURCE_ROOT
    listing_path: str = DEFAULT_LISTING_PATH

    def __post_init__(self) -> None:
        object.__setattr__(self, "resource_root", _strip_slash(self.resource_root))
        object.__setattr__(self, "listing_path", _strip_slash(self.listing_path) or "/")

    def root_for(self, resource_id: str | int) -> str:
        """Return the bare resource root, e.g. `/inventories/smart_inventory/42`."""
        return f"{self.resource_root}/{resource_id}"

    def tab_path(self, resource_id: str | int, tag: RouteTag) -> str:
        """Return the path of a sub-route, e.g. `.../42/details`."""
        return f"{self.root_for(resource_id)}/{tag.value}"

    def details_path(self, resource_id: str | int) -> str:
        return self.tab_path(resource_id, RouteTag.DETAILS)


@dataclass(frozen=True, slots=True)
class RouteContext:
    """A resolved location. Read-only to the core."""

    path: str
    resource_id: str | None
    tag: RouteTag
    subpath: str = ""


def resolve_route(path: str, paths: RoutePaths) -> RouteContext:
    """
    Resolve a path into a RouteContext.

    The first segment after `<resource_root>/<id>/` selects the tag; deeper
    segments are kept as `subpath` so sub-views can route further. Paths not
    under the resource root resolve to UNMATCHED with no identifier.
    """
    normalized = _strip_slash(path) or "/"
    prefix = paths.resource_root + "/"

    if not normalized.startswith(prefix):
        return RouteContext(path=normalized, resource_id=None, tag=RouteTag.UNMATCHED)

    segments = normalized[len(prefix):].split("/")
    resource_id = segments[0] or None
    if resource_id is None:
        return RouteContext(path=normalized, resource_id=None, tag=RouteTag.UNMATCHED)

    if len(segments) == 1:
        return RouteContext(path=normalized, resource_id=resource_id, tag=RouteTag.ROOT)

    tag = _TAGS_BY_SUFFIX.get(segments[1], RouteTag.UNMATCHED)
    subpath = "/".join(segments[2:]) if tag is not RouteTag.UNMATCHED else ""
    return RouteContext(path=normalized, resource_id=resource_id, tag=tag, subpath=subpath)


def classify_transition(
    previous_path: str | None,
    new_path: str,
    resource_id: str | int,
    paths: RoutePaths,
    *,
    location_changed: bool = True,
) -> PathTransition:
    """
    Classify a navigation for the reload effect.

    - No previous path: the page was just mounted.
    - Previous path nested under `<root>/`, location changed, and the new path
      is exactly `<root>/details`: the user came back to the details tab.
    - Anything else: plain tab switch, no reload.
    """
    if previous_path is None:
        return PathTransition.MOUNT

    root = paths.root_for(resource_id) + "/"
    if (
        previous_path.startswith(root)
        and location_changed
        and _strip_slash(new_path) == paths.details_path(resource_id)
    ):
        return PathTransition.RETURN_TO_DETAILS

    return PathTransition.OTHER


def _strip_slash(path: str) -> str:
    return path.rstrip("/")
