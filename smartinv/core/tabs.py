"""
Tab registry for the detail page.

The tab set is static: it depends only on the resource identifier and the
locale, never on the loaded resource's content. Order is significant and
drives left-to-right display.
"""

from __future__ import annotations

from smartinv.core.i18n import Translator
from smartinv.core.models import Tab
from smartinv.core.routing import RoutePaths, RouteTag

# (source label, route tag) in display order
TAB_SPECS: tuple[tuple[str, RouteTag], ...] = (
    ("Details", RouteTag.DETAILS),
    ("Access", RouteTag.ACCESS),
    ("Hosts", RouteTag.HOSTS),
    ("Completed Jobs", RouteTag.COMPLETED_JOBS),
)


def build_tabs(resource_id: str | int, translate: Translator, paths: RoutePaths) -> tuple[Tab, ...]:
    """
    Build the ordered tab sequence for a resource.

    Args:
        resource_id: Identifier from the route.
        translate: Locale-bound translate function.
        paths: URL layout of the page.

    Returns:
        Tabs ordered Details, Access, Hosts, Completed Jobs.
    """
    return tuple(
        Tab(label=translate(label), path=paths.tab_path(resource_id, tag), order=order)
        for order, (label, tag) in enumerate(TAB_SPECS)
    )
