"""
Error presentation for the detail page.

Two terminal screens share one shape:
- a failed load (generic failure, plus a way back to the listing on 404)
- an unknown sub-route (not found, plus a way to the details tab)

Nothing here retries or touches state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from smartinv.core.i18n import Translator
from smartinv.core.models import Link
from smartinv.core.routing import RoutePaths
from smartinv.core.state import ErrorInfo

NOT_FOUND_TITLE = "Not Found"
NOT_FOUND_MESSAGE = "The page you requested could not be found."
FAILURE_TITLE = "Something went wrong..."
FAILURE_MESSAGE = "There was an error loading this content. Please reload the page."


@dataclass(frozen=True, slots=True)
class ErrorPresentation:
    """What an error screen shows."""

    title: str
    message: str
    detail: str | None = None
    notice: str | None = None
    link: Link | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"title": self.title, "message": self.message}
        if self.detail:
            result["detail"] = self.detail
        if self.notice:
            result["notice"] = self.notice
        if self.link is not None:
            result["link"] = self.link.to_dict()
        return result


def present_error(error: ErrorInfo, translate: Translator, paths: RoutePaths) -> ErrorPresentation:
    """
    Present a failed load.

    NOT_FOUND errors add "Inventory not found." and a link to the listing
    page; every other failure gets the generic message only.
    """
    if not error.is_not_found:
        return ErrorPresentation(
            title=translate(FAILURE_TITLE),
            message=translate(FAILURE_MESSAGE),
            detail=error.message or None,
        )

    return ErrorPresentation(
        title=translate(NOT_FOUND_TITLE),
        message=translate(NOT_FOUND_MESSAGE),
        detail=error.message or None,
        notice=translate("Inventory not found."),
        link=Link(label=translate("View all Inventories."), href=paths.listing_path),
    )


def present_unmatched_route(
    resource_id: str | None,
    translate: Translator,
    paths: RoutePaths,
) -> ErrorPresentation:
    """Present an unknown sub-route, linking to the details tab when the id is known."""
    link = None
    if resource_id:
        link = Link(label=translate("View Inventory Details"), href=paths.details_path(resource_id))

    return ErrorPresentation(
        title=translate(NOT_FOUND_TITLE),
        message=translate(NOT_FOUND_MESSAGE),
        link=link,
    )
