"""
Detail Page Routes for smartinv.

Every GET under the resource root is a navigation of the caller's page:
- <resource_root>/{id}              bare root, redirects to the details tab
- <resource_root>/{id}/{rest:path}  a tab (or an unknown path)

Session and page management:
- /api/pages/current (GET)     current render without navigating
- /api/pages/current (DELETE)  unmount the session's page
- /api/status                  server status
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from smartinv.core import NotFoundError
from smartinv.core.i18n import MessageCatalog, Translator, negotiate_locale
from smartinv.view.composer import Redirect

if TYPE_CHECKING:
    from fastapi import FastAPI

    from smartinv.view.page import SmartInventoryPage
    from smartinv.view.registry import PageRegistry
    from smartinv.web.breadcrumb import BreadcrumbTrail

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

# References set during route registration
_registry: PageRegistry | None = None
_trail: BreadcrumbTrail | None = None
_catalog: MessageCatalog | None = None
_session_cookie = "smartinv_session"
_default_locale = "en"


def register_page_routes(
    app: FastAPI,
    registry: PageRegistry,
    trail: BreadcrumbTrail,
    catalog: MessageCatalog,
    *,
    session_cookie: str = "smartinv_session",
    default_locale: str = "en",
) -> None:
    """
    Register page routes with the FastAPI app.

    Args:
        app: FastAPI application instance
        registry: PageRegistry holding each session's page
        trail: BreadcrumbTrail fed by loader events
        catalog: Message catalogs for locale negotiation
        session_cookie: Name of the cookie identifying a browser session
        default_locale: Locale used when none can be negotiated
    """
    global _registry, _trail, _catalog, _session_cookie, _default_locale
    _registry = registry
    _trail = trail
    _catalog = catalog
    _session_cookie = session_cookie
    _default_locale = default_locale

    root = registry.paths.resource_root
    app.add_api_route(f"{root}/{{inventory_id}}", navigate_page, methods=["GET"], tags=["pages"])
    app.add_api_route(
        f"{root}/{{inventory_id}}/{{rest:path}}",
        navigate_page,
        methods=["GET"],
        tags=["pages"],
    )
    app.include_router(router)


def _require_state() -> tuple[PageRegistry, BreadcrumbTrail, MessageCatalog]:
    if _registry is None or _trail is None or _catalog is None:
        raise HTTPException(status_code=503, detail="Server not initialized")
    return _registry, _trail, _catalog


def _translator(catalog: MessageCatalog, request: Request, lang: str | None) -> Translator:
    header = lang or request.headers.get("accept-language")
    return catalog.translator(negotiate_locale(header, catalog.locales, _default_locale))


def _page_body(
    page: SmartInventoryPage,
    trail: BreadcrumbTrail,
    translate: Translator,
) -> dict[str, Any]:
    body = page.render(translate).to_dict()
    body["breadcrumb"] = trail.for_session(page.page_id, page.root, translate)
    return body


# =============================================================================
# Navigation
# =============================================================================


async def navigate_page(
    request: Request,
    inventory_id: str,
    rest: str = "",
    wait: bool = True,
    lang: str | None = None,
) -> Response:
    """
    Navigate the session's page to the requested path.

    Mounts a page on first visit (or for a different inventory), waits for
    the in-flight load unless `wait=false`, and returns the render decision.
    The bare resource root answers with a redirect to the details tab.
    """
    registry, trail, catalog = _require_state()

    session_id = request.cookies.get(_session_cookie)
    new_session = session_id is None
    if session_id is None:
        session_id = uuid.uuid4().hex

    try:
        page = await registry.navigate(session_id, request.url.path)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    translate = _translator(catalog, request, lang)
    decision = page.render(translate)

    response: Response
    if isinstance(decision, Redirect):
        response = RedirectResponse(decision.location, status_code=307)
    else:
        if wait:
            await page.wait_settled()
        response = JSONResponse(_page_body(page, trail, translate))

    if new_session:
        response.set_cookie(_session_cookie, session_id, httponly=True, samesite="lax")
    return response


# =============================================================================
# Session Page
# =============================================================================


@router.get("/api/pages/current")
async def current_page(request: Request, lang: str | None = None) -> dict[str, Any]:
    """Render the session's page as it is right now (may be loading)."""
    registry, trail, catalog = _require_state()

    session_id = request.cookies.get(_session_cookie)
    page = await registry.get(session_id) if session_id else None
    if session_id is None or page is None:
        raise HTTPException(status_code=404, detail="No page mounted for this session")

    body = _page_body(page, trail, _translator(catalog, request, lang))
    body["loading"] = page.loading
    return body


@router.delete("/api/pages/current")
async def close_page(request: Request) -> dict[str, Any]:
    """Unmount the session's page."""
    registry, trail, _ = _require_state()

    session_id = request.cookies.get(_session_cookie)
    page = await registry.close(session_id) if session_id else None
    if session_id is not None:
        trail.forget(session_id)

    return {"closed": page is not None}


# =============================================================================
# Server Status
# =============================================================================


@router.get("/api/status")
async def server_status() -> dict[str, Any]:
    """Get server status and basic info."""
    registry, _, _ = _require_state()

    return {
        "server": "smartinv",
        "version": "0.1.0",
        "pages_open": len(registry),
    }
