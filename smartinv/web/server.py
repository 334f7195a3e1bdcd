"""
Web Server Module for smartinv.

This module provides the WebServer class that creates and manages the
FastAPI application, registers all routes, and serves it with uvicorn.

The WebServer integrates:
- Detail page navigation under the resource root
- Session page inspection (/api/pages/current)
- Health and status endpoints
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartinv.core.i18n import DEFAULT_LOCALE, MessageCatalog, get_catalog
from smartinv.web.routes.pages import register_page_routes

if TYPE_CHECKING:
    from smartinv.view.registry import PageRegistry
    from smartinv.web.breadcrumb import BreadcrumbTrail

logger = logging.getLogger(__name__)


class WebServer:
    """
    FastAPI-based web server for smartinv.

    Serves render decisions for the smart inventory detail page as JSON;
    the front end draws the sub-views they name.
    """

    def __init__(
        self,
        page_registry: PageRegistry,
        breadcrumb_trail: BreadcrumbTrail,
        *,
        catalog: MessageCatalog | None = None,
        session_cookie: str = "smartinv_session",
        default_locale: str = DEFAULT_LOCALE,
        cors_origins: list[str] | None = None,
    ) -> None:
        """
        Initialize the WebServer.

        Args:
            page_registry: Registry of mounted pages
            breadcrumb_trail: Breadcrumb labels per session
            catalog: Message catalogs (defaults to the packaged ones)
            session_cookie: Cookie name identifying a browser session
            default_locale: Locale used when none can be negotiated
            cors_origins: Allowed CORS origins (default: any)
        """
        self.page_registry = page_registry
        self.breadcrumb_trail = breadcrumb_trail
        self.catalog = catalog or get_catalog()

        # Create FastAPI app
        self.app = FastAPI(
            title="smartinv",
            description="Smart inventory detail page controller",
            version="0.1.0",
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins or ["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Server state
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._host = "0.0.0.0"
        self._port = 9010

        self._register_routes(session_cookie, default_locale)

    def _register_routes(self, session_cookie: str, default_locale: str) -> None:
        """Register all routes with the FastAPI app."""

        @self.app.get("/health")
        async def health_check() -> dict[str, str]:
            """Health check endpoint."""
            return {"status": "ok", "server": "smartinv"}

        register_page_routes(
            self.app,
            registry=self.page_registry,
            trail=self.breadcrumb_trail,
            catalog=self.catalog,
            session_cookie=session_cookie,
            default_locale=default_locale,
        )

    async def prune_idle_pages(self, timeout_s: float) -> list[str]:
        """
        Unmount pages idle for longer than `timeout_s` and drop their breadcrumbs.

        Returns:
            Session ids that were pruned.
        """
        expired = await self.page_registry.prune_expired(timeout_s)
        for session_id in expired:
            self.breadcrumb_trail.forget(session_id)
        return expired

    async def start(self, host: str = "0.0.0.0", port: int = 9010) -> None:
        """
        Start the web server.

        Args:
            host: Host address to bind to
            port: Port to listen on
        """
        self._host = host
        self._port = port

        config = uvicorn.Config(
            self.app,
            host=host,
            port=port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)

        # Start server in background
        self._serve_task = asyncio.create_task(self._server.serve())

        logger.info("Web server started on http://%s:%d", host, port)

    async def stop(self) -> None:
        """Stop the web server."""
        if self._server is not None:
            self._server.should_exit = True
            self._server = None

        if self._serve_task is not None:
            await asyncio.wait({self._serve_task})
            self._serve_task = None

        logger.info("Web server stopped")

    @property
    def port(self) -> int:
        """Get the server port."""
        return self._port

    @property
    def host(self) -> str:
        """Get the server host."""
        return self._host
