"""
smartinv - Main Server Module

This module contains the SmartInventoryServer class that wires the API
client, page registry and web server together and manages the application
lifecycle.
"""

import asyncio
import logging
import signal

from smartinv.api.client import InventoriesClient
from smartinv.config import AppConfig, get_config
from smartinv.core.events import EventBus, event_bus
from smartinv.view.registry import PageRegistry
from smartinv.web.breadcrumb import BreadcrumbTrail
from smartinv.web.server import WebServer

logger = logging.getLogger(__name__)


class SmartInventoryServer:
    """
    Main server that coordinates all components.

    The server manages:
    - Inventories API client (upstream fetches)
    - Page registry (one mounted detail page per browser session)
    - Breadcrumb trail (fed by loader events)
    - Web server for the HTTP surface
    """

    def __init__(self, config: AppConfig | None = None, *, bus: EventBus | None = None) -> None:
        """
        Initialize the server.

        Args:
            config: Application configuration (defaults to the global one).
            bus: Event bus shared by all pages (defaults to the global one).
        """
        self.config = config or get_config()
        self.event_bus = bus or event_bus
        paths = self.config.routes.to_paths()

        self.client = InventoriesClient(
            self.config.api.base_url,
            token=self.config.api.token,
            timeout=self.config.api.timeout,
            verify_ssl=self.config.api.verify_ssl,
        )

        self.page_registry = PageRegistry(
            self.client.read_detail,
            paths=paths,
            event_bus=self.event_bus,
        )
        self.breadcrumb_trail = BreadcrumbTrail(paths)

        self.web_server = WebServer(
            self.page_registry,
            self.breadcrumb_trail,
            session_cookie=self.config.server.session_cookie,
            default_locale=self.config.i18n.default_locale,
        )

        # Server state
        self._running = False
        self._shutdown_event: asyncio.Event | None = None
        self._prune_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start all server components."""
        server = self.config.server
        logger.info("Starting smartinv on %s:%d", server.host, server.port)
        logger.info("Reading inventories from %s", self.config.api.base_url)

        self._running = True
        self._shutdown_event = asyncio.Event()

        await self.breadcrumb_trail.attach(self.event_bus)
        await self.web_server.start(host=server.host, port=server.port)
        self._prune_task = asyncio.create_task(self._prune_loop(), name="prune-idle-pages")

        logger.info("smartinv started successfully")

    async def stop(self) -> None:
        """Stop all server components gracefully."""
        if not self._running:
            return

        logger.info("Stopping smartinv...")
        self._running = False

        # Stop Web server first so no new navigations arrive
        await self.web_server.stop()

        if self._prune_task is not None:
            self._prune_task.cancel()
            await asyncio.wait({self._prune_task})
            self._prune_task = None

        # Cancel in-flight loads before the client goes away
        await self.page_registry.close_all()
        await self.breadcrumb_trail.detach(self.event_bus)
        await self.client.close()

        if self._shutdown_event:
            self._shutdown_event.set()

        logger.info("smartinv stopped")

    async def _prune_loop(self) -> None:
        """Periodically unmount pages whose session went idle."""
        server = self.config.server
        while self._running:
            await asyncio.sleep(server.prune_interval)
            try:
                await self.web_server.prune_idle_pages(server.page_idle_timeout)
            except Exception as e:
                logger.exception("Error pruning idle pages: %s", e)

    async def run(self) -> None:
        """
        Run the server until shutdown is requested.

        This method starts all components and waits for a shutdown signal
        (SIGINT or SIGTERM).
        """
        await self.start()

        loop = asyncio.get_running_loop()

        def handle_signal() -> None:
            logger.info("Received shutdown signal")
            if self._shutdown_event:
                self._shutdown_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, handle_signal)
            except NotImplementedError:
                # Signal handlers not supported on Windows
                pass

        if self._shutdown_event:
            await self._shutdown_event.wait()

        await self.stop()

    @property
    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    @property
    def open_pages(self) -> int:
        """Get the number of currently mounted pages."""
        return len(self.page_registry)
