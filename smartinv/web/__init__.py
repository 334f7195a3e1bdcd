"""
smartinv Web Layer.

This package provides the HTTP surface of the detail page controller.

Components:
- WebServer: FastAPI application with all routes
- BreadcrumbTrail: per-session breadcrumb labels fed by loader events
"""

from smartinv.web.breadcrumb import BreadcrumbTrail
from smartinv.web.server import WebServer

__all__ = [
    "BreadcrumbTrail",
    "WebServer",
]
