"""
Web Routes Package.

This package contains FastAPI route modules:
- pages: detail page navigation, session page and status endpoints
"""

from smartinv.web.routes.pages import register_page_routes

__all__ = [
    "register_page_routes",
]
