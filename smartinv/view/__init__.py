"""
Detail page view layer.

This package turns load state and routes into render decisions:
- ViewComposer: picks the redirect, sub-view, or error screen to show
- SmartInventoryPage: one mounted page and its reload effect
- PageRegistry: mounted pages per browser session
"""

from smartinv.view.composer import RenderDecision, ViewComposer
from smartinv.view.page import SmartInventoryPage
from smartinv.view.registry import PageRegistry

__all__ = [
    "PageRegistry",
    "RenderDecision",
    "SmartInventoryPage",
    "ViewComposer",
]
