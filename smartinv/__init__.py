"""
smartinv - Smart inventory detail page controller.

smartinv loads a smart inventory by identifier, decides which tab, error
screen or loading indicator its detail page shows for the current route, and
serves those decisions over HTTP.
"""

__version__ = "0.1.0"
__license__ = "GPL-2.0"

from smartinv.server import SmartInventoryServer

__all__ = ["SmartInventoryServer", "__version__"]
