"""
Upstream API access.

The page core only needs a `fetch_detail(id)` coroutine; InventoriesClient
provides it for the inventories REST API.
"""

from smartinv.api.client import ApiError, InventoriesClient

__all__ = [
    "ApiError",
    "InventoriesClient",
]
