"""
Inventories API client.

Reads smart inventories from the upstream REST API:

    GET {base_url}/api/v2/inventories/{id}/

Every failure is raised as ApiError carrying the HTTP status when there was
one, so the loader can tell "not found" apart from everything else.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from smartinv.core.models import MalformedResourceError, SmartInventory

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
USER_AGENT = "smartinv/0.1.0"


class ApiError(Exception):
    """An upstream request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InventoriesClient:
    """
    Async client for the inventories endpoint.

    Usage:
        async with InventoriesClient("https://controller.example.com", token="...") as client:
            inventory = await client.read_detail("42")
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Root URL of the API server (without /api/v2).
            token: Optional OAuth2 bearer token.
            timeout: Request timeout in seconds.
            verify_ssl: Whether to verify TLS certificates.
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            verify=verify_ssl,
            transport=transport,
            follow_redirects=True,
        )

    async def __aenter__(self) -> InventoriesClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the connection pool."""
        await self._client.aclose()

    async def read_detail(self, inventory_id: str | int) -> SmartInventory:
        """
        Fetch one inventory.

        Raises:
            ApiError: On transport errors, non-2xx responses, invalid JSON or
                a payload that is not an inventory.
        """
        url = f"/api/v2/inventories/{inventory_id}/"

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ApiError(
                f"GET {url} failed with HTTP {status}: {_detail_of(e.response)}",
                status_code=status,
            ) from e
        except httpx.TimeoutException as e:
            raise ApiError(f"GET {url} timed out") from e
        except httpx.RequestError as e:
            raise ApiError(f"GET {url} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ApiError(f"GET {url} returned invalid JSON") from e

        try:
            inventory = SmartInventory.from_api(payload)
        except MalformedResourceError as e:
            raise ApiError(f"GET {url} returned a malformed inventory: {e}") from e

        logger.debug("Fetched inventory %s (%s)", inventory.id, inventory.name)
        return inventory


def _detail_of(response: httpx.Response) -> str:
    """Extract the API's error detail, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return response.reason_phrase
