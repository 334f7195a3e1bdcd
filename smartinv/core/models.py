"""
Domain models (DTOs) for the smart inventory detail page.

This module is intentionally lightweight:
- No HTTP knowledge
- No state
- Pure dataclasses + helper functions
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from smartinv.core import CoreError


class MalformedResourceError(CoreError):
    """Raised when an upstream payload cannot be turned into a resource."""


@dataclass(frozen=True, slots=True)
class SmartInventory:
    """
    A smart inventory as returned by the inventories API.

    Notes:
    - `id` and `name` are the only fields the page controller relies on.
    - Host membership is computed upstream from `host_filter`; it is opaque here.
    - `raw` keeps the full payload for sub-views that need more fields.
    """

    id: int
    name: str
    kind: str = "smart"
    description: str = ""
    host_filter: str | None = None
    organization: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, payload: Any) -> SmartInventory:
        """
        Build a resource from an API payload.

        Raises:
            MalformedResourceError: If the payload is not an object or lacks
                a usable `id`/`name`.
        """
        if not isinstance(payload, dict):
            raise MalformedResourceError(f"Expected an object, got {type(payload).__name__}")

        try:
            inventory_id = int(payload["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResourceError(f"Missing or invalid id: {e}") from e

        name = normalize_text(payload.get("name"))
        if name is None:
            raise MalformedResourceError(f"Inventory {inventory_id} has no name")

        try:
            organization = normalize_int(payload.get("organization"))
        except (TypeError, ValueError) as e:
            raise MalformedResourceError(f"Inventory {inventory_id} has invalid organization: {e}") from e

        return cls(
            id=inventory_id,
            name=name,
            kind=str(payload.get("kind") or "smart"),
            description=str(payload.get("description") or ""),
            host_filter=normalize_text(payload.get("host_filter")),
            organization=organization,
            raw=dict(payload),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict for sub-view props."""
        result = dict(self.raw)
        result.update(
            {
                "id": self.id,
                "name": self.name,
                "kind": self.kind,
                "description": self.description,
                "host_filter": self.host_filter,
                "organization": self.organization,
            }
        )
        return result


@dataclass(frozen=True, slots=True)
class Tab:
    """One entry of the tab chrome."""

    label: str
    path: str
    order: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.label, "link": self.path, "id": self.order}


@dataclass(frozen=True, slots=True)
class Link:
    """A navigation link rendered by the page (recovery links, close action)."""

    label: str
    href: str

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "href": self.href}


def normalize_text(value: Any) -> str | None:
    """
    Normalize optional text fields:
    - strip whitespace
    - coerce empty strings to None
    """
    if value is None:
        return None
    v = str(value).strip()
    return v if v else None


def normalize_int(value: Any) -> int | None:
    """Normalize optional integer fields (coerce to int, keep None)."""
    if value is None:
        return None
    return int(value)
