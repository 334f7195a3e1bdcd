"""
Load state for the detail page.

The page is always in exactly one of three states:

    Loading          a fetch is in flight (or about to be issued)
    Loaded(resource) the last fetch succeeded
    Errored(error)   the last fetch failed, classified into ErrorInfo

Modelling this as a union (instead of separate error/loading/resource fields)
makes combinations like "errored and loaded" unrepresentable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from smartinv.core.models import SmartInventory

NOT_FOUND_STATUS = 404


class ErrorKind(Enum):
    """Classification of a failed load."""

    NOT_FOUND = "not_found"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """A classified load failure."""

    kind: ErrorKind
    message: str = ""
    status_code: int | None = None

    @property
    def is_not_found(self) -> bool:
        return self.kind is ErrorKind.NOT_FOUND

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.status_code is not None:
            result["status_code"] = self.status_code
        return result


@dataclass(frozen=True, slots=True)
class Loading:
    """A fetch is in flight."""

    tag: ClassVar[str] = "loading"


@dataclass(frozen=True, slots=True)
class Loaded:
    """The resource was fetched successfully."""

    resource: SmartInventory
    tag: ClassVar[str] = "loaded"


@dataclass(frozen=True, slots=True)
class Errored:
    """The last fetch failed."""

    error: ErrorInfo
    tag: ClassVar[str] = "errored"


LoadState = Union[Loading, Loaded, Errored]


def classify_error(error: BaseException) -> ErrorInfo:
    """
    Classify a fetch failure.

    An error is NOT_FOUND if and only if it carries a 404 response status,
    either directly (`status_code`) or via an attached `response` object
    (as httpx.HTTPStatusError does). Everything else is OTHER.
    """
    status = _status_of(error)
    kind = ErrorKind.NOT_FOUND if status == NOT_FOUND_STATUS else ErrorKind.OTHER
    message = str(error) or error.__class__.__name__
    return ErrorInfo(kind=kind, message=message, status_code=status)


def _status_of(error: BaseException) -> int | None:
    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status

    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    if isinstance(status, int):
        return status

    return None
