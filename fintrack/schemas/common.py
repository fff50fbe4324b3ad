"""Shapes shared by every list endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from fintrack.core.exceptions import MalformedResponseError

T = TypeVar("T")


class ListResponse(BaseModel, Generic[T]):
    """Canonical list payload.

    Endpoints answer either a bare array or ``{items, total}``. A bare array
    carries no total, so ``total`` falls back to the page length, which
    under-reports when the array is only one page of a larger set.
    ``skipped`` counts records of the page that failed validation and were
    left out of ``items``.
    """

    items: list[T]
    total: int
    skipped: int = 0

    @property
    def received(self) -> int:
        """Records the server sent in this page, valid or not."""
        return len(self.items) + self.skipped


def extract_items(payload: Any) -> list | None:
    """Return the raw item list of either accepted shape, else None."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        return payload["items"]
    return None


def normalize_list_response(payload: Any) -> tuple[list, int]:
    """Coerce a list payload to ``(items, total)``.

    Raises ``MalformedResponseError`` when the payload is neither shape.
    """
    items = extract_items(payload)
    if items is None:
        raise MalformedResponseError()
    total = payload.get("total") if isinstance(payload, dict) else None
    if not isinstance(total, int) or isinstance(total, bool):
        total = len(items)
    return items, total
