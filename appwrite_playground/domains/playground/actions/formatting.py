"""Small helpers shared by the per-section action formatters."""

from __future__ import annotations

from typing import Any, Iterable

from appwrite_playground.domains.playground.errors import PreconditionFailed


def take(items: Iterable[Any] | None, n: int) -> list[Any]:
    out = []
    for item in items or []:
        if len(out) >= n:
            break
        out.append(item)
    return out


def total(payload: dict[str, Any], key: str) -> int:
    """Listing total, falling back to the length of the returned page."""
    value = payload.get("total")
    if isinstance(value, int):
        return value
    return len(payload.get(key) or [])


def roles(membership: dict[str, Any]) -> str:
    return ", ".join(membership.get("roles") or [])


def first_or_fail(listing: dict[str, Any], key: str, message: str) -> dict[str, Any]:
    """
    First item of a listing page.

    Raises:
        PreconditionFailed: With `message` when the page is empty.
    """
    items = listing.get(key) or []
    if not items:
        raise PreconditionFailed(message)
    return items[0]


def truncate(text: str, limit: int = 100) -> str:
    text = text or ""
    return text if len(text) <= limit else text[:limit] + "..."
