"""
Dispatch outcomes and the renderer that turns them into display lines.

Formatting is decided per action: each action ships a formatter that picks the
notable fields (ids, counts, names) from its payload. Payloads are never dumped
wholesale, so passwords, JWTs and session secrets stay out of the log.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Union

from appwrite_playground.domains.playground.errors import PlaygroundError, RemoteOperationFailure
from appwrite_playground.utils.logger import get_logger

logger = get_logger()

Formatter = Callable[[Any], Iterable[str]]

DEFAULT_SUCCESS_LINE = "✅ Done"


@dataclass(frozen=True)
class Success:
    payload: Any = None


@dataclass(frozen=True)
class Failure:
    kind: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Failure":
        """Build a Failure from any exception raised by an action."""
        if isinstance(exc, PlaygroundError):
            kind = exc.kind
        else:
            kind = type(exc).__name__
        message = str(exc) or repr(exc)
        if isinstance(exc, RemoteOperationFailure) and exc.code:
            message = f"{message} (code {exc.code})"
        return cls(kind=kind, message=message)


Result = Union[Success, Failure]


def render(result: Result, formatter: Formatter | None = None) -> list[str]:
    """
    Turn a Result into a finite list of display lines. Never raises.

    Args:
        result: Success or Failure from a dispatch.
        formatter: Per-action summary function for Success payloads.

    Returns:
        At least one line of text.
    """
    if isinstance(result, Failure):
        return [f"{result.kind}: {result.message}"]
    if formatter is None:
        return [DEFAULT_SUCCESS_LINE]
    try:
        lines = [str(line) for line in formatter(result.payload)]
    except Exception as e:
        logger.warning("Formatter failed: %s", e)
        return [f"✅ Done (summary unavailable: {type(e).__name__})"]
    return lines or [DEFAULT_SUCCESS_LINE]
