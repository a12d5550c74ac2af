"""Realtime actions and the event feed subscription made at bootstrap."""

from __future__ import annotations

from functools import partial
from typing import Any

from appwrite_playground.domains.playground.actions.context import ActionContext
from appwrite_playground.domains.playground.registry import ActionRegistry

SECTION = "🔄 REALTIME"

CHANNELS = (
    "files",
    "documents",
    "databases.*",
    "databases.*.collections.*.documents",
    "account",
    "teams",
    "memberships",
)


def format_event(event: Any) -> str:
    """`[REALTIME] <first event>: <first payload key>`"""
    events = list(getattr(event, "events", None) or [])
    payload = getattr(event, "payload", None) or {}
    first_event = events[0] if events else "unknown"
    first_key = next(iter(payload), "no payload")
    return f"[REALTIME] {first_event}: {first_key}"


def on_event(ctx: ActionContext, event: Any) -> None:
    line = format_event(event)
    ctx.log.info(line, label="realtime")
    ctx.feed.info(line, label="realtime")


async def subscribe_events(ctx: ActionContext) -> Any:
    """Subscribe the log and the feed to every playground channel."""
    return await ctx.realtime.subscribe(CHANNELS, partial(on_event, ctx))


async def test_realtime(ctx: ActionContext) -> dict[str, Any]:
    realtime = ctx.realtime
    return {"channels": len(realtime.channels), "connected": realtime.is_connected}


def fmt_test_realtime(status: dict[str, Any]) -> list[str]:
    return [
        "✅ Realtime status:",
        f"  Subscribed channels: {status['channels']}",
        f"  Connection: {'Connected' if status['connected'] else 'Disconnected'}",
    ]


def register(registry: ActionRegistry, ctx: ActionContext) -> None:
    registry.register("Test Realtime", partial(test_realtime, ctx), fmt_test_realtime, section=SECTION)
