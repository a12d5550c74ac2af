"""Server ping, log housekeeping and cookie inspection."""

from __future__ import annotations

import asyncio
from functools import partial

from appwrite_playground.domains.playground.actions.context import ActionContext
from appwrite_playground.domains.playground.registry import ActionRegistry

SECTION = "🧪 UTILITIES"


async def ping_server(ctx: ActionContext) -> str:
    return await asyncio.to_thread(ctx.session.client.ping)


async def clear_output(ctx: ActionContext) -> None:
    ctx.log.clear()


async def clear_realtime_events(ctx: ActionContext) -> int:
    cleared = len(ctx.feed)
    ctx.feed.clear()
    return cleared


async def see_cookies(ctx: ActionContext) -> list[str]:
    # Names only; values are session credentials.
    return ctx.session.client.cookie_names()


def fmt_cookies(names: list[str]) -> list[str]:
    if not names:
        return ["🍪 No cookies stored"]
    return [f"🍪 {len(names)} cookie(s): {', '.join(names)}"]


def register(registry: ActionRegistry, ctx: ActionContext) -> None:
    add = partial(registry.register, section=SECTION)
    add("Ping Server", partial(ping_server, ctx), lambda response: [f"✅ Ping successful: {response}"])
    add("Clear Output", partial(clear_output, ctx), lambda _r: ["🧹 Output cleared"])
    add("Clear Realtime Events", partial(clear_realtime_events, ctx), lambda n: [f"🧹 Cleared {n} realtime event(s)"])
    add("See cookies", partial(see_cookies, ctx), fmt_cookies)
