"""Cloud function actions."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from functools import partial
from typing import Any

from appwrite_playground.domains.playground.actions.context import ActionContext
from appwrite_playground.domains.playground.actions.formatting import first_or_fail, take, total
from appwrite_playground.domains.playground.registry import ActionRegistry

SECTION = "⚡ FUNCTIONS"


async def list_functions(ctx: ActionContext) -> None:
    # Listing functions needs an API key; the client API only executes them.
    return None


def fmt_list_functions(_payload: Any) -> list[str]:
    return [
        "ℹ️ List functions is not available in the client API",
        "   You can only execute functions and view executions",
        "   Set PLAYGROUND_FUNCTION_ID to test function execution",
    ]


async def execute_function(ctx: ActionContext) -> dict[str, Any]:
    body = json.dumps({
        "message": "Hello from the Appwrite playground!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
    return await ctx.functions.create_execution(ctx.config.function_id, body=body)


def fmt_execution(prefix: str, with_duration: bool = False):
    def _fmt(execution: dict[str, Any]) -> list[str]:
        lines = [f"✅ {prefix}: {execution.get('$id')}", f"  Status: {execution.get('status')}"]
        if with_duration:
            lines.append(f"  Duration: {execution.get('duration')} seconds")
        lines.append(f"  Response: {execution.get('responseBody')}")
        return lines
    return _fmt


async def list_executions(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.functions.list_executions(ctx.config.function_id)


def fmt_list_executions(listing: dict[str, Any]) -> list[str]:
    lines = [f"✅ Found {total(listing, 'executions')} executions"]
    for e in take(listing.get("executions"), 3):
        lines.append(f"  Execution: {e.get('$id')} - {e.get('status')}")
    return lines


async def get_execution(ctx: ActionContext) -> dict[str, Any]:
    listing = await ctx.functions.list_executions(ctx.config.function_id)
    first = first_or_fail(listing, "executions", "No executions found. Execute a function first!")
    return await ctx.functions.get_execution(ctx.config.function_id, first["$id"])


def register(registry: ActionRegistry, ctx: ActionContext) -> None:
    add = partial(registry.register, section=SECTION)
    add("List Functions", partial(list_functions, ctx), fmt_list_functions)
    add("Execute Function", partial(execute_function, ctx), fmt_execution("Function executed"))
    add("List Executions", partial(list_executions, ctx), fmt_list_executions)
    add("Get Execution", partial(get_execution, ctx), fmt_execution("Execution info", with_duration=True))
