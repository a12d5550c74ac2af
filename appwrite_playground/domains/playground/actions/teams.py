"""Team and membership actions.

Everything except "List Teams" and "Create Team" works on the team created by
"Create Team" in this run.
"""

from __future__ import annotations

import json
from datetime import datetime
from functools import partial
from typing import Any

from appwrite_playground.domains.playground.actions.context import REDIRECT_URL, ActionContext, unique_id
from appwrite_playground.domains.playground.actions.formatting import first_or_fail, roles, take, total
from appwrite_playground.domains.playground.errors import PreconditionFailed
from appwrite_playground.domains.playground.registry import ActionRegistry

SECTION = "👥 TEAMS"

TEAM_PREFS = {"theme": "dark", "notifications": True, "language": "en"}
NO_MEMBERSHIPS = "No memberships found!"


def _team_id(ctx: ActionContext) -> str:
    if not ctx.state.team_id:
        raise PreconditionFailed("No team yet. Use 'Create Team' first!")
    return ctx.state.team_id


async def _first_membership(ctx: ActionContext) -> dict[str, Any]:
    listing = await ctx.teams.list_memberships(_team_id(ctx))
    return first_or_fail(listing, "memberships", NO_MEMBERSHIPS)


async def list_teams(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.teams.list_teams()


def fmt_list_teams(listing: dict[str, Any]) -> list[str]:
    lines = [f"✅ Found {total(listing, 'teams')} teams"]
    for team in take(listing.get("teams"), 5):
        lines.append(f"  Team: {team.get('name')} ({team.get('total')} members)")
    return lines


async def create_team(ctx: ActionContext) -> dict[str, Any]:
    team = await ctx.teams.create(unique_id(), f"Playground Team {datetime.now():%Y-%m-%d}", ["owner"])
    ctx.state.team_id = team.get("$id")
    return team


async def get_team(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.teams.get(_team_id(ctx))


def fmt_team(team: dict[str, Any]) -> list[str]:
    return [
        f"✅ Team info: {team.get('name')}",
        f"  ID: {team.get('$id')}",
        f"  Members: {team.get('total')}",
        f"  Created: {team.get('$createdAt')}",
    ]


async def update_team(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.teams.update_name(_team_id(ctx), f"Updated Team {datetime.now():%H:%M:%S}")


async def delete_team(ctx: ActionContext) -> str:
    team_id = _team_id(ctx)
    await ctx.teams.delete(team_id)
    ctx.state.team_id = None
    return team_id


async def list_memberships(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.teams.list_memberships(_team_id(ctx))


def fmt_list_memberships(listing: dict[str, Any]) -> list[str]:
    lines = [f"✅ Found {total(listing, 'memberships')} memberships"]
    for m in take(listing.get("memberships"), 5):
        lines.append(f"  Member: {m.get('userName')} - {roles(m)}")
    return lines


async def create_membership(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.teams.create_membership(_team_id(ctx), ["member"], email=ctx.inputs.email, url=REDIRECT_URL)


async def get_membership(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_membership(ctx)
    return await ctx.teams.get_membership(_team_id(ctx), first["$id"])


def fmt_membership(m: dict[str, Any]) -> list[str]:
    return [
        f"✅ Membership info: {m.get('userName')}",
        f"  Roles: {roles(m)}",
        f"  Status: {'confirmed' if m.get('confirm') else 'pending'}",
    ]


async def update_membership(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_membership(ctx)
    return await ctx.teams.update_membership(_team_id(ctx), first["$id"], ["admin"])


async def delete_membership(ctx: ActionContext) -> str:
    first = await _first_membership(ctx)
    await ctx.teams.delete_membership(_team_id(ctx), first["$id"])
    return first["$id"]


async def update_team_prefs(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.teams.update_prefs(_team_id(ctx), TEAM_PREFS)


async def get_team_prefs(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.teams.get_prefs(_team_id(ctx))


def register(registry: ActionRegistry, ctx: ActionContext) -> None:
    add = partial(registry.register, section=SECTION)
    add("List Teams", partial(list_teams, ctx), fmt_list_teams)
    add("Create Team", partial(create_team, ctx), lambda t: [f"✅ Team created: {t.get('name')} ({t.get('$id')})"])
    add("Get Team", partial(get_team, ctx), fmt_team)
    add("Update Team", partial(update_team, ctx), lambda t: [f"✅ Team updated: {t.get('name')}"])
    add("Delete Team", partial(delete_team, ctx), lambda team_id: [f"✅ Team deleted: {team_id}"])
    add("List Team Memberships", partial(list_memberships, ctx), fmt_list_memberships)
    add("Create Team Membership", partial(create_membership, ctx), lambda m: [f"✅ Membership created: {m.get('$id')}"])
    add("Get Team Membership", partial(get_membership, ctx), fmt_membership)
    add(
        "Update Team Membership",
        partial(update_membership, ctx),
        lambda m: [f"✅ Membership updated: {m.get('userName')}", f"  New roles: {roles(m)}"],
    )
    add("Delete Team Membership", partial(delete_membership, ctx), lambda mid: [f"✅ Membership deleted: {mid}"])
    add("Update Team Preferences", partial(update_team_prefs, ctx), lambda _p: ["✅ Team preferences updated"])
    add(
        "Get Team Preferences",
        partial(get_team_prefs, ctx),
        lambda p: ["✅ Team preferences retrieved", f"  Data: {json.dumps(p, sort_keys=True)}"],
    )
