"""Auth & account actions."""

from __future__ import annotations

from functools import partial
from typing import Any

from appwrite_playground.domains.playground.actions.context import (
    OAUTH_FAILURE_URL,
    REDIRECT_URL,
    ActionContext,
    unique_id,
)
from appwrite_playground.domains.playground.actions.formatting import take, total
from appwrite_playground.domains.playground.errors import RemoteOperationFailure
from appwrite_playground.domains.playground.registry import ActionRegistry

SECTION = "🔐 AUTH & ACCOUNT"

OAUTH_PROVIDERS = (("Google", "google"), ("GitHub", "github"), ("Apple", "apple"), ("Facebook", "facebook"))

DEFAULT_PREFS = {"theme": "dark", "language": "en", "notifications": True}


async def is_logged(ctx: ActionContext) -> dict[str, Any]:
    """Current user, or {"logged_in": False} when the API answers 401."""
    try:
        user = await ctx.account.get()
    except RemoteOperationFailure as e:
        if e.code != 401:
            raise
        return {"logged_in": False, "reason": e.message}
    return {"logged_in": True, "user": user}


def fmt_is_logged(out: dict[str, Any]) -> list[str]:
    if not out.get("logged_in"):
        return [f"ℹ️ User not logged in: {out.get('reason', '')}"]
    user = out.get("user") or {}
    return [f"✅ User is logged in: {user.get('name')} ({user.get('email')})"]


async def register_account(ctx: ActionContext) -> dict[str, Any]:
    inputs = ctx.inputs
    return await ctx.account.create(unique_id(), inputs.email, inputs.password, inputs.name)


def fmt_user_created(user: dict[str, Any]) -> list[str]:
    return [f"✅ Account created: {user.get('name')} ({user.get('email')})"]


async def login(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.create_email_password_session(ctx.inputs.email, ctx.inputs.password)


async def login_anonymously(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.create_anonymous_session()


def fmt_session(prefix: str):
    def _fmt(session: dict[str, Any]) -> list[str]:
        return [f"✅ {prefix}: {session.get('userId')}"]
    return _fmt


async def oauth_url(ctx: ActionContext, provider: str) -> dict[str, Any]:
    url = ctx.account.create_oauth2_session_url(provider, success=None, failure=OAUTH_FAILURE_URL)
    ctx.state.last_oauth_url = url
    return {"provider": provider, "url": url}


def fmt_oauth(out: dict[str, Any]) -> list[str]:
    return [f"✅ {out['provider']} OAuth initiated", f"  Open in a browser: {out['url']}"]


async def create_jwt(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.create_jwt()


def fmt_jwt(token: dict[str, Any]) -> list[str]:
    # The token itself is a credential; only its size is shown.
    return [f"✅ JWT created ({len(token.get('jwt') or '')} chars, valid for 15 minutes)"]


async def get_user_info(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.get()


def fmt_user_info(user: dict[str, Any]) -> list[str]:
    return [
        "✅ User Info:",
        f"  Name: {user.get('name')}",
        f"  Email: {user.get('email')}",
        f"  ID: {user.get('$id')}",
        f"  Created: {user.get('$createdAt')}",
        f"  Status: {user.get('status')}",
        f"  Email Verified: {user.get('emailVerification')}",
        f"  Phone Verified: {user.get('phoneVerification')}",
    ]


async def update_name(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.update_name(ctx.inputs.name)


async def update_email(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.update_email(ctx.inputs.email, ctx.inputs.password)


async def update_password(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.update_password(ctx.inputs.password)


async def update_prefs(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.update_prefs(DEFAULT_PREFS)


async def list_sessions(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.list_sessions()


def fmt_sessions(listing: dict[str, Any]) -> list[str]:
    lines = [f"✅ User has {total(listing, 'sessions')} sessions"]
    for s in listing.get("sessions") or []:
        lines.append(f"  Session: {s.get('clientName')} - {s.get('$createdAt')}")
    return lines


async def list_logs(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.list_logs()


def fmt_logs(listing: dict[str, Any]) -> list[str]:
    lines = [f"✅ User has {total(listing, 'logs')} logs"]
    for entry in take(listing.get("logs"), 5):
        lines.append(f"  Log: {entry.get('event')} - {entry.get('time')}")
    return lines


async def create_verification(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.create_verification(REDIRECT_URL)


async def create_phone_verification(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.create_phone_verification()


async def create_recovery(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.create_recovery(ctx.inputs.email, REDIRECT_URL)


def fmt_token(prefix: str):
    def _fmt(token: dict[str, Any]) -> list[str]:
        return [f"✅ {prefix} (expires {token.get('expire')})"]
    return _fmt


async def block_account(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.account.update_status()


async def delete_sessions(ctx: ActionContext) -> None:
    await ctx.account.delete_sessions()


async def delete_current_session(ctx: ActionContext) -> None:
    await ctx.account.delete_session("current")


async def logout(ctx: ActionContext) -> None:
    await ctx.account.delete_session("current")
    ctx.session.client.clear_session()


def _lines(*lines: str):
    return lambda _payload: list(lines)


def register(registry: ActionRegistry, ctx: ActionContext) -> None:
    add = partial(registry.register, section=SECTION)
    add("Is Logged?", partial(is_logged, ctx), fmt_is_logged)
    add("Register Account", partial(register_account, ctx), fmt_user_created)
    add("Login", partial(login, ctx), fmt_session("Login successful"))
    add("Login Anonymously", partial(login_anonymously, ctx), fmt_session("Anonymous login successful"))
    for title, provider in OAUTH_PROVIDERS:
        add(f"OAuth with {title}", partial(oauth_url, ctx, provider), fmt_oauth)
    add("Create JWT", partial(create_jwt, ctx), fmt_jwt)
    add("Get User Info", partial(get_user_info, ctx), fmt_user_info)
    add("Update Name", partial(update_name, ctx), lambda u: [f"✅ Name updated to: {u.get('name')}"])
    add("Update Email", partial(update_email, ctx), lambda u: [f"✅ Email updated to: {u.get('email')}"])
    add(
        "Update Password",
        partial(update_password, ctx),
        lambda u: [f"✅ Password updated successfully {u.get('passwordUpdate')}"],
    )
    add(
        "Update Preferences",
        partial(update_prefs, ctx),
        lambda u: [f"✅ Preferences updated for {u.get('name')}: {', '.join(sorted(u.get('prefs') or {}))}"],
    )
    add("Get User Sessions", partial(list_sessions, ctx), fmt_sessions)
    add("Get User Logs", partial(list_logs, ctx), fmt_logs)
    add("Create Verification", partial(create_verification, ctx), fmt_token("Email verification sent"))
    add(
        "Create Phone Verification",
        partial(create_phone_verification, ctx),
        fmt_token("Phone verification sent"),
    )
    add("Create Recovery", partial(create_recovery, ctx), fmt_token("Password recovery sent"))
    add("Update Status (Block)", partial(block_account, ctx), lambda u: [f"✅ Account status updated: {u.get('status')}"])
    add("Delete Sessions", partial(delete_sessions, ctx), _lines("✅ All sessions deleted"))
    add("Delete Current Session", partial(delete_current_session, ctx), _lines("✅ Current session deleted"))
    add("Logout", partial(logout, ctx), _lines("✅ Logged out successfully"))
