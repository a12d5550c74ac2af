"""Locale lookups."""

from __future__ import annotations

from functools import partial
from typing import Any, Callable

from appwrite_playground.domains.playground.actions.context import ActionContext
from appwrite_playground.domains.playground.actions.formatting import take, total
from appwrite_playground.domains.playground.registry import ActionRegistry

SECTION = "🌍 LOCALE"


async def get_location(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.locale.get()


def fmt_location(loc: dict[str, Any]) -> list[str]:
    return [
        "✅ User location:",
        f"  IP: {loc.get('ip')}",
        f"  Country: {loc.get('country')} ({loc.get('countryCode')})",
        f"  Continent: {loc.get('continent')} ({loc.get('continentCode')})",
        f"  Currency: {loc.get('currency')}",
        f"  EU Member: {loc.get('eu')}",
    ]


def _listing(method: str) -> Callable[[ActionContext], Any]:
    async def _op(ctx: ActionContext) -> dict[str, Any]:
        return await getattr(ctx.locale, method)()
    _op.__name__ = method
    return _op


def fmt_listing(key: str, noun: str, line: Callable[[dict[str, Any]], str], limit: int | None = 5):
    def _fmt(listing: dict[str, Any]) -> list[str]:
        items = listing.get(key) or []
        shown = items if limit is None else take(items, limit)
        return [f"✅ Found {total(listing, key)} {noun}"] + [f"  {line(item)}" for item in shown]
    return _fmt


def _name_code(item: dict[str, Any]) -> str:
    return f"{item.get('name')} ({item.get('code')})"


# label, service method, payload key, noun, line format, limit
LISTINGS = (
    ("List Countries", "list_countries", "countries", "countries", _name_code, 5),
    ("List EU Countries", "list_countries_eu", "countries", "EU countries", _name_code, 5),
    ("List Continents", "list_continents", "continents", "continents", _name_code, None),
    (
        "List Currencies",
        "list_currencies",
        "currencies",
        "currencies",
        lambda c: f"{c.get('name')} ({c.get('code')}) - {c.get('symbol')}",
        5,
    ),
    ("List Languages", "list_languages", "languages", "languages", _name_code, 5),
    (
        "List Phone Codes",
        "list_countries_phones",
        "phones",
        "phone codes",
        lambda p: f"{p.get('countryName')}: {p.get('code')}",
        5,
    ),
    ("List Locale Codes", "list_codes", "localeCodes", "locale codes", _name_code, 5),
)


def register(registry: ActionRegistry, ctx: ActionContext) -> None:
    add = partial(registry.register, section=SECTION)
    add("Get User Location", partial(get_location, ctx), fmt_location)
    for label, method, key, noun, line, limit in LISTINGS:
        add(label, partial(_listing(method), ctx), fmt_listing(key, noun, line, limit))
