"""Database (document) actions against the configured test collection."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from functools import partial
from typing import Any

from appwrite_playground.domains.playground.actions.context import ActionContext, unique_id
from appwrite_playground.domains.playground.actions.formatting import first_or_fail, take, total
from appwrite_playground.domains.playground.registry import ActionRegistry

SECTION = "💾 DATABASES"

UPSERT_DOCUMENT_ID = "upsert_test_doc"
COUNTER_ATTRIBUTE = "Priority"
NO_DOCUMENTS = "No documents found. Create one first!"


def _ids(ctx: ActionContext) -> tuple[str, str]:
    return ctx.config.database_id, ctx.config.collection_id


async def _first_document(ctx: ActionContext) -> dict[str, Any]:
    listing = await ctx.databases.list_documents(*_ids(ctx))
    return first_or_fail(listing, "documents", NO_DOCUMENTS)


async def list_documents(ctx: ActionContext) -> dict[str, Any]:
    listing = await ctx.databases.list_documents(*_ids(ctx))
    ctx.state.documents = take(listing.get("documents"), 10)
    return listing


def fmt_list_documents(listing: dict[str, Any]) -> list[str]:
    lines = [f"✅ Found {total(listing, 'documents')} documents"]
    for doc in take(listing.get("documents"), 3):
        lines.append(f"  Document {doc.get('$id')}: {doc.get('$createdAt')}")
    return lines


def new_document_data() -> dict[str, Any]:
    return {
        "Title": "Test Document",
        "Content": "This is a test document created from the Appwrite playground",
        "Author": "Appwrite Playground",
        "CreatedAt": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "Completed": False,
        "Priority": random.randint(1, 4),
    }


async def create_document(ctx: ActionContext) -> dict[str, Any]:
    return await ctx.databases.create_document(*_ids(ctx), unique_id(), new_document_data())


def fmt_created_document(doc: dict[str, Any]) -> list[str]:
    return [f"✅ Document created: {doc.get('$id')}", f"  Title: {doc.get('Title')}"]


async def get_document(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_document(ctx)
    return await ctx.databases.get_document(*_ids(ctx), first["$id"])


def fmt_document(doc: dict[str, Any]) -> list[str]:
    lines = [
        f"✅ Retrieved document: {doc.get('$id')}",
        f"  Created: {doc.get('$createdAt')}",
        f"  Updated: {doc.get('$updatedAt')}",
    ]
    for key, value in doc.items():
        if not key.startswith("$"):
            lines.append(f"  {key}: {value}")
    return lines


async def update_document(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_document(ctx)
    data = {
        "Content": f"Updated from the Appwrite playground at {datetime.now():%Y-%m-%d %H:%M:%S}",
        "Completed": True,
        "Author": "Appwrite Playground",
    }
    return await ctx.databases.update_document(*_ids(ctx), first["$id"], data)


async def delete_document(ctx: ActionContext) -> str:
    listing = await ctx.databases.list_documents(*_ids(ctx))
    first = first_or_fail(listing, "documents", "No documents found to delete!")
    await ctx.databases.delete_document(*_ids(ctx), first["$id"])
    return first["$id"]


async def upsert_document(ctx: ActionContext) -> dict[str, Any]:
    data = {
        "Title": "Upserted Document",
        "Content": "This document was created/updated using upsert",
    }
    return await ctx.databases.upsert_document(*_ids(ctx), UPSERT_DOCUMENT_ID, data)


async def increment_attribute(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_document(ctx)
    return await ctx.databases.increment_document_attribute(*_ids(ctx), first["$id"], COUNTER_ATTRIBUTE, 1.0)


async def decrement_attribute(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_document(ctx)
    return await ctx.databases.decrement_document_attribute(*_ids(ctx), first["$id"], COUNTER_ATTRIBUTE, 1.0)


def _doc_line(prefix: str):
    def _fmt(doc: dict[str, Any]) -> list[str]:
        line = f"✅ {prefix}: {doc.get('$id')}"
        if COUNTER_ATTRIBUTE in doc:
            line += f" ({COUNTER_ATTRIBUTE} = {doc[COUNTER_ATTRIBUTE]})"
        return [line]
    return _fmt


def register(registry: ActionRegistry, ctx: ActionContext) -> None:
    add = partial(registry.register, section=SECTION)
    add("List Documents", partial(list_documents, ctx), fmt_list_documents)
    add("Create Document", partial(create_document, ctx), fmt_created_document)
    add("Get Document", partial(get_document, ctx), fmt_document)
    add("Update Document", partial(update_document, ctx), _doc_line("Document updated"))
    add("Delete Document", partial(delete_document, ctx), lambda doc_id: [f"✅ Document deleted: {doc_id}"])
    add("Upsert Document", partial(upsert_document, ctx), _doc_line("Document upserted"))
    add("Increment Attribute", partial(increment_attribute, ctx), _doc_line("Document attribute incremented"))
    add("Decrement Attribute", partial(decrement_attribute, ctx), _doc_line("Document attribute decremented"))
