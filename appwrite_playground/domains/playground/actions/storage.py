"""Storage (bucket file) actions."""

from __future__ import annotations

from datetime import datetime
from functools import partial
from typing import Any

from appwrite_playground.domains.playground.actions.context import ActionContext, unique_id
from appwrite_playground.domains.playground.actions.formatting import first_or_fail, take, total, truncate
from appwrite_playground.domains.playground.registry import ActionRegistry

SECTION = "📁 STORAGE"

NO_FILES = "No files found. Upload one first!"
PREVIEW_SIZE = 200


async def _first_file(ctx: ActionContext, message: str = NO_FILES) -> dict[str, Any]:
    listing = await ctx.storage.list_files(ctx.config.bucket_id)
    return first_or_fail(listing, "files", message)


async def list_files(ctx: ActionContext) -> dict[str, Any]:
    listing = await ctx.storage.list_files(ctx.config.bucket_id)
    ctx.state.files = take(listing.get("files"), 10)
    return listing


def fmt_list_files(listing: dict[str, Any]) -> list[str]:
    lines = [f"✅ Found {total(listing, 'files')} files"]
    for f in take(listing.get("files"), 5):
        lines.append(f"  File: {f.get('name')} ({f.get('sizeOriginal')} bytes)")
    return lines


async def upload_text_file(ctx: ActionContext) -> dict[str, Any]:
    now = datetime.now()
    content = f"This is a test file created from the Appwrite playground at {now:%Y-%m-%d %H:%M:%S}"

    def on_progress(progress: dict[str, Any]) -> None:
        ctx.set_status(f"📤 Upload progress: {progress.get('progress', 0):.1f}%")

    return await ctx.storage.create_file(
        ctx.config.bucket_id,
        unique_id(),
        f"playground_{now:%Y%m%d_%H%M%S}.txt",
        content.encode("utf-8"),
        "text/plain",
        on_progress=on_progress,
    )


def fmt_uploaded(f: dict[str, Any]) -> list[str]:
    return [f"✅ File uploaded: {f.get('name')} ({f.get('sizeOriginal')} bytes)"]


async def get_file_info(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_file(ctx)
    return await ctx.storage.get_file(ctx.config.bucket_id, first["$id"])


def fmt_file_info(f: dict[str, Any]) -> list[str]:
    return [
        f"✅ File info for: {f.get('name')}",
        f"  Size: {f.get('sizeOriginal')} bytes",
        f"  MIME Type: {f.get('mimeType')}",
        f"  Created: {f.get('$createdAt')}",
        f"  Signature: {f.get('signature')}",
    ]


async def update_file(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_file(ctx)
    return await ctx.storage.update_file(ctx.config.bucket_id, first["$id"], name=f"updated_{first.get('name')}")


async def download_file(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_file(ctx)
    data = await ctx.storage.get_file_download(ctx.config.bucket_id, first["$id"])
    return {"file": first, "data": data}


def fmt_download(out: dict[str, Any]) -> list[str]:
    f, data = out["file"], out["data"] or b""
    lines = [f"✅ File downloaded: {f.get('name')}", f"  Downloaded {len(data)} bytes"]
    if str(f.get("mimeType") or "").startswith("text/"):
        text = data.decode("utf-8", errors="replace")
        lines.append(f"  Content: {truncate(text)}")
    return lines


async def get_file_preview(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_file(ctx)
    preview = await ctx.storage.get_file_preview(
        ctx.config.bucket_id, first["$id"], width=PREVIEW_SIZE, height=PREVIEW_SIZE
    )
    return {"file": first, "data": preview}


def fmt_preview(out: dict[str, Any]) -> list[str]:
    return [
        f"✅ File preview generated: {out['file'].get('name')}",
        f"  Preview size: {len(out['data'] or b'')} bytes",
    ]


async def delete_file(ctx: ActionContext) -> dict[str, Any]:
    first = await _first_file(ctx, "No files found to delete!")
    await ctx.storage.delete_file(ctx.config.bucket_id, first["$id"])
    return first


def register(registry: ActionRegistry, ctx: ActionContext) -> None:
    add = partial(registry.register, section=SECTION)
    add("List Files", partial(list_files, ctx), fmt_list_files)
    add("Upload File (Text)", partial(upload_text_file, ctx), fmt_uploaded)
    add("Get File Info", partial(get_file_info, ctx), fmt_file_info)
    add("Update File", partial(update_file, ctx), lambda f: [f"✅ File updated: {f.get('name')}"])
    add("Download File", partial(download_file, ctx), fmt_download)
    add("Get File Preview", partial(get_file_preview, ctx), fmt_preview)
    add("Delete File", partial(delete_file, ctx), lambda f: [f"✅ File deleted: {f.get('name')}"])
