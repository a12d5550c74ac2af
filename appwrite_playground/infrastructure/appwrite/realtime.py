"""
Appwrite Realtime over a websocket (aiohttp).

One socket carries every subscription; the channel list is part of the
connection URL, so adding a subscription with new channels reopens the socket.
There is no automatic reconnect: a dropped socket stays down until the next
subscribe().
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable
from urllib.parse import urlencode

import aiohttp

from appwrite_playground.utils.logger import get_logger

logger = get_logger()

HEARTBEAT_SECONDS = 20


def _log_task_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Realtime task %s failed", task.get_name(), exc_info=exc)


@dataclass(frozen=True)
class RealtimeEvent:
    events: list[str] = field(default_factory=list)
    channels: list[str] = field(default_factory=list)
    timestamp: str = ""
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_message(cls, data: dict[str, Any]) -> "RealtimeEvent":
        payload = data.get("payload")
        return cls(
            events=list(data.get("events") or []),
            channels=list(data.get("channels") or []),
            timestamp=str(data.get("timestamp") or ""),
            payload=payload if isinstance(payload, dict) else {},
        )


EventCallback = Callable[[RealtimeEvent], None]


class RealtimeSubscription:
    """Handle returned by Realtime.subscribe(); close() stops delivery."""

    def __init__(self, realtime: "Realtime", channels: Iterable[str], callback: EventCallback) -> None:
        self._realtime = realtime
        self.channels = frozenset(channels)
        self.callback = callback
        self.closed = False

    def matches(self, channels: Iterable[str]) -> bool:
        return bool(self.channels.intersection(channels))

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._realtime._unsubscribe(self)


def realtime_url_for(endpoint: str) -> str:
    """https://host/v1 -> wss://host/v1 (http -> ws)."""
    if endpoint.startswith("https://"):
        return "wss://" + endpoint[len("https://"):]
    if endpoint.startswith("http://"):
        return "ws://" + endpoint[len("http://"):]
    return endpoint


class Realtime:
    def __init__(self, client: Any, endpoint: str | None = None) -> None:
        self._client = client
        self._endpoint = (endpoint or realtime_url_for(client.endpoint)).rstrip("/")
        self._subscriptions: list[RealtimeSubscription] = []
        self._http: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._listener: asyncio.Task | None = None
        self._heartbeat: asyncio.Task | None = None
        self._connected_channels: frozenset[str] = frozenset()

    @property
    def channels(self) -> set[str]:
        out: set[str] = set()
        for sub in self._subscriptions:
            out.update(sub.channels)
        return out

    @property
    def is_connected(self) -> bool:
        return self._ws is not None and not self._ws.closed

    def url(self, channels: Iterable[str] | None = None) -> str:
        query = [("project", self._client.project_id)]
        query.extend(("channels[]", c) for c in sorted(channels if channels is not None else self.channels))
        return f"{self._endpoint}/realtime?{urlencode(query)}"

    async def subscribe(self, channels: Iterable[str], callback: EventCallback) -> RealtimeSubscription:
        sub = RealtimeSubscription(self, channels, callback)
        self._subscriptions.append(sub)
        if not self.is_connected or not sub.channels.issubset(self._connected_channels):
            try:
                await self._connect()
            except Exception:
                self._unsubscribe(sub)
                raise
        return sub

    def _unsubscribe(self, sub: RealtimeSubscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    async def _connect(self) -> None:
        await self._disconnect()
        channels = frozenset(self.channels)
        if not channels:
            return
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession()
        url = self.url(channels)
        logger.info("Opening realtime socket for %d channel(s)", len(channels))
        self._ws = await self._http.ws_connect(url, headers={"Origin": self._client.endpoint})
        self._connected_channels = channels
        self._listener = asyncio.create_task(self._listen(self._ws))
        self._listener.add_done_callback(_log_task_failure)
        self._heartbeat = asyncio.create_task(self._ping_forever(self._ws))
        self._heartbeat.add_done_callback(_log_task_failure)

    async def _listen(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    try:
                        message = json.loads(msg.data)
                    except ValueError:
                        logger.warning("Ignoring non-JSON realtime frame")
                        continue
                    if not isinstance(message, dict):
                        logger.warning("Ignoring realtime frame that is not an object")
                        continue
                    try:
                        await self._handle(message)
                    except Exception:
                        logger.exception("Failed to handle realtime %s frame", message.get("type"))
                elif msg.type in (aiohttp.WSMsgType.ERROR, aiohttp.WSMsgType.CLOSED):
                    break
        finally:
            if not ws.closed:
                await ws.close()
            logger.info("Realtime socket closed")

    async def _ping_forever(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        while not ws.closed:
            await asyncio.sleep(HEARTBEAT_SECONDS)
            if ws.closed:
                break
            await ws.send_json({"type": "ping"})

    async def _handle(self, message: dict[str, Any]) -> None:
        kind = message.get("type")
        data = message.get("data") or {}
        if kind == "connected":
            if not data.get("user"):
                await self._authenticate()
        elif kind == "event":
            self.dispatch(RealtimeEvent.from_message(data))
        elif kind == "error":
            logger.warning("Realtime error %s: %s", data.get("code"), data.get("message"))

    async def _authenticate(self) -> None:
        secret = self._client.session_secret()
        if secret and self._ws is not None and not self._ws.closed:
            await self._ws.send_json({"type": "authentication", "data": {"session": secret}})

    def dispatch(self, event: RealtimeEvent) -> int:
        """Deliver an event to every matching subscription; returns how many got it."""
        delivered = 0
        for sub in list(self._subscriptions):
            if not sub.matches(event.channels):
                continue
            try:
                sub.callback(event)
                delivered += 1
            except Exception:
                logger.exception("Realtime callback failed for %s", event.events[:1])
        return delivered

    async def _disconnect(self) -> None:
        for task in (self._heartbeat, self._listener):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._heartbeat = self._listener = None
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        self._ws = None
        self._connected_channels = frozenset()

    async def close(self) -> None:
        """Cancel every subscription and close the socket and HTTP session."""
        for sub in list(self._subscriptions):
            sub.close()
        await self._disconnect()
        if self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None
