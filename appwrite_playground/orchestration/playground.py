"""
Playground runtime: owns the event loop and wires session, actions and logs.

Streamlit reruns the script on every interaction, so nothing async can live in
the script itself. The Playground keeps one asyncio loop on a daemon thread;
the UI submits work with trigger() and reads the logs and status between reruns.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Future
from typing import Any, Callable

from appwrite_playground.domains.playground.action_log import ActionLog
from appwrite_playground.domains.playground.actions.catalog import build_registry
from appwrite_playground.domains.playground.actions.context import ActionContext, PlaygroundInputs, PlaygroundState
from appwrite_playground.domains.playground.actions.realtime import subscribe_events
from appwrite_playground.domains.playground.dispatcher import Dispatcher
from appwrite_playground.domains.playground.errors import InitializationError
from appwrite_playground.domains.playground.session import Session
from appwrite_playground.infrastructure.appwrite.services import build_services
from appwrite_playground.utils.config import PlaygroundConfig
from appwrite_playground.utils.logger import get_logger

logger = get_logger()

FEED_CAP = 20

STATUS_INITIALIZING = "Initializing Appwrite Playground..."
STATUS_FAILED = "Failed to initialize playground"
STATUS_READY = "Ready! Click buttons to test Appwrite features."


def welcome_lines(config: PlaygroundConfig, action_count: int) -> list[str]:
    return [
        "🚀 Appwrite Playground Started!",
        f"📡 Endpoint: {config.endpoint}",
        f"🆔 Project: {config.project_id}",
        f"🧰 {action_count} actions available",
        "👆 Click any button to test Appwrite features",
        "📝 Results will appear here",
    ]


class Playground:
    def __init__(
        self,
        config: PlaygroundConfig,
        service_factory: Callable[[PlaygroundConfig], tuple[Any, dict]] = build_services,
    ) -> None:
        self.config = config
        self.log = ActionLog(max_entries=config.log_cap)
        self.feed = ActionLog(max_entries=FEED_CAP, mirror=False)
        self.session = Session(service_factory)
        self.inputs = PlaygroundInputs()
        self.state = PlaygroundState()
        self.context = ActionContext(
            session=self.session,
            config=config,
            log=self.log,
            feed=self.feed,
            inputs=self.inputs,
            state=self.state,
            set_status=self._set_status,
        )
        self.registry = build_registry(self.context)
        self.dispatcher = Dispatcher(self.registry, self.session, self.log, single_flight=config.single_flight)
        self.subscription: Any = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @property
    def status(self) -> str:
        return self.dispatcher.status

    def _set_status(self, message: str) -> None:
        self.dispatcher.set_status(message)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> Future:
        """Start the loop thread and schedule bootstrap(); returns its future."""
        if self.running:
            raise RuntimeError("Playground already started")
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name="playground-loop", daemon=True)
        self._thread.start()
        return asyncio.run_coroutine_threadsafe(self.bootstrap(), self._loop)

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    async def bootstrap(self) -> bool:
        """
        Initialize the session, ping, subscribe to realtime, greet.

        Returns False when initialization failed; the failure is logged and
        every later action is rejected as not ready.
        """
        self._set_status(STATUS_INITIALIZING)
        try:
            await self.session.initialize(self.config)
        except InitializationError as e:
            self.log.error(f"❌ Initialization failed: {e}")
            self._set_status(STATUS_FAILED)
            return False

        self._set_status(STATUS_READY)
        await self.dispatcher.invoke("Ping Server")
        await self._setup_realtime()
        for line in welcome_lines(self.config, len(self.registry)):
            self.log.info(line)
        # invoke() above leaves its own status behind
        self._set_status(STATUS_READY)
        return True

    async def _setup_realtime(self) -> None:
        try:
            self.subscription = await subscribe_events(self.context)
        except Exception as e:
            logger.warning("Realtime subscription failed: %s", e)
            self.log.warning(f"⚠️ Realtime setup failed: {e}")
            return
        self.log.info(f"🔄 Realtime subscribed to {len(self.subscription.channels)} channels")

    def trigger(self, label: str) -> Future:
        """Submit invoke(label) to the loop without waiting for it."""
        if self._loop is None or not self.running:
            raise RuntimeError("Playground not started")
        return asyncio.run_coroutine_threadsafe(self.dispatcher.invoke(label), self._loop)

    def shutdown(self, timeout: float = 5.0) -> None:
        """Close the session on the loop, then stop the loop thread."""
        if self._loop is None or not self.running:
            return
        try:
            asyncio.run_coroutine_threadsafe(self.session.close(), self._loop).result(timeout)
        except Exception:
            logger.exception("Error while closing the playground session")
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        if not self._thread.is_alive():
            self._loop.close()
        self._loop = None
        self._thread = None
