"""
Session: the initialized bundle of remote service handles plus readiness state.

State machine: UNINITIALIZED -> INITIALIZING -> READY | FAILED. READY and FAILED
are terminal for the lifetime of the session.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable, Mapping

from appwrite_playground.domains.playground.errors import InitializationError, NotInitialized
from appwrite_playground.utils.config import PlaygroundConfig
from appwrite_playground.utils.logger import get_logger

logger = get_logger()


class ServiceKind(str, Enum):
    ACCOUNT = "account"
    DOCUMENTS = "documents"
    STORAGE = "storage"
    FUNCTIONS = "functions"
    TEAMS = "teams"
    LOCALE = "locale"
    REALTIME = "realtime"


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


# config -> (client, {kind: service handle})
ServiceFactory = Callable[[PlaygroundConfig], "tuple[Any, Mapping[ServiceKind, Any]]"]


def _missing_settings(config: PlaygroundConfig) -> list[str]:
    missing = []
    if not (config.endpoint or "").strip():
        missing.append("endpoint")
    if not (config.project_id or "").strip():
        missing.append("project id")
    return missing


class Session:
    """Holds the remote service handles behind one initialization gate."""

    def __init__(self, service_factory: ServiceFactory) -> None:
        self._factory = service_factory
        self._state = SessionState.UNINITIALIZED
        self._init_task: asyncio.Future | None = None
        self._client: Any = None
        self._services: dict[ServiceKind, Any] = {}
        self.config: PlaygroundConfig | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is SessionState.READY

    async def initialize(self, config: PlaygroundConfig) -> None:
        """
        One-time setup of every service handle.

        A call made while setup is in flight awaits the same work. Once the
        session is READY further calls return immediately; once FAILED they
        raise the first InitializationError again.

        Raises:
            InitializationError: Missing endpoint/project id, or the factory failed.
        """
        if self._init_task is None:
            self._state = SessionState.INITIALIZING
            self._init_task = asyncio.ensure_future(self._initialize(config))
        await asyncio.shield(self._init_task)

    async def _initialize(self, config: PlaygroundConfig) -> None:
        missing = _missing_settings(config)
        if missing:
            self._state = SessionState.FAILED
            raise InitializationError(f"Missing required configuration: {', '.join(missing)}")
        try:
            client, services = self._factory(config)
        except Exception as e:
            self._state = SessionState.FAILED
            logger.exception("Service construction failed")
            raise InitializationError(f"Could not create Appwrite services: {e}") from e

        absent = [kind.value for kind in ServiceKind if services.get(kind) is None]
        if absent:
            self._state = SessionState.FAILED
            raise InitializationError(f"Service factory returned no handle for: {', '.join(absent)}")

        self.config = config
        self._client = client
        self._services = {kind: services[kind] for kind in ServiceKind}
        self._state = SessionState.READY
        logger.info("Session ready for project %s at %s", config.project_id, config.endpoint)

    def service_for(self, kind: ServiceKind | str) -> Any:
        """
        Return the handle built during initialize.

        Raises:
            NotInitialized: Before initialize has completed successfully.
        """
        if not self.is_ready:
            raise NotInitialized(f"Session is {self._state.value}; cannot provide '{ServiceKind(kind).value}'")
        return self._services[ServiceKind(kind)]

    @property
    def client(self) -> Any:
        """The underlying REST client (ping, cookies, local session reset)."""
        if not self.is_ready:
            raise NotInitialized(f"Session is {self._state.value}; client unavailable")
        return self._client

    async def close(self) -> None:
        """Drop realtime subscriptions and release network resources."""
        realtime = self._services.get(ServiceKind.REALTIME)
        if realtime is not None:
            await realtime.close()
        if self._client is not None and hasattr(self._client, "close"):
            self._client.close()
