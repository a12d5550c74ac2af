"""
Dispatcher: runs a registered action once and routes its outcome to the log.

`invoke` always resolves. Unknown labels, a session that is not ready, and
any exception raised by the operation are turned into exactly one log entry.
"""

from __future__ import annotations

import asyncio
import threading

from appwrite_playground.domains.playground.action_log import ActionLog, Severity
from appwrite_playground.domains.playground.errors import NotReady, PlaygroundError, UnknownAction
from appwrite_playground.domains.playground.registry import Action, ActionRegistry
from appwrite_playground.domains.playground.results import Failure, Result, Success, render
from appwrite_playground.domains.playground.session import Session
from appwrite_playground.utils.logger import get_logger

logger = get_logger()

STATUS_IDLE = "Idle"
STATUS_READY = "Ready"
STATUS_ERROR = "Error occurred"


class Dispatcher:
    def __init__(
        self,
        registry: ActionRegistry,
        session: Session,
        log: ActionLog,
        single_flight: bool = False,
    ) -> None:
        self._registry = registry
        self._session = session
        self._log = log
        self._single_flight = single_flight
        # Read by the UI thread while the loop thread adds and removes entries.
        self._inflight: dict[str, asyncio.Future] = {}
        self._inflight_lock = threading.Lock()
        self.status = STATUS_IDLE

    def set_status(self, message: str) -> None:
        self.status = message

    async def invoke(self, label: str) -> Result:
        """
        Run the action registered under `label`.

        Returns the Result that was logged; never raises for action failures.
        With single_flight enabled, a second invoke of a label that is still
        running awaits the running one instead of starting another.
        """
        action = self._registry.get(label)
        if action is None:
            return self._reject(UnknownAction(label), Severity.ERROR, label)
        if not self._session.is_ready:
            return self._reject(
                NotReady(f"Playground not initialized yet! ({label})"),
                Severity.WARNING,
                label,
            )

        if not self._single_flight:
            return await self._run(action)

        with self._inflight_lock:
            running = self._inflight.get(label)
        if running is not None:
            logger.info("'%s' already running; joining the in-flight call", label)
            return await asyncio.shield(running)
        task = asyncio.ensure_future(self._run(action))
        with self._inflight_lock:
            self._inflight[label] = task
        task.add_done_callback(lambda _t: self._forget(label))
        return await asyncio.shield(task)

    def in_flight(self) -> list[str]:
        """Snapshot of labels currently running; safe to call from any thread."""
        with self._inflight_lock:
            return list(self._inflight)

    def _forget(self, label: str) -> None:
        with self._inflight_lock:
            self._inflight.pop(label, None)

    def _reject(self, error: PlaygroundError, severity: Severity, label: str) -> Failure:
        result = Failure.from_exception(error)
        self._log.append(severity, render(result)[0], label=label)
        return result

    async def _run(self, action: Action) -> Result:
        self.set_status(f"Executing: {action.label}...")
        try:
            payload = await action.operation()
        except Exception as e:
            result = Failure.from_exception(e)
            logger.debug("Action '%s' raised", action.label, exc_info=True)
            self._log.append(Severity.ERROR, "\n".join(render(result)), label=action.label)
            self.set_status(STATUS_ERROR)
            return result

        success = Success(payload)
        self._log.append(
            Severity.INFO,
            "\n".join(render(success, action.formatter)),
            label=action.label,
        )
        self.set_status(STATUS_READY)
        return success
