"""
Tests for Dispatcher.invoke: readiness gate, one log entry per invocation,
failure capture, concurrency and optional single-flight.
"""

from __future__ import annotations

import asyncio
import threading
from unittest.mock import AsyncMock, MagicMock

import pytest

from appwrite_playground.domains.playground.action_log import ActionLog, Severity
from appwrite_playground.domains.playground.dispatcher import STATUS_ERROR, STATUS_READY, Dispatcher
from appwrite_playground.domains.playground.errors import (
    InitializationError,
    PreconditionFailed,
    RemoteOperationFailure,
)
from appwrite_playground.domains.playground.registry import ActionRegistry
from appwrite_playground.domains.playground.results import Failure, Success
from appwrite_playground.domains.playground.session import ServiceKind, Session, SessionState
from appwrite_playground.utils.config import PlaygroundConfig

CONFIG = PlaygroundConfig(endpoint="https://x", project_id="p")


def _factory(config: PlaygroundConfig):
    return MagicMock(), {kind: MagicMock() for kind in ServiceKind}


async def ready_session() -> Session:
    session = Session(_factory)
    await session.initialize(CONFIG)
    return session


def make(session: Session, single_flight: bool = False) -> tuple[ActionRegistry, ActionLog, Dispatcher]:
    registry = ActionRegistry()
    log = ActionLog(mirror=False)
    return registry, log, Dispatcher(registry, session, log, single_flight=single_flight)


@pytest.mark.asyncio
async def test_not_ready_never_runs_operation() -> None:
    """Before READY the operation is not awaited and one NotReady warning is logged."""
    registry, log, dispatcher = make(Session(_factory))
    op = AsyncMock(return_value={"ok": True})
    registry.register("Login", op)

    result = await dispatcher.invoke("Login")

    op.assert_not_called()
    assert isinstance(result, Failure)
    assert result.kind == "NotReady"
    entries = log.entries()
    assert len(entries) == 1
    assert entries[0].severity is Severity.WARNING
    assert entries[0].text.startswith("NotReady: ")


@pytest.mark.asyncio
async def test_unknown_action_logs_exactly_one_error() -> None:
    """An unregistered label adds exactly one `UnknownAction: <label>` entry."""
    _registry, log, dispatcher = make(await ready_session())

    result = await dispatcher.invoke("Nope")

    assert result == Failure("UnknownAction", "Nope")
    assert [(e.severity, e.text) for e in log.entries()] == [(Severity.ERROR, "UnknownAction: Nope")]


@pytest.mark.asyncio
async def test_success_logs_one_info_entry() -> None:
    """A successful action is formatted by its formatter into one info entry."""
    registry, log, dispatcher = make(await ready_session())
    op = AsyncMock(return_value={"total": 2})
    registry.register("List Files", op, lambda p: [f"✅ Found {p['total']} files", "  File: a.txt"])

    result = await dispatcher.invoke("List Files")

    op.assert_awaited_once()
    assert result == Success({"total": 2})
    entries = log.entries()
    assert len(entries) == 1
    assert entries[0].severity is Severity.INFO
    assert entries[0].text == "✅ Found 2 files\n  File: a.txt"
    assert entries[0].label == "List Files"
    assert dispatcher.status == STATUS_READY


@pytest.mark.asyncio
async def test_failure_logs_one_error_entry_and_does_not_raise() -> None:
    """A raising operation becomes one error entry and status `Error occurred`."""
    registry, log, dispatcher = make(await ready_session())
    registry.register("Get User Info", AsyncMock(side_effect=RemoteOperationFailure("Unauthorized", code=401)))

    result = await dispatcher.invoke("Get User Info")

    assert result == Failure("RemoteOperationFailure", "Unauthorized (code 401)")
    assert [(e.severity, e.text) for e in log.entries()] == [
        (Severity.ERROR, "RemoteOperationFailure: Unauthorized (code 401)")
    ]
    assert dispatcher.status == STATUS_ERROR


@pytest.mark.asyncio
async def test_precondition_failure_message() -> None:
    """Missing prerequisites show their own message."""
    registry, log, dispatcher = make(await ready_session())
    registry.register("Get Document", AsyncMock(side_effect=PreconditionFailed("No documents found. Create one first!")))

    await dispatcher.invoke("Get Document")

    assert log.entries()[0].text == "PreconditionFailed: No documents found. Create one first!"


@pytest.mark.asyncio
async def test_status_shows_executing_while_running() -> None:
    """The status line names the running action."""
    registry, _log, dispatcher = make(await ready_session())
    seen: list[str] = []

    async def op() -> None:
        seen.append(dispatcher.status)

    registry.register("Ping Server", op)
    await dispatcher.invoke("Ping Server")
    assert seen == ["Executing: Ping Server..."]


@pytest.mark.asyncio
async def test_distinct_labels_run_concurrently() -> None:
    """Two actions in flight at once both complete and both log."""
    registry, log, dispatcher = make(await ready_session())
    both_started = asyncio.Event()
    started: list[str] = []

    async def op(name: str) -> str:
        started.append(name)
        if len(started) == 2:
            both_started.set()
        await asyncio.wait_for(both_started.wait(), timeout=1)
        return name

    registry.register("A", lambda: op("A"), lambda p: [f"done {p}"])
    registry.register("B", lambda: op("B"), lambda p: [f"done {p}"])

    await asyncio.gather(dispatcher.invoke("A"), dispatcher.invoke("B"))

    assert sorted(e.text for e in log.entries()) == ["done A", "done B"]


@pytest.mark.asyncio
async def test_duplicate_invocations_run_twice_by_default() -> None:
    """Without single-flight, two invocations of one label both execute."""
    registry, log, dispatcher = make(await ready_session())
    op = AsyncMock(return_value=None)
    registry.register("Create Document", op)

    await asyncio.gather(dispatcher.invoke("Create Document"), dispatcher.invoke("Create Document"))

    assert op.await_count == 2
    assert len(log) == 2


@pytest.mark.asyncio
async def test_single_flight_coalesces_duplicate() -> None:
    """With single-flight, a duplicate in-flight invocation joins the running one."""
    registry, log, dispatcher = make(await ready_session(), single_flight=True)
    release = asyncio.Event()
    calls = 0

    async def op() -> str:
        nonlocal calls
        calls += 1
        await release.wait()
        return "ok"

    registry.register("Create Document", op)

    first = asyncio.ensure_future(dispatcher.invoke("Create Document"))
    await asyncio.sleep(0)
    assert dispatcher.in_flight() == ["Create Document"]
    second = asyncio.ensure_future(dispatcher.invoke("Create Document"))
    await asyncio.sleep(0)
    release.set()
    r1, r2 = await asyncio.gather(first, second)

    assert calls == 1
    assert r1 == r2 == Success("ok")
    assert len(log) == 1
    assert dispatcher.in_flight() == []


@pytest.mark.asyncio
async def test_end_to_end_initialize_then_unknown_login() -> None:
    """initialize(endpoint, project) reaches READY; invoking an unregistered Login logs UnknownAction."""
    session = Session(_factory)
    await session.initialize(PlaygroundConfig(endpoint="https://x", project_id="p"))
    assert session.is_ready

    _registry, log, dispatcher = make(session)
    await dispatcher.invoke("Login")

    assert [e.text for e in log.entries()] == ["UnknownAction: Login"]


@pytest.mark.asyncio
async def test_failed_initialize_then_invoke_is_not_ready() -> None:
    """After a failed initialize, a registered action is refused with one NotReady warning."""
    session = Session(_factory)
    with pytest.raises(InitializationError):
        await session.initialize(PlaygroundConfig(endpoint="", project_id="p"))
    assert session.state is SessionState.FAILED

    registry, log, dispatcher = make(session)
    op = AsyncMock(return_value=None)
    registry.register("Login", op)

    result = await dispatcher.invoke("Login")

    op.assert_not_awaited()
    assert result.kind == "NotReady"
    assert [e.severity for e in log.entries()] == [Severity.WARNING]


@pytest.mark.asyncio
async def test_in_flight_returns_a_copy() -> None:
    """Mutating the returned list does not touch the dispatcher's bookkeeping."""
    registry, _log, dispatcher = make(await ready_session(), single_flight=True)
    release = asyncio.Event()

    async def op() -> None:
        await release.wait()

    registry.register("Upload File", op)
    running = asyncio.ensure_future(dispatcher.invoke("Upload File"))
    await asyncio.sleep(0)

    snapshot = dispatcher.in_flight()
    snapshot.clear()
    assert dispatcher.in_flight() == ["Upload File"]

    release.set()
    await running
    assert dispatcher.in_flight() == []


@pytest.mark.asyncio
async def test_in_flight_readable_from_another_thread() -> None:
    """A UI-side thread can poll in_flight() while the loop starts and finishes actions."""
    registry, log, dispatcher = make(await ready_session(), single_flight=True)
    labels = [f"Action {i}" for i in range(40)]
    for label in labels:
        registry.register(label, AsyncMock(return_value=None))
    errors: list[Exception] = []
    stop = threading.Event()

    def poll() -> None:
        while not stop.is_set():
            try:
                dispatcher.in_flight()
            except RuntimeError as e:
                errors.append(e)
                return

    reader = threading.Thread(target=poll)
    reader.start()
    try:
        for _ in range(10):
            await asyncio.gather(*(dispatcher.invoke(label) for label in labels))
    finally:
        stop.set()
        reader.join(timeout=5)

    assert errors == []
    assert len(log) == 400
    assert dispatcher.in_flight() == []
