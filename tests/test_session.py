"""
Tests for Session: idempotent initialization, readiness gate, close().
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from appwrite_playground.domains.playground.errors import InitializationError, NotInitialized
from appwrite_playground.domains.playground.session import ServiceKind, Session, SessionState
from appwrite_playground.utils.config import PlaygroundConfig

CONFIG = PlaygroundConfig(endpoint="https://x", project_id="p")


def fake_factory(client: object | None = None) -> MagicMock:
    """Factory returning a MagicMock client and one handle per service kind."""
    client = client if client is not None else MagicMock()
    services = {kind: MagicMock(name=kind.value) for kind in ServiceKind}
    services[ServiceKind.REALTIME] = MagicMock(close=AsyncMock())
    return MagicMock(return_value=(client, services))


@pytest.mark.asyncio
async def test_initialize_reaches_ready() -> None:
    """A complete config brings the session to READY with every handle available."""
    session = Session(fake_factory())
    assert session.state is SessionState.UNINITIALIZED

    await session.initialize(CONFIG)

    assert session.state is SessionState.READY
    assert session.is_ready
    for kind in ServiceKind:
        assert session.service_for(kind) is not None
    assert session.config is CONFIG


@pytest.mark.asyncio
async def test_concurrent_initialize_runs_factory_once() -> None:
    """Concurrent initialize() calls share one initialization."""
    factory = fake_factory()
    session = Session(factory)

    await asyncio.gather(*(session.initialize(CONFIG) for _ in range(5)))
    await session.initialize(CONFIG)

    factory.assert_called_once_with(CONFIG)
    assert session.state is SessionState.READY


@pytest.mark.asyncio
async def test_missing_endpoint_fails() -> None:
    """No endpoint: InitializationError and FAILED; the factory is never called."""
    factory = fake_factory()
    session = Session(factory)

    with pytest.raises(InitializationError, match="endpoint"):
        await session.initialize(PlaygroundConfig(endpoint="", project_id="p"))

    assert session.state is SessionState.FAILED
    factory.assert_not_called()


@pytest.mark.asyncio
async def test_failed_state_is_terminal() -> None:
    """After a failure, later initialize() calls re-raise instead of retrying."""
    factory = fake_factory()
    session = Session(factory)
    with pytest.raises(InitializationError):
        await session.initialize(PlaygroundConfig(endpoint="https://x", project_id=" "))

    with pytest.raises(InitializationError):
        await session.initialize(CONFIG)
    assert session.state is SessionState.FAILED
    factory.assert_not_called()


@pytest.mark.asyncio
async def test_factory_error_is_wrapped() -> None:
    """An exception from the service factory surfaces as InitializationError."""
    session = Session(MagicMock(side_effect=RuntimeError("bad TLS")))
    with pytest.raises(InitializationError, match="bad TLS"):
        await session.initialize(CONFIG)
    assert session.state is SessionState.FAILED


@pytest.mark.asyncio
async def test_factory_missing_handle_fails() -> None:
    """Every service kind must be provided."""
    services = {ServiceKind.ACCOUNT: MagicMock()}
    session = Session(MagicMock(return_value=(MagicMock(), services)))
    with pytest.raises(InitializationError, match="documents"):
        await session.initialize(CONFIG)
    assert session.state is SessionState.FAILED


def test_service_for_before_initialize_raises() -> None:
    """Handles and the client are unavailable until READY."""
    session = Session(fake_factory())
    with pytest.raises(NotInitialized):
        session.service_for(ServiceKind.ACCOUNT)
    with pytest.raises(NotInitialized):
        _ = session.client


@pytest.mark.asyncio
async def test_close_releases_realtime_and_client() -> None:
    """close() awaits realtime.close() and closes the REST client."""
    client = MagicMock()
    factory = fake_factory(client)
    session = Session(factory)
    await session.initialize(CONFIG)
    realtime = session.service_for(ServiceKind.REALTIME)

    await session.close()

    realtime.close.assert_awaited_once()
    client.close.assert_called_once()


@pytest.mark.asyncio
async def test_close_before_initialize_is_noop() -> None:
    """Closing an uninitialized session does nothing."""
    await Session(fake_factory()).close()
