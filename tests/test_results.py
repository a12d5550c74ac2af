"""
Tests for the result renderer.
"""

from __future__ import annotations

from appwrite_playground.domains.playground.errors import NotReady, RemoteOperationFailure
from appwrite_playground.domains.playground.results import Failure, Success, render


def test_failure_renders_kind_and_message() -> None:
    """A Failure is one `kind: message` line."""
    assert render(Failure("UnknownAction", "Login")) == ["UnknownAction: Login"]


def test_success_without_formatter_uses_default_line() -> None:
    """No formatter means a generic success line, never a payload dump."""
    assert render(Success({"password": "hunter2"})) == ["✅ Done"]


def test_success_with_formatter() -> None:
    """The formatter's lines are returned as strings."""
    lines = render(Success({"total": 3}), lambda p: [f"Found {p['total']}", 42])
    assert lines == ["Found 3", "42"]


def test_formatter_exception_yields_fallback() -> None:
    """A formatter that raises does not escape render()."""
    lines = render(Success({}), lambda p: [p["missing"]])
    assert lines == ["✅ Done (summary unavailable: KeyError)"]


def test_empty_formatter_output_falls_back() -> None:
    """A formatter that returns nothing still yields one line."""
    assert render(Success(None), lambda p: []) == ["✅ Done"]


def test_failure_from_playground_error_uses_class_name() -> None:
    """Playground errors keep their own kind."""
    failure = Failure.from_exception(NotReady("Playground not initialized yet!"))
    assert failure.kind == "NotReady"
    assert failure.message == "Playground not initialized yet!"


def test_failure_from_remote_error_includes_code() -> None:
    """Remote failures carry their HTTP/API code into the message."""
    failure = Failure.from_exception(RemoteOperationFailure("User not found", code=404, type="user_not_found"))
    assert failure.kind == "RemoteOperationFailure"
    assert failure.message == "User not found (code 404)"


def test_failure_from_plain_exception() -> None:
    """Other exceptions use their class name; an empty message falls back to repr."""
    assert Failure.from_exception(ValueError("bad")) == Failure("ValueError", "bad")
    assert Failure.from_exception(RuntimeError()).message == "RuntimeError()"
