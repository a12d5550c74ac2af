"""
Tests for ActionRegistry: duplicates, ordering, freezing, sections.
"""

from __future__ import annotations

import types

import pytest

from appwrite_playground.domains.playground.errors import DuplicateLabel, RegistryFrozen
from appwrite_playground.domains.playground.registry import ActionRegistry


async def _first() -> str:
    return "first"


async def _second() -> str:
    return "second"


def test_duplicate_label_keeps_first_registration() -> None:
    """Registering a taken label raises DuplicateLabel and keeps the first registration."""
    registry = ActionRegistry()
    registry.register("Login", _first)

    with pytest.raises(DuplicateLabel):
        registry.register("Login", _second)

    assert registry.get("Login").operation is _first
    assert len(registry) == 1


def test_all_is_lazy_and_ordered() -> None:
    """all() is a generator yielding actions in registration order."""
    registry = ActionRegistry()
    for label in ("B", "A", "C"):
        registry.register(label, _first)

    it = registry.all()
    assert isinstance(it, types.GeneratorType)
    assert [a.label for a in it] == ["B", "A", "C"]
    assert registry.labels() == ["B", "A", "C"]


def test_get_unknown_returns_none() -> None:
    """get() of an unregistered label is None; `in` agrees."""
    registry = ActionRegistry()
    registry.register("Ping Server", _first)
    assert registry.get("Nope") is None
    assert "Nope" not in registry
    assert "Ping Server" in registry


def test_register_after_freeze_raises() -> None:
    """Once frozen, the registry rejects new actions."""
    registry = ActionRegistry()
    registry.register("A", _first)
    registry.freeze()

    assert registry.frozen
    with pytest.raises(RegistryFrozen):
        registry.register("B", _second)
    assert registry.labels() == ["A"]


def test_sections_group_in_order() -> None:
    """sections() groups by section, keeping first-seen section order."""
    registry = ActionRegistry()
    registry.register("Login", _first, section="auth")
    registry.register("List Files", _first, section="storage")
    registry.register("Logout", _first, section="auth")

    sections = registry.sections()
    assert list(sections) == ["auth", "storage"]
    assert [a.label for a in sections["auth"]] == ["Login", "Logout"]


def test_registered_action_is_immutable() -> None:
    """Action descriptors are frozen dataclasses."""
    registry = ActionRegistry()
    action = registry.register("A", _first)
    with pytest.raises(Exception):
        action.label = "B"  # type: ignore[misc]
