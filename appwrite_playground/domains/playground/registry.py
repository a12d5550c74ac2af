"""
Action registry: label -> action descriptor, filled once at startup.

Registration order is kept because the UI lays out sections and buttons in that
order; it has no effect on execution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator

from appwrite_playground.domains.playground.errors import DuplicateLabel, RegistryFrozen
from appwrite_playground.domains.playground.results import Formatter

Operation = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class Action:
    label: str
    operation: Operation
    formatter: Formatter | None = None
    section: str = ""


class ActionRegistry:
    def __init__(self) -> None:
        self._actions: dict[str, Action] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(
        self,
        label: str,
        operation: Operation,
        formatter: Formatter | None = None,
        section: str = "",
    ) -> Action:
        """
        Add an action.

        Raises:
            RegistryFrozen: After freeze() was called.
            DuplicateLabel: If label is taken; the first registration is kept.
        """
        if self._frozen:
            raise RegistryFrozen(f"Cannot register '{label}': registry is frozen")
        if label in self._actions:
            raise DuplicateLabel(label)
        action = Action(label=label, operation=operation, formatter=formatter, section=section)
        self._actions[label] = action
        return action

    def freeze(self) -> None:
        self._frozen = True

    def get(self, label: str) -> Action | None:
        return self._actions.get(label)

    def all(self) -> Iterator[Action]:
        """Lazily yield actions in registration order."""
        yield from self._actions.values()

    def labels(self) -> list[str]:
        return list(self._actions)

    def sections(self) -> dict[str, list[Action]]:
        """Group actions by section, both in registration order."""
        out: dict[str, list[Action]] = {}
        for action in self._actions.values():
            out.setdefault(action.section, []).append(action)
        return out

    def __contains__(self, label: object) -> bool:
        return label in self._actions

    def __len__(self) -> int:
        return len(self._actions)
