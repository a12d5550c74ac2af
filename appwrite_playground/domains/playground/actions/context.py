"""Shared state handed to every playground action."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from appwrite_playground.domains.playground.action_log import ActionLog
from appwrite_playground.domains.playground.session import ServiceKind, Session
from appwrite_playground.utils.config import PlaygroundConfig

# Redirect target for verification/recovery/membership emails.
REDIRECT_URL = "https://appwrite.io"
OAUTH_FAILURE_URL = "http://localhost:8501"


def unique_id() -> str:
    """Client-generated id in the same shape as Appwrite's ID.unique()."""
    return f"{int(time.time() * 1000):x}{secrets.token_hex(4)}"[:20]


@dataclass
class PlaygroundInputs:
    """Values typed into the UI fields; read when an action runs, not when it is registered."""

    email: str = "playground@example.com"
    password: str = "playground123"
    name: str = "Playground User"


@dataclass
class PlaygroundState:
    """Ids produced by one action and consumed by later ones."""

    team_id: str | None = None
    last_oauth_url: str | None = None
    # Last listing pages shown in the side panels.
    documents: list[dict[str, Any]] = field(default_factory=list)
    files: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ActionContext:
    session: Session
    config: PlaygroundConfig
    log: ActionLog
    feed: ActionLog
    inputs: PlaygroundInputs = field(default_factory=PlaygroundInputs)
    state: PlaygroundState = field(default_factory=PlaygroundState)
    set_status: Callable[[str], None] = lambda _message: None

    def service(self, kind: ServiceKind) -> Any:
        return self.session.service_for(kind)

    @property
    def account(self) -> Any:
        return self.service(ServiceKind.ACCOUNT)

    @property
    def databases(self) -> Any:
        return self.service(ServiceKind.DOCUMENTS)

    @property
    def storage(self) -> Any:
        return self.service(ServiceKind.STORAGE)

    @property
    def functions(self) -> Any:
        return self.service(ServiceKind.FUNCTIONS)

    @property
    def teams(self) -> Any:
        return self.service(ServiceKind.TEAMS)

    @property
    def locale(self) -> Any:
        return self.service(ServiceKind.LOCALE)

    @property
    def realtime(self) -> Any:
        return self.service(ServiceKind.REALTIME)
