"""Error taxonomy for the playground core."""

from __future__ import annotations


class PlaygroundError(Exception):
    """Base class for every error the playground raises on purpose."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class DuplicateLabel(PlaygroundError):
    """An action with this label is already registered."""


class RegistryFrozen(PlaygroundError):
    """Registration attempted after startup registration finished."""


class UnknownAction(PlaygroundError):
    """No action is registered under the requested label."""


class NotReady(PlaygroundError):
    """An action was triggered before the session reached READY."""


class NotInitialized(PlaygroundError):
    """A service handle was requested before initialization completed."""


class InitializationError(PlaygroundError):
    """Session setup failed (missing configuration or client construction)."""


class PreconditionFailed(PlaygroundError):
    """An action needs data that does not exist yet (e.g. no documents to read)."""


class RemoteOperationFailure(PlaygroundError):
    """The remote service rejected a call or could not be reached."""

    def __init__(self, message: str, code: int | None = None, type: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.type = type
