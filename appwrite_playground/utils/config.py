"""Playground settings from the environment and `.env` (python-dotenv).

Only `load_config()` touches the process environment; everything else reads
through the accessors below, and `load_playground_config()` bundles them into
the frozen PlaygroundConfig handed to the session.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
import os

# Resource ids of the sample project the playground was built against.
DEFAULT_DATABASE_ID = "6888d7dd001f35bf501b"
DEFAULT_COLLECTION_ID = "6895028d001b7e9d541d"
DEFAULT_BUCKET_ID = "689502a5003ae7e65d9a"
DEFAULT_FUNCTION_ID = "68950311001d6d4f6b24"

_TRUTHY = ("1", "true", "yes", "on")


def _project_root() -> Path:
    """Resolve project root (the directory holding app.py)."""
    return Path(__file__).resolve().parent.parent.parent


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Uses override=True to ensure .env values take precedence over existing env vars.
    """
    root = _project_root()
    env_path = root / ".env"
    load_dotenv(env_path, override=True)


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_int(key: str, default: int) -> int:
    """Get optional env var as int; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_optional_bool(key: str, default: bool = False) -> bool:
    """Get optional env var as bool (1/true/yes/on); return default if missing."""
    load_config()
    raw = os.getenv(key, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


@dataclass(frozen=True)
class PlaygroundConfig:
    """Everything the session needs to reach an Appwrite project.

    Endpoint and project id may be empty here; the session rejects them at
    initialization time so that a bad `.env` shows up in the UI as a failed
    start rather than an import error.
    """

    endpoint: str = ""
    project_id: str = ""
    dev_key: str = ""
    realtime_endpoint: str = ""
    self_signed: bool = False
    database_id: str = DEFAULT_DATABASE_ID
    collection_id: str = DEFAULT_COLLECTION_ID
    bucket_id: str = DEFAULT_BUCKET_ID
    function_id: str = DEFAULT_FUNCTION_ID
    log_cap: int = 500
    single_flight: bool = False
    http_timeout: int = 30


# --- Public config accessors ---

def appwrite_endpoint() -> str:
    """Appwrite API endpoint including the version path, e.g. https://cloud.appwrite.io/v1."""
    return get_optional("APPWRITE_ENDPOINT", "").rstrip("/")


def appwrite_project_id() -> str:
    """Appwrite project id."""
    return get_optional("APPWRITE_PROJECT_ID", "")


def appwrite_dev_key() -> str:
    """Optional: dev key that lifts rate limits during development."""
    return get_optional("APPWRITE_DEV_KEY", "")


def appwrite_realtime_endpoint() -> str:
    """Optional: realtime websocket endpoint. Derived from APPWRITE_ENDPOINT when empty."""
    return get_optional("APPWRITE_REALTIME_ENDPOINT", "").rstrip("/")


def appwrite_self_signed() -> bool:
    """Optional: accept self-signed TLS certificates (local Appwrite instances)."""
    return get_optional_bool("APPWRITE_SELF_SIGNED", False)


def playground_log_cap() -> int:
    """Optional: max entries kept in the output log. Default 500."""
    return get_optional_int("PLAYGROUND_LOG_CAP", 500)


def playground_http_timeout() -> int:
    """Optional: HTTP timeout in seconds for REST calls. Default 30."""
    return get_optional_int("PLAYGROUND_HTTP_TIMEOUT", 30)


def load_playground_config() -> PlaygroundConfig:
    """Build a PlaygroundConfig from the environment (and `.env`)."""
    return PlaygroundConfig(
        endpoint=appwrite_endpoint(),
        project_id=appwrite_project_id(),
        dev_key=appwrite_dev_key(),
        realtime_endpoint=appwrite_realtime_endpoint(),
        self_signed=appwrite_self_signed(),
        database_id=get_optional("PLAYGROUND_DATABASE_ID", DEFAULT_DATABASE_ID),
        collection_id=get_optional("PLAYGROUND_COLLECTION_ID", DEFAULT_COLLECTION_ID),
        bucket_id=get_optional("PLAYGROUND_BUCKET_ID", DEFAULT_BUCKET_ID),
        function_id=get_optional("PLAYGROUND_FUNCTION_ID", DEFAULT_FUNCTION_ID),
        log_cap=playground_log_cap(),
        single_flight=get_optional_bool("PLAYGROUND_SINGLE_FLIGHT", False),
        http_timeout=playground_http_timeout(),
    )
