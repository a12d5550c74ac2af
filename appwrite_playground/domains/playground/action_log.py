"""Capped, append-only output log shared by the dispatcher and the UI."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from appwrite_playground.utils.logger import get_logger, level_for

logger = get_logger()

DEFAULT_MAX_ENTRIES = 500


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class LogEntry:
    severity: Severity
    text: str
    label: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.text}"


class ActionLog:
    """
    Ring buffer of log entries. Oldest entries are evicted once `max_entries`
    is reached.

    Appends come from the asyncio loop thread while the UI thread reads
    snapshots, so both sides go through one lock.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES, mirror: bool = True) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()
        self._mirror = mirror

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen or 0

    def append(self, severity: Severity | str, text: str, label: str | None = None) -> LogEntry:
        entry = LogEntry(severity=Severity(severity), text=text, label=label)
        with self._lock:
            self._entries.append(entry)
        if self._mirror:
            logger.log(level_for(entry.severity.value), "%s", text)
        return entry

    def info(self, text: str, label: str | None = None) -> LogEntry:
        return self.append(Severity.INFO, text, label)

    def warning(self, text: str, label: str | None = None) -> LogEntry:
        return self.append(Severity.WARNING, text, label)

    def error(self, text: str, label: str | None = None) -> LogEntry:
        return self.append(Severity.ERROR, text, label)

    def entries(self) -> list[LogEntry]:
        """Snapshot, oldest first."""
        with self._lock:
            return list(self._entries)

    def latest_first(self) -> list[LogEntry]:
        with self._lock:
            return list(reversed(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
