"""
Tests for ActionLog: cap and eviction, ordering, thread safety, logger mirroring.
"""

from __future__ import annotations

import logging
import threading

import pytest

from appwrite_playground.domains.playground.action_log import ActionLog, LogEntry, Severity


def test_cap_evicts_oldest_entry() -> None:
    """After 501 appends to a 500-entry log, entry #1 is gone and #2..#501 remain."""
    log = ActionLog(max_entries=500, mirror=False)
    for i in range(1, 502):
        log.info(f"entry {i}")

    entries = log.entries()
    assert len(entries) == 500
    assert entries[0].text == "entry 2"
    assert entries[-1].text == "entry 501"
    assert all(e.text != "entry 1" for e in entries)


def test_default_cap_is_500() -> None:
    """A log built without arguments keeps 500 entries."""
    assert ActionLog().max_entries == 500


def test_invalid_cap_rejected() -> None:
    """A cap below one is a programming error."""
    with pytest.raises(ValueError):
        ActionLog(max_entries=0)


def test_latest_first_and_clear() -> None:
    """latest_first() reverses the append order; clear() empties the log."""
    log = ActionLog(mirror=False)
    log.info("a")
    log.warning("b")
    log.error("c", label="Login")

    assert [e.text for e in log.latest_first()] == ["c", "b", "a"]
    assert log.latest_first()[0].severity is Severity.ERROR
    assert log.latest_first()[0].label == "Login"

    log.clear()
    assert len(log) == 0
    assert log.entries() == []


def test_append_accepts_severity_names() -> None:
    """append() takes the plain severity string as well as the enum."""
    log = ActionLog(mirror=False)
    entry = log.append("warning", "careful")
    assert isinstance(entry, LogEntry)
    assert entry.severity is Severity.WARNING


def test_entry_format_has_clock_prefix() -> None:
    """LogEntry.format() renders `[HH:MM:SS] text`."""
    entry = ActionLog(mirror=False).info("hello")
    formatted = entry.format()
    assert formatted.endswith("] hello")
    assert formatted.startswith("[")
    assert len(formatted.split("]")[0]) == len("[HH:MM:SS")


def test_concurrent_appends_are_all_kept() -> None:
    """Appends from several threads are neither lost nor duplicated."""
    log = ActionLog(max_entries=10_000, mirror=False)

    def worker(n: int) -> None:
        for i in range(200):
            log.info(f"{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    texts = [e.text for e in log.entries()]
    assert len(texts) == 1600
    assert len(set(texts)) == 1600


def test_entries_mirror_to_logger(caplog: pytest.LogCaptureFixture) -> None:
    """Each entry is also written to the application logger at the matching level."""
    log = ActionLog()
    with caplog.at_level(logging.INFO, logger="appwrite_playground"):
        log.info("fine")
        log.error("broken")

    levels = {(r.levelno, r.getMessage()) for r in caplog.records}
    assert (logging.INFO, "fine") in levels
    assert (logging.ERROR, "broken") in levels


def test_unmirrored_log_stays_out_of_logger(caplog: pytest.LogCaptureFixture) -> None:
    """mirror=False keeps entries local (used for the realtime feed)."""
    log = ActionLog(mirror=False)
    with caplog.at_level(logging.DEBUG, logger="appwrite_playground"):
        log.info("quiet")
    assert not [r for r in caplog.records if r.getMessage() == "quiet"]
