"""Logging setup for the Appwrite playground."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "appwrite_playground"


def setup_logger(
    name: str = LOGGER_NAME,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return a logger.

    Streamlit reruns the script on every interaction, so a logger that already
    has handlers is returned untouched.

    Args:
        name: Logger name.
        level: Logging level.
        log_file: Optional path to log file. If None, logs to stderr only.

    Returns:
        Configured logger.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(level)
    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(fmt)
    log.addHandler(h)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        log.addHandler(fh)

    return log


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return the application logger. Use after setup_logger has been called."""
    return logging.getLogger(name)


# Output-log severities -> stdlib levels.
_SEVERITY_LEVELS = {
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def level_for(severity: str) -> int:
    """Map an output-log severity name to a logging level (INFO when unknown)."""
    return _SEVERITY_LEVELS.get(str(severity).lower(), logging.INFO)


def quiet_http_loggers(level: int = logging.WARNING) -> None:
    """Stop urllib3/aiohttp from flooding the console on every REST call."""
    for name in ("urllib3", "aiohttp.access", "aiohttp.client", "aiohttp.websocket"):
        logging.getLogger(name).setLevel(level)
