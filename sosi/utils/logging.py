"""
Thread-local logging utilities for SOSI reading.

This module provides global logging functions that write to the ``sosi``
logger and, optionally, to a thread-local log file. This allows a long import
to keep a reader-specific log file without passing file handles around.

Usage:
    from sosi.utils.logging import log, set_log_file, close_log_file

    # At import start
    log_file = open("import.log", "w", encoding="utf-8")
    set_log_file(log_file)

    # During reading
    log("Reading features...")

    # At import end (always use try/finally)
    try:
        # ... reading logic ...
    finally:
        close_log_file()
"""

import logging
import threading
from typing import Optional, TextIO

logger = logging.getLogger("sosi")

# Thread-local storage for log file
# Each reading thread may have its own log file
_thread_local = threading.local()


def log(message: str, level: int = logging.INFO) -> None:
    """
    Log a message to the ``sosi`` logger and to the thread-local log file.

    Args:
        message: Message to log (newline automatically appended for file output)
        level: stdlib logging level for the logger record

    Example:
        >>> log("Opened 0219Adresser.SOS (EPSG:25833)")
    """
    logger.log(level, message)
    log_file = getattr(_thread_local, 'log_file', None)
    if log_file:
        try:
            log_file.write(message + "\n")
            log_file.flush()
        except (OSError, ValueError):
            # File closed underneath us; logging must not break reading
            _thread_local.log_file = None


def set_log_file(log_file: Optional[TextIO]) -> None:
    """
    Set the log file for the current thread.

    Args:
        log_file: File object to write logs to, or None to disable file logging
    """
    _thread_local.log_file = log_file


def close_log_file() -> None:
    """
    Close and clear the thread-local log file if one is open.

    Safe to call multiple times; should be called in a finally block.
    """
    log_file = getattr(_thread_local, 'log_file', None)
    if log_file:
        set_log_file(None)  # Clear the reference first to prevent further writes
        if not log_file.closed:
            log_file.close()


def get_log_file() -> Optional[TextIO]:
    """Return the current thread's log file, or None."""
    return getattr(_thread_local, 'log_file', None)


def make_debug_logger(prefix: str):
    """
    Build a ``_log(message, debug)`` helper that only emits when ``debug`` is set.

    Args:
        prefix: Tag prepended to every message, e.g. ``"[STREAM]"``

    Returns:
        Function ``(message, debug=False, level=logging.DEBUG) -> None``
    """
    def _log(message: str, debug: bool = False, level: int = logging.DEBUG) -> None:
        if debug:
            log(f"{prefix} {message}", level)

    return _log
