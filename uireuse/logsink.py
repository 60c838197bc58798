# uireuse/logsink.py
"""
@file logsink.py
@brief Shared output plumbing for the action and timing loggers.

A sink is disabled until enabled explicitly. Lines go to stdout and/or an
append-only file; the most recent records are kept in memory so a failing
test can dump what led up to it.
"""

from __future__ import annotations

import os
import threading
from collections import deque
from typing import Any, Deque, List, Optional


class LogSink:
    """Thread-safe console/file sink with an in-memory tail."""

    def __init__(self, history: int = 500) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"
        self._history: Deque[Any] = deque(maxlen=history)

    def _configure_sink(self, console: bool, file_path: Optional[str], level: str) -> None:
        self._console = bool(console)
        self._file_path = file_path
        self._level = (level or "INFO").upper()

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def recent(self, count: Optional[int] = None) -> List[Any]:
        """Return the last `count` records (all kept records when omitted), oldest first."""
        with self._lock:
            records = list(self._history)
        if count is None:
            return records
        return records[-count:] if count > 0 else []

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()

    def _emit(self, record: Any, line: str) -> None:
        with self._lock:
            self._history.append(record)
            console, file_path = self._console, self._file_path

        if console:
            print(line, flush=True)
        if file_path:
            self._write_file(file_path, line)

    @staticmethod
    def _write_file(file_path: str, line: str) -> None:
        # Logging must never fail the interaction it describes.
        try:
            os.makedirs(os.path.dirname(os.path.abspath(file_path)) or ".", exist_ok=True)
            with open(file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:
            pass
