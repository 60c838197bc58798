# uireuse/timinglogger.py
"""
@file timinglogger.py
@brief Timing log for polling waits and the Retry Executor.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from .logsink import LogSink

WAIT_EVENTS = ("wait_start", "wait_success", "wait_timeout")
RETRY_EVENTS = ("retry_start", "retry_wait", "retry_success", "retry_exhausted")


class TimingLogger(LogSink):
    """Records when waits and retries start, pause, succeed and give up."""

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
    ) -> None:
        with self._lock:
            self._configure_sink(console, file_path, level)

    def log(
        self,
        *,
        event: str,
        description: Optional[str] = None,
        status: str = "info",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        @param event One of WAIT_EVENTS or RETRY_EVENTS
        @param metadata Extra key=value pairs; None values are left out
        """
        if not self._enabled:
            return

        fields = {k: v for k, v in (metadata or {}).items() if v is not None}
        line = " ".join(
            [f"[{status.lower()}]", "[timing]", f"time={time.strftime('%H:%M:%S')}", f"event={event}"]
            + ([f"description={description}"] if description else [])
            + [f"{key}={value}" for key, value in fields.items()]
        )
        self._emit({"event": event, "description": description, "status": status, **fields}, line)


TIMING_LOGGER = TimingLogger()
