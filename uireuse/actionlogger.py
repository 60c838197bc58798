# uireuse/actionlogger.py
"""
@file actionlogger.py
@brief Action log for interaction primitives.

One record per finished primitive (`action_finish` for the call the test
made, `step_finish` for primitives it ran internally) plus sampled
`retry_attempt` records from the Retry Executor. Records render either as a
`|`-separated line or as one JSON object per line.
"""

from __future__ import annotations

import json
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .descriptor import ElementDescriptor
from .logsink import LogSink

# Primitives whose `value` argument is typed into the page.
VALUE_ACTIONS = frozenset({
    "fill",
    "fill_and_retry",
    "fill_active",
    "fill_active_and_retry",
    "clear_and_fill",
    "clear_fill_and_retry",
    "clear_and_fill_active",
    "clear_fill_active_and_retry",
    "clear_and_fill_smart_field_input",
    "clear_and_fill_smart_field_input_and_retry",
    "search_for",
})

SECRET_KEYS = frozenset({"password", "passwd", "secret", "token"})

FORMATS = ("line", "jsonl")


def mask_value(text: str, visible: int = 10) -> str:
    """Keep the first `visible` characters of a typed value."""
    if len(text) <= visible:
        return text
    return f"{text[:visible]}..."


class ActionLogger(LogSink):
    """Records the outcome of each tracked interaction primitive."""

    def __init__(self) -> None:
        super().__init__()
        self._format = "line"
        self._run_id = "default"
        self._max_traceback_chars = 4000
        self._sample_retry_events = 1

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        run_id: Optional[str] = None,
        format: str = "line",
        max_traceback_chars: int = 4000,
        sample_retry_events: int = 1,
    ) -> None:
        """
        @param format "line" or "jsonl"
        @param sample_retry_events Log only every Nth retry attempt after the first
        @throws ValueError for an unknown format
        """
        fmt = (format or "line").lower()
        if fmt not in FORMATS:
            raise ValueError(f"ActionLogger format must be one of {FORMATS}, got {format!r}")

        with self._lock:
            self._configure_sink(console, file_path, level)
            self._format = fmt
            self._max_traceback_chars = max(256, int(max_traceback_chars))
            self._sample_retry_events = max(1, int(sample_retry_events))
            if run_id:
                self._run_id = run_id

    @property
    def run_id(self) -> str:
        return self._run_id

    def should_log_retry_attempt(self, attempt: int) -> bool:
        if attempt <= 1:
            return True
        return attempt % self._sample_retry_events == 0

    def log(
        self,
        *,
        action: str,
        target: Optional[str] = None,
        status: str = "ok",
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
        action_id: Optional[str] = None,
        phase: Optional[str] = None,
        attempt: Optional[int] = None,
        event: str = "action_finish",
    ) -> None:
        if not self._enabled:
            return

        record: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "time": time.strftime("%H:%M:%S"),
            "level": self._level,
            "event": event,
            "action": action,
            "action_id": action_id,
            "target": target,
            "phase": phase,
            "status": status,
            "attempt": attempt,
            "duration_ms": duration_ms,
            "arguments": self._loggable_arguments(action, metadata or {}),
            "run_id": self._run_id,
        }
        if exception is not None:
            record["error"] = self._describe_error(exception)

        self._emit(record, self._render(record))

    def _render(self, record: Dict[str, Any]) -> str:
        if self._format == "jsonl":
            return json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str)

        parts = [record["time"], record["level"], record["action"]]
        for key in ("event", "action_id", "phase", "attempt", "status", "duration_ms", "run_id", "target"):
            value = record.get(key)
            if value is not None and value != "":
                parts.append(f"{key}={value}")
        parts.extend(f"{key}={value}" for key, value in record["arguments"].items())

        error = record.get("error")
        if error:
            parts.append(f"error={error['type']}: {error['message']}")
            if error.get("cause_type"):
                parts.append(f"cause={error['cause_type']}")
        return " | ".join(parts)

    @staticmethod
    def _loggable_arguments(action: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        loggable: Dict[str, Any] = {}
        for key, value in arguments.items():
            if key.lower() in SECRET_KEYS:
                loggable[key] = "***"
            elif key == "value" and action in VALUE_ACTIONS and isinstance(value, str):
                loggable[key] = mask_value(value)
            elif isinstance(value, ElementDescriptor):
                loggable[key] = value.describe()
            else:
                loggable[key] = value
        return loggable

    def _describe_error(self, exception: BaseException) -> Dict[str, Any]:
        tb = "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))
        if len(tb) > self._max_traceback_chars:
            tb = tb[: self._max_traceback_chars] + "...<truncated>"

        cause = exception.__cause__
        return {
            "type": type(exception).__name__,
            "message": str(exception),
            "cause_type": type(cause).__name__ if cause is not None else None,
            "cause_message": str(cause) if cause is not None else None,
            "traceback": tb.strip(),
        }


ACTION_LOGGER = ActionLogger()
