# uireuse/context.py
"""
@file context.py
@brief Per-thread stack of running interaction primitives.

The stack answers "what was the test doing" when something fails deep inside
a retry: every tracked primitive, resolution and element action pushes a
frame, and the first tracked primitive that sees an exception stamps the
chain onto it as `action_trace`.
"""

from __future__ import annotations

import functools
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Iterator, List, Optional
from uuid import uuid4

from .descriptor import ElementDescriptor


@dataclass
class ActionContext:
    """One frame: a primitive or element action and what it targets."""
    action_name: str
    target: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    action_id: str = field(default_factory=lambda: uuid4().hex[:8])
    started: float = field(default_factory=time.monotonic)
    parent: Optional[ActionContext] = None

    @property
    def description(self) -> str:
        return f"{self.action_name} on {self.target}" if self.target else self.action_name

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def chain(self) -> Iterator[ActionContext]:
        """Yield this frame, then its callers outwards."""
        frame: Optional[ActionContext] = self
        while frame is not None:
            yield frame
            frame = frame.parent

    def format_trace(self) -> str:
        lines = ["Action trace (most recent first):"]
        for depth, frame in enumerate(self.chain()):
            marker = "  X " if depth == 0 else "  -> "
            lines.append(f"{marker}{frame.description} [{frame.elapsed:.2f}s]")
        return "\n".join(lines)


class ActionContextManager:
    """Per-thread stack of ActionContext frames."""

    _local = threading.local()

    @classmethod
    def _stack(cls) -> List[ActionContext]:
        if not hasattr(cls._local, "stack"):
            cls._local.stack = []
        return cls._local.stack

    @classmethod
    def current(cls) -> Optional[ActionContext]:
        stack = cls._stack()
        return stack[-1] if stack else None

    @classmethod
    def depth(cls) -> int:
        return len(cls._stack())

    @classmethod
    @contextmanager
    def action(
        cls,
        action_name: str,
        target: Optional[str] = None,
        **metadata: Any
    ) -> Generator[ActionContext, None, None]:
        stack = cls._stack()
        frame = ActionContext(
            action_name=action_name,
            target=target,
            metadata=metadata,
            parent=stack[-1] if stack else None,
        )
        stack.append(frame)
        try:
            yield frame
        finally:
            stack.pop()

    @classmethod
    def clear(cls) -> None:
        """Drop every frame of the calling thread (test cleanup)."""
        cls._local.stack = []


def _describe_target(args: tuple, kwargs: Dict[str, Any]) -> Optional[str]:
    # Primitives take the descriptor as their first argument after self.
    candidate = kwargs.get("descriptor")
    if candidate is None and len(args) > 1:
        candidate = args[1]
    if isinstance(candidate, ElementDescriptor):
        return candidate.describe()
    return None


def tracked_action(action_name: Optional[str] = None):
    """
    Decorator for interaction primitives.

    Runs the primitive inside an ActionContext frame and logs its outcome to
    ACTION_LOGGER: `action_finish` for the call made by the test,
    `step_finish` for primitives called by other primitives. Exceptions
    propagate unchanged apart from the `action_trace` attribute.
    """
    def decorator(func):
        name = action_name or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            from .actionlogger import ACTION_LOGGER

            target = _describe_target(args, kwargs)
            event = "step_finish" if ActionContextManager.depth() else "action_finish"
            with ActionContextManager.action(name, target=target) as frame:
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    if getattr(exc, "action_trace", None) is None:
                        exc.action_trace = frame.format_trace()
                    ACTION_LOGGER.log(
                        action=name,
                        target=target,
                        status="error",
                        duration_ms=int(frame.elapsed * 1000),
                        metadata=kwargs,
                        exception=exc,
                        action_id=frame.action_id,
                        phase="execute",
                        event=event,
                    )
                    raise
                ACTION_LOGGER.log(
                    action=name,
                    target=target,
                    status="ok",
                    duration_ms=int(frame.elapsed * 1000),
                    metadata=kwargs,
                    action_id=frame.action_id,
                    phase="execute",
                    event=event,
                )
                return result

        return wrapper

    return decorator
