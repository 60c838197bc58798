# uireuse/waits.py
"""
@file waits.py
@brief Bounded polling (`wait_until`) and the Retry Executor (`retry`).

Both report their lifecycle to TIMING_LOGGER. `retry` additionally emits
sampled `retry_attempt` records to ACTION_LOGGER so a retried primitive can
be followed attempt by attempt.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional, Tuple, TypeVar

from .config import RetryPolicy
from .exceptions import TimeoutError
from .timinglogger import TIMING_LOGGER

T = TypeVar("T")


def _now() -> float:
    return time.monotonic()


def _sleep(seconds: float) -> None:
    time.sleep(seconds)


def _timeout_error(
    description: str,
    timeout: float,
    polls: int,
    elapsed: float,
    stage: Optional[str],
    last_exception: Optional[BaseException],
) -> TimeoutError:
    if last_exception is not None:
        reason = f"{type(last_exception).__name__}: {last_exception}"
    else:
        reason = "(condition kept returning falsy)"
    error = TimeoutError(f"Timed out waiting for {description} after {timeout}s: {reason}")
    error.original_exception = last_exception
    error.description = description
    error.timeout = timeout
    error.attempt_count = polls
    error.elapsed_time = elapsed
    error.stage = stage
    return error


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
    stage: Optional[str] = None,
) -> T:
    """
    Poll `predicate` until it returns a truthy value and return that value.

    The predicate runs at least once. A predicate exception counts as a falsy
    result and the last one is kept as `original_exception`. Sleeps are cut
    at the deadline, so the TimeoutError comes no later than one interval
    after `timeout` seconds.

    @throws TimeoutError carrying description, timeout, poll count, elapsed time and stage
    """
    start = _now()
    last_exception: Optional[BaseException] = None
    polls = 0
    TIMING_LOGGER.log(
        event="wait_start",
        description=description,
        metadata={"timeout_s": timeout, "interval_s": interval, "stage": stage},
    )

    while True:
        polls += 1
        try:
            result = predicate()
        except Exception as e:
            last_exception = e
        else:
            if result:
                TIMING_LOGGER.log(
                    event="wait_success",
                    description=description,
                    status="success",
                    metadata={"attempts": polls, "elapsed_s": round(_now() - start, 3), "stage": stage},
                )
                return result

        remaining = timeout - (_now() - start)
        if remaining <= 0:
            break
        _sleep(min(interval, remaining))

    elapsed = _now() - start
    TIMING_LOGGER.log(
        event="wait_timeout",
        description=description,
        status="error",
        metadata={"timeout_s": timeout, "attempts": polls, "elapsed_s": round(elapsed, 3), "stage": stage},
    )
    raise _timeout_error(description, timeout, polls, elapsed, stage, last_exception)


def _log_retry_attempt(description: str, attempt: int, stage: Optional[str]) -> None:
    from .actionlogger import ACTION_LOGGER

    if ACTION_LOGGER.is_enabled() and ACTION_LOGGER.should_log_retry_attempt(attempt):
        ACTION_LOGGER.log(
            action="retry_attempt",
            status="info",
            metadata={"description": description},
            attempt=attempt,
            phase=stage or "execute",
            event="retry_attempt",
        )


def retry(
    func: Callable[..., T],
    *args: Any,
    attempts: Optional[int] = None,
    interval: Optional[float] = None,
    policy: Optional[RetryPolicy] = None,
    exceptions: Tuple[type, ...] = (Exception,),
    description: Optional[str] = None,
    stage: Optional[str] = None,
    **kwargs: Any
) -> T:
    """
    Call func(*args, **kwargs) until it succeeds, at most `attempts` times.

    `attempts` and `interval` fall back to `policy`, then to the configured
    process-wide default (`RetryPolicy.default()`). The first call counts as
    attempt 1. Between failed attempts the executor sleeps `interval`
    seconds; after a success it returns at once.

    When every attempt fails, the exception of the last attempt is re-raised
    as is. Exceptions outside `exceptions` propagate immediately.
    """
    budget = RetryPolicy.resolve(attempts, interval, base=policy)
    description = description or getattr(func, "__name__", "operation")
    start = _now()
    TIMING_LOGGER.log(
        event="retry_start",
        description=description,
        metadata={"max_attempts": budget.attempts, "interval_s": budget.interval, "stage": stage},
    )

    for attempt in range(1, budget.attempts + 1):
        _log_retry_attempt(description, attempt, stage)
        try:
            result = func(*args, **kwargs)
        except exceptions as e:
            if attempt == budget.attempts:
                TIMING_LOGGER.log(
                    event="retry_exhausted",
                    description=description,
                    status="error",
                    metadata={
                        "attempts": attempt,
                        "elapsed_s": round(_now() - start, 3),
                        "last_error": type(e).__name__,
                        "stage": stage,
                    },
                )
                raise
            TIMING_LOGGER.log(
                event="retry_wait",
                description=description,
                metadata={
                    "attempt": attempt,
                    "sleep_s": round(budget.interval, 3),
                    "error": type(e).__name__,
                    "stage": stage,
                },
            )
            _sleep(budget.interval)
        else:
            TIMING_LOGGER.log(
                event="retry_success",
                description=description,
                status="success",
                metadata={"attempts": attempt, "elapsed_s": round(_now() - start, 3), "stage": stage},
            )
            return result

    raise AssertionError("unreachable: RetryPolicy guarantees attempts >= 1")
