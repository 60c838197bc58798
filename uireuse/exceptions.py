# uireuse/exceptions.py
"""
@file exceptions.py
@brief Exception classes for the interaction library.
"""

from __future__ import annotations

import traceback
from typing import Optional, Sequence


class UIReuseError(Exception):
    """Base exception for the library."""
    pass


class ConfigError(UIReuseError):
    """Raised when a YAML configuration file is invalid."""
    pass


class TimeoutError(UIReuseError):
    """
    Raised when a wait times out.

    A resolution that found its element but never saw it reach the required
    readiness ends here. The last exception raised by the polled predicate is
    preserved for debugging.

    Attributes:
        original_exception: The last exception raised before the timeout
        description: Human-readable description of what was being waited for
        timeout: The timeout value in seconds
        attempt_count: Number of polls made
        elapsed_time: Actual elapsed time in seconds
        stage: Phase of the action (resolve, execute, verify)
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.timeout: Optional[float] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None
        self.stage: Optional[str] = None

    def __str__(self) -> str:
        base_msg = super().__str__()

        details = []
        if self.original_exception is not None:
            details.append(f"Original exception: {type(self.original_exception).__name__}")
        if self.attempt_count is not None:
            details.append(f"Attempts: {self.attempt_count}")
        if self.elapsed_time is not None:
            details.append(f"Elapsed: {self.elapsed_time:.2f}s")
        if self.stage is not None:
            details.append(f"Stage: {self.stage}")

        if details:
            return f"{base_msg} [{', '.join(details)}]"
        return base_msg

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        @return The deepest original_exception in the chain, or None
        """
        current = self.original_exception
        while current is not None:
            if getattr(current, "original_exception", None) is not None:
                current = current.original_exception
            else:
                return current
        return None

    def get_traceback_str(self) -> str:
        """
        Get a formatted traceback string from the original exception.

        @return Formatted traceback string or empty string if no original exception
        """
        if self.original_exception is None:
            return ""

        return "".join(traceback.format_exception(
            type(self.original_exception),
            self.original_exception,
            self.original_exception.__traceback__
        ))


class NotFoundError(UIReuseError):
    """
    Raised when a descriptor never matched an element at the requested index
    within the timeout.
    """

    def __init__(
        self,
        description: str,
        timeout: float,
        index: int = 0,
        match_count: int = 0,
        last_error: Optional[str] = None,
    ):
        self.description = description
        self.timeout = timeout
        self.index = index
        self.match_count = match_count
        self.last_error = last_error
        super().__init__(self.__str__())

    def __str__(self) -> str:
        lines = [
            f"NotFoundError: element={self.description} index={self.index} "
            f"matches={self.match_count} timeout={self.timeout}s",
        ]
        if self.last_error:
            lines.append(f"Last error: {self.last_error}")
        return "\n".join(lines)


class MissingIdError(UIReuseError):
    """
    Raised when an element was found but carries no id, while the operation
    derives sibling ids or a page-side container lookup from it.
    """

    def __init__(self, description: str, purpose: str):
        self.description = description
        self.purpose = purpose
        super().__init__(self.__str__())

    def __str__(self) -> str:
        return (
            f"MissingIdError: element={self.description} was found but has no id "
            f"attribute, which is required to {self.purpose}."
        )


class ObstructedActionError(UIReuseError):
    """
    Raised when a click reached a clickable element but another element
    received it because it covers the target point.
    """

    def __init__(
        self,
        action: str,
        target: str,
        cause: Optional[BaseException] = None,
    ):
        self.action = action
        self.target = target
        self.cause = cause
        super().__init__(self.__str__())

    def __str__(self) -> str:
        msg = (
            f"ObstructedActionError: action='{self.action}' element={self.target} "
            "could not be performed because another element (overlay, busy "
            "indicator, popup or animation) covers the target point. "
            "Wait for the covering element to disappear or use the retrying variant."
        )
        if self.cause is not None:
            first_line = str(self.cause).strip().splitlines()[0] if str(self.cause).strip() else ""
            msg += f" cause='{type(self.cause).__name__}: {first_line}'"
        return msg


class PreconditionError(UIReuseError):
    """Raised before any driver call when a mandatory argument is missing."""

    def __init__(self, function: str, missing: Sequence[str], hint: Optional[str] = None):
        self.function = function
        self.missing = tuple(missing)
        self.hint = hint
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if len(self.missing) == 1:
            what = f"a {self.missing[0]}"
        else:
            what = " and ".join(f"a {m}" for m in self.missing)
        msg = f"Function '{self.function}' failed: Please provide {what} as argument"
        msg += "s." if len(self.missing) > 1 else "."
        if self.hint:
            msg += f" {self.hint}"
        return msg


class VerificationError(UIReuseError):
    """Raised when a read-back after an action does not match the intended value."""

    def __init__(self, what: str, expected: object, actual: object):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Verification failed for {what}: expected {expected!r}, got {actual!r}. "
            "Values could not be applied as expected."
        )


class InvalidElementStateError(UIReuseError):
    """
    Raised by driver bindings when an action is attempted on an element that
    cannot support it, for example setting the value of a button.
    """

    def __init__(self, action: str, message: Optional[str] = None):
        self.action = action
        msg = f"invalid element state: cannot perform '{action}'"
        if message:
            msg += f": {message}"
        super().__init__(msg)
