# uireuse/__init__.py
"""
uireuse - resilient interaction primitives for browser UI tests.

This package provides:
- Resolver: polls a descriptor until a ready element exists at an index
- retry / wait_until: bounded re-invocation and polling
- UserInteraction: click, fill, clear, select, search and reset primitives
- Configuration: timing presets, retry policy and control conventions (YAML)
- dates: relative dates for test data
- SeleniumDriver: the Selenium WebDriver binding
"""

from uireuse.config import (
    Conventions,
    RetryPolicy,
    TimeConfig,
    configure_from_env,
    load_config,
)
from uireuse.descriptor import ControlKind, ElementDescriptor
from uireuse.element import ElementMeta, ResolvedElement
from uireuse.exceptions import (
    UIReuseError,
    ConfigError,
    TimeoutError,
    NotFoundError,
    MissingIdError,
    ObstructedActionError,
    PreconditionError,
    VerificationError,
    InvalidElementStateError,
)
from uireuse.interaction import ABSENT, UserInteraction
from uireuse.interfaces import IElementHandle, IUIDriver, Key, Readiness
from uireuse.resolver import Resolver
from uireuse.waits import retry, wait_until
from uireuse.dates import resolve_date
from uireuse.selenium_driver import SeleniumDriver

__all__ = [
    "Conventions",
    "RetryPolicy",
    "TimeConfig",
    "configure_from_env",
    "load_config",
    "ControlKind",
    "ElementDescriptor",
    "ElementMeta",
    "ResolvedElement",
    "UIReuseError",
    "ConfigError",
    "TimeoutError",
    "NotFoundError",
    "MissingIdError",
    "ObstructedActionError",
    "PreconditionError",
    "VerificationError",
    "InvalidElementStateError",
    "ABSENT",
    "UserInteraction",
    "IElementHandle",
    "IUIDriver",
    "Key",
    "Readiness",
    "Resolver",
    "retry",
    "wait_until",
    "resolve_date",
    "SeleniumDriver",
]

__version__ = "1.0.0"
