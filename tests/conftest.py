# tests/conftest.py
"""
Shared fixtures.
"""

import pytest

from uireuse.actionlogger import ACTION_LOGGER
from uireuse.config import Conventions, TimeConfig
from uireuse.context import ActionContextManager
from uireuse.interaction import UserInteraction
from uireuse.timinglogger import TIMING_LOGGER

from fakedriver import FakeDriver

FAST_TIMINGS = {
    "resolve_element": {"timeout": 0.3, "interval": 0.01},
    "exists_wait": {"timeout": 0.1, "interval": 0.01},
    "select_arrow": {"timeout": 0.3, "interval": 0.01},
    "step_retry": {"interval": 0.01, "retry_count": 3},
    "tab_select_retry": {"interval": 0.01, "retry_count": 3},
}


@pytest.fixture(autouse=True)
def reset_state():
    """Every test starts from default configuration and an empty action stack."""
    TimeConfig.reset_to_defaults()
    Conventions.install(None)
    ActionContextManager.clear()
    yield
    TimeConfig.reset_to_defaults()
    Conventions.install(None)
    ActionContextManager.clear()
    ACTION_LOGGER.disable()
    ACTION_LOGGER.clear_history()
    TIMING_LOGGER.disable()
    TIMING_LOGGER.clear_history()


@pytest.fixture
def fast_timings():
    """Short timeouts and retry intervals so failing paths finish quickly."""
    config = TimeConfig.build_from(overrides=FAST_TIMINGS)
    TimeConfig.install_run_config(config)
    return config


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def ui(driver, fast_timings):
    return UserInteraction(driver)
