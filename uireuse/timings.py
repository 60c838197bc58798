# uireuse/timings.py
"""
@file timings.py
@brief Time configuration presets and defaults for interaction primitives.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "resolve_element": {"timeout": 30.0, "interval": 0.2},
    "exists_wait": {"timeout": 2.0, "interval": 0.1},
    "select_arrow": {"timeout": 3.0, "interval": 0.2},
    "step_retry": {"timeout": 30.0, "interval": 5.0, "retry_count": 3},
    "tab_select_retry": {"timeout": 30.0, "interval": 5.0, "retry_count": 3},
}

PAUSE_FIELDS: Dict[str, float] = {
    "after_click_pause": 0.0,
    "after_keys_pause": 0.0,
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "resolve_element": {"timeout": 10.0, "interval": 0.1},
        "exists_wait": {"timeout": 1.0, "interval": 0.05},
        "select_arrow": {"timeout": 2.0, "interval": 0.1},
        "step_retry": {"interval": 1.0, "retry_count": 2},
        "tab_select_retry": {"interval": 1.0, "retry_count": 2},
    },
    "slow": {
        "resolve_element": {"timeout": 60.0, "interval": 0.3},
        "exists_wait": {"timeout": 4.0, "interval": 0.2},
        "select_arrow": {"timeout": 6.0, "interval": 0.3},
        "step_retry": {"interval": 8.0, "retry_count": 4},
        "after_click_pause": 0.1,
        "after_keys_pause": 0.05,
    },
    "ci": {
        "resolve_element": {"timeout": 60.0, "interval": 0.3},
        "exists_wait": {"timeout": 5.0, "interval": 0.3},
        "select_arrow": {"timeout": 6.0, "interval": 0.3},
        "step_retry": {"interval": 5.0, "retry_count": 5},
        "tab_select_retry": {"interval": 5.0, "retry_count": 5},
        "after_click_pause": 0.2,
        "after_keys_pause": 0.1,
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values: Dict[str, Any] = {}
    values.update(deepcopy(TIMEOUT_FIELDS))
    values.update(deepcopy(PAUSE_FIELDS))

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    for key, value in overrides.items():
        if key in TIMEOUT_FIELDS:
            base = deepcopy(values[key])
            base.update(value)
            values[key] = base
        else:
            values[key] = value

    return values
