# uireuse/config.py
"""
@file config.py
@brief Centralized timeout, retry and control-convention configuration.
"""

from __future__ import annotations

import json
import os
import threading
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Generator, Optional, Tuple

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError
from .timings import PAUSE_FIELDS, TIMEOUT_FIELDS, build_preset_values, list_presets

CONFIG_ENV_VAR = "UIREUSE_CONFIG"
SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "config.schema.json")

DEFAULT_ATTEMPTS = 3
DEFAULT_INTERVAL = 5.0


@dataclass
class TimeoutSettings:
    """Individual timeout settings for a specific operation type."""
    timeout: float
    interval: float
    retry_count: Optional[int] = None

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        retry_count: Optional[int] = None,
    ) -> TimeoutSettings:
        """Create a new settings instance with overrides applied."""
        return TimeoutSettings(
            timeout=timeout if timeout is not None else self.timeout,
            interval=interval if interval is not None else self.interval,
            retry_count=retry_count if retry_count is not None else self.retry_count,
        )


class TimeConfig:
    """
    Timeout configuration for the library.

    Precedence per run: base defaults -> preset -> file/explicit overrides.
    A run snapshot installed on the current thread wins over the process
    default; `override()` wins over both for the duration of a block.
    """

    _default_instance: Optional[TimeConfig] = None
    _default_preset: str = "default"
    _local = threading.local()
    _lock = threading.Lock()

    def __init__(self, preset: Optional[str] = None):
        preset_name = preset or self._default_preset
        self._apply_values(build_preset_values(preset_name))

    @classmethod
    def _timeout_fields(cls) -> Dict[str, Dict[str, Any]]:
        return TIMEOUT_FIELDS

    @classmethod
    def _pause_fields(cls) -> Dict[str, float]:
        return PAUSE_FIELDS

    def _apply_values(self, values: Dict[str, Any]) -> None:
        for name in self._timeout_fields():
            val = values.get(name)
            if isinstance(val, TimeoutSettings):
                setting = deepcopy(val)
            elif isinstance(val, dict):
                setting = TimeoutSettings(
                    timeout=float(val["timeout"]),
                    interval=float(val["interval"]),
                    retry_count=val.get("retry_count"),
                )
            else:
                raise ValueError(f"Invalid timeout setting for {name}: {val}")
            setattr(self, name, setting)

        for name in self._pause_fields():
            if name not in values:
                raise ValueError(f"Missing pause setting for {name}")
            setattr(self, name, float(values[name]))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in self._timeout_fields():
            setting: TimeoutSettings = getattr(self, name)
            data[name] = {
                "timeout": setting.timeout,
                "interval": setting.interval,
                "retry_count": setting.retry_count,
            }
        for name in self._pause_fields():
            data[name] = getattr(self, name)
        return data

    def clone(self) -> TimeConfig:
        """Return a deep clone of this config."""
        clone = TimeConfig()
        clone._apply_values(self.to_dict())
        return clone

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> TimeConfig:
        """Build a deterministic run-scope config snapshot."""
        cfg = cls(preset)
        if overrides:
            _apply_overrides(cfg, overrides)
        return cfg

    @classmethod
    def default(cls) -> TimeConfig:
        """Get the process default configuration (singleton)."""
        if cls._default_instance is None:
            with cls._lock:
                if cls._default_instance is None:
                    cls._default_instance = cls(cls._default_preset)
        return cls._default_instance

    @classmethod
    def install_run_config(cls, config: TimeConfig) -> None:
        """Install per-thread run configuration snapshot."""
        cls._local.run_config = config

    @classmethod
    def clear_run_config(cls) -> None:
        """Clear per-thread run configuration snapshot."""
        cls._local.run_config = None

    @classmethod
    def current(cls) -> TimeConfig:
        """Get the current effective configuration."""
        override = getattr(cls._local, "override", None)
        if override is not None:
            return override

        run_cfg = getattr(cls._local, "run_config", None)
        if run_cfg is not None:
            return run_cfg

        return cls.default()

    @classmethod
    def apply_preset(cls, preset: str) -> None:
        """Apply a preset to the current run-scope config."""
        cls.install_run_config(cls(preset))

    @classmethod
    def apply_overrides(cls, overrides: Dict[str, Any]) -> None:
        """Apply overrides to the current run-scope config."""
        config = cls.current().clone()
        _apply_overrides(config, overrides)
        cls.install_run_config(config)

    @classmethod
    @contextmanager
    def override(cls, **kwargs: Any) -> Generator[TimeConfig, None, None]:
        """Context manager for temporary configuration overrides."""
        previous = getattr(cls._local, "override", None)
        new_config = cls.current().clone()
        _apply_overrides(new_config, kwargs)

        cls._local.override = new_config
        try:
            yield new_config
        finally:
            cls._local.override = previous

    @classmethod
    def reset_to_defaults(cls) -> None:
        """Reset default and clear all thread-local config state."""
        with cls._lock:
            cls._default_preset = "default"
            cls._default_instance = cls(cls._default_preset)
        cls._local.override = None
        cls._local.run_config = None


def _apply_overrides(config: TimeConfig, overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key in config._timeout_fields():
            base_setting: TimeoutSettings = getattr(config, key)
            if isinstance(value, TimeoutSettings):
                setattr(config, key, deepcopy(value))
            elif isinstance(value, dict):
                new_setting = base_setting.with_overrides(
                    timeout=value.get("timeout"),
                    interval=value.get("interval"),
                    retry_count=value.get("retry_count"),
                )
                setattr(config, key, new_setting)
            else:
                raise ValueError(f"Invalid override for {key}: {value}")
        elif key in config._pause_fields():
            setattr(config, key, float(value))
        else:
            raise ValueError(f"Unknown TimeConfig field: {key}")


def available_presets() -> Dict[str, Dict[str, Any]]:
    return list_presets()


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempt budget for the retry executor.

    `attempts` counts the first invocation, so `attempts=1` means "no retry".
    """
    attempts: int = DEFAULT_ATTEMPTS
    interval: float = DEFAULT_INTERVAL

    def __post_init__(self) -> None:
        if int(self.attempts) != self.attempts or self.attempts < 1:
            raise ValueError(f"RetryPolicy.attempts must be an integer >= 1, got {self.attempts!r}")
        if self.interval < 0:
            raise ValueError(f"RetryPolicy.interval must be >= 0, got {self.interval!r}")

    @classmethod
    def default(cls) -> RetryPolicy:
        """Policy derived from the current `step_retry` configuration."""
        setting = TimeConfig.current().step_retry
        attempts = setting.retry_count if setting.retry_count is not None else DEFAULT_ATTEMPTS
        return cls(attempts=int(attempts), interval=float(setting.interval))

    @classmethod
    def resolve(
        cls,
        attempts: Optional[int] = None,
        interval: Optional[float] = None,
        base: Optional[RetryPolicy] = None,
    ) -> RetryPolicy:
        """Explicit values win; missing ones fall back to `base` or the configured default."""
        fallback = base or cls.default()
        return cls(
            attempts=attempts if attempts is not None else fallback.attempts,
            interval=interval if interval is not None else fallback.interval,
        )


@dataclass(frozen=True)
class Conventions:
    """
    Naming conventions of the controls under test.

    Sibling affordances (dropdown arrow, search and reset buttons, value-help
    icon) carry the control id plus a fixed suffix. Popup item templates are
    relative XPath expressions with a `{value}` placeholder that receives an
    XPath string literal.
    """
    arrow_suffix: str = "-arrow"
    search_suffix: str = "-search"
    reset_suffix: str = "-reset"
    value_help_suffix: str = "-vhi"
    token_selector: str = ".sapMToken"
    popup_list_css: str = ".sapMList, [role='listbox']"
    popup_item_xpath: str = ".//li[normalize-space(.)={value}]"
    select_list_css: str = ".sapMSelectList, [role='listbox']"
    select_item_xpath: str = ".//*[@role='option'][normalize-space(.)={value}]"
    checkbox_css: str = "input[type='checkbox'], [role='checkbox']"
    selected_tab_class: str = "sapUxAPAnchorBarButtonSelected"

    _local = threading.local()

    @classmethod
    def current(cls) -> Conventions:
        installed = getattr(cls._local, "installed", None)
        return installed if installed is not None else _DEFAULT_CONVENTIONS

    @classmethod
    def install(cls, conventions: Optional[Conventions]) -> None:
        """Install conventions for the current thread (None restores defaults)."""
        cls._local.installed = conventions

    def with_overrides(self, **values: Any) -> Conventions:
        known = {f.name for f in fields(self)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown convention field(s): {sorted(unknown)}")
        return replace(self, **values)


_DEFAULT_CONVENTIONS = Conventions()


def _load_schema(path: str = SCHEMA_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_yaml(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise ConfigError(f"Configuration YAML not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration YAML must be a mapping at root.")
    return data


def validate_config(data: Dict[str, Any]) -> None:
    """Validate a configuration mapping against the bundled JSON schema."""
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        lines = ["Configuration is invalid:"]
        for err in errors:
            where = "/".join(str(p) for p in err.path) or "<root>"
            lines.append(f"  - {where}: {err.message}")
        raise ConfigError("\n".join(lines))


def build_config(data: Dict[str, Any]) -> Tuple[TimeConfig, Conventions]:
    """Turn a validated configuration mapping into a config snapshot and conventions."""
    overrides: Dict[str, Any] = {}
    overrides.update(data.get("timeouts") or {})
    overrides.update(data.get("pauses") or {})

    retries = data.get("retries") or {}
    if retries:
        step = dict(overrides.get("step_retry") or {})
        if "attempts" in retries:
            step["retry_count"] = int(retries["attempts"])
        if "interval" in retries:
            step["interval"] = float(retries["interval"])
        overrides["step_retry"] = step

    try:
        time_config = TimeConfig.build_from(preset=data.get("preset", "default"), overrides=overrides)
        conventions = _DEFAULT_CONVENTIONS.with_overrides(**(data.get("conventions") or {}))
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return time_config, conventions


def load_config(path: str, install: bool = True) -> Tuple[TimeConfig, Conventions]:
    """
    Load a YAML configuration file.

    @param path Path to the YAML file
    @param install Install the result as the current thread's run config
    @return (TimeConfig, Conventions)
    @throws ConfigError if the file is missing, unparsable or violates the schema
    """
    data = _load_yaml(os.path.abspath(path))
    validate_config(data)
    time_config, conventions = build_config(data)
    if install:
        TimeConfig.install_run_config(time_config)
        Conventions.install(conventions)
    return time_config, conventions


def configure_from_env() -> bool:
    """Load the file named by UIREUSE_CONFIG, if set. Returns True when a file was loaded."""
    path = os.getenv(CONFIG_ENV_VAR)
    if not path:
        return False
    load_config(path)
    return True
