# uireuse/cli.py
"""
@file cli.py
@brief Command-line interface for uireuse.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List, Optional

from .actionlogger import ACTION_LOGGER
from .config import available_presets, load_config
from .dates import FORMATS, resolve_date
from .exceptions import ConfigError, PreconditionError
from .timinglogger import TIMING_LOGGER

_TRUTHY = {"1", "true", "yes", "on"}


def _configure_action_logger_from_env() -> None:
    """Configure action logging from environment variables."""
    enabled = os.getenv("UIREUSE_ACTION_LOGGING", "").lower() in _TRUTHY
    if not enabled:
        ACTION_LOGGER.disable()
        return

    log_file = os.getenv("UIREUSE_ACTION_LOG_FILE")
    level = os.getenv("UIREUSE_ACTION_LOG_LEVEL", "INFO")
    fmt = os.getenv("UIREUSE_ACTION_LOG_FORMAT", "line")
    max_tb_chars = int(os.getenv("UIREUSE_ACTION_LOG_MAX_TRACEBACK", "4000"))
    sample_retry = int(os.getenv("UIREUSE_ACTION_LOG_SAMPLE_RETRY", "1"))
    ACTION_LOGGER.configure(
        console=True,
        file_path=log_file,
        level=level,
        format=fmt,
        max_traceback_chars=max_tb_chars,
        sample_retry_events=sample_retry,
    )
    ACTION_LOGGER.enable()


def _configure_timing_logger_from_env() -> None:
    """Configure timing logging from environment variables."""
    enabled = os.getenv("UIREUSE_TIMING_LOGGING", "").lower() in _TRUTHY
    if not enabled:
        TIMING_LOGGER.disable()
        return

    log_file = os.getenv("UIREUSE_TIMING_LOG_FILE")
    level = os.getenv("UIREUSE_TIMING_LOG_LEVEL", "INFO")
    TIMING_LOGGER.configure(console=True, file_path=log_file, level=level)
    TIMING_LOGGER.enable()


def configure_logging_from_env() -> None:
    """
    Configure both loggers from UIREUSE_* environment variables.
    Test suites call this once, typically from conftest.py.
    """
    _configure_action_logger_from_env()
    _configure_timing_logger_from_env()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]
    configure_logging_from_env()

    p = argparse.ArgumentParser(
        prog="uireuse",
        description="uireuse - resilient browser interaction helpers",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    datep = sub.add_parser("date", help="Resolve a date keyword or explicit date string")
    datep.add_argument("date", nargs="?", default="today",
                       help="today, tomorrow, nextMonth, previousMonth, nextYear, previousYear or a date string")
    datep.add_argument("--format", "-f", default="datetime", choices=sorted(FORMATS),
                       help="Output format (default: datetime)")

    sub.add_parser("presets", help="Print the timing presets as JSON")

    checkp = sub.add_parser("check-config", help="Validate a YAML configuration file")
    checkp.add_argument("path", help="Path to the configuration YAML")

    args = p.parse_args(argv)

    if args.cmd == "date":
        try:
            value = resolve_date(args.date, args.format)
        except (PreconditionError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(value.isoformat() if args.format == "object" else value)
        return 0

    if args.cmd == "presets":
        print(json.dumps(available_presets(), indent=2, sort_keys=True))
        return 0

    if args.cmd == "check-config":
        try:
            time_config, conventions = load_config(args.path, install=False)
        except ConfigError as e:
            print(f"X Configuration is invalid: {e}", file=sys.stderr)
            return 2
        step = time_config.step_retry
        print(f"+ Configuration is valid: {args.path}")
        print(f"  - Resolve timeout: {time_config.resolve_element.timeout}s")
        print(f"  - Retry: {step.retry_count} attempts, {step.interval}s apart")
        print(f"  - Token selector: {conventions.token_selector}")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
