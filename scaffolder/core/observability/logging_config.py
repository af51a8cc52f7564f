"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  SCAFFOLDER_LOG_LEVEL env var  >  INFO (default)

Progress is reported through INFO records, so the default console
format is the bare message. ``--verbose`` adds timestamps and module
context; DEBUG adds file:line.

Optional file output via SCAFFOLDER_LOG_FILE / SCAFFOLDER_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import sys

LOG_LEVEL_ENV_VAR = "SCAFFOLDER_LOG_LEVEL"
LOG_FILE_ENV_VAR = "SCAFFOLDER_LOG_FILE"
LOG_FILE_LEVEL_ENV_VAR = "SCAFFOLDER_LOG_FILE_LEVEL"

DEFAULT_LEVEL = "INFO"

# ── Format strings ──────────────────────────────────────────────

_FMT_PROGRESS = "%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DIAGNOSTIC = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_CLOCK = "%H:%M:%S"
_DATEFMT_FULL = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | None = None,
    detailed: bool = False,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file. The file always gets
            the diagnostic format, so a failed run can be inspected
            after the fact.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
        detailed: Timestamp console lines even above DEBUG.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level, detailed))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    # Root must let through whatever either handler wants
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DIAGNOSTIC, datefmt=_DATEFMT_FULL))
        root.addHandler(fh)

    root.setLevel(root_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _console_formatter(level: int, detailed: bool) -> logging.Formatter:
    if level <= logging.DEBUG:
        return logging.Formatter(_FMT_DIAGNOSTIC, datefmt=_DATEFMT_CLOCK)
    if detailed:
        return logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT_CLOCK)
    return logging.Formatter(_FMT_PROGRESS)


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant (INFO if unknown)."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
