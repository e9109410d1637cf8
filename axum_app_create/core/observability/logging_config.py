"""
Logging configuration — set up once by the CLI entrypoint.

Core modules only ever do ``logger = logging.getLogger(__name__)``;
they never print.  This module decides where those records go.

Level precedence:
    --debug / --verbose / --quiet  >  AAC_LOG_LEVEL  >  WARNING

An optional log file is enabled with AAC_LOG_FILE (level AAC_LOG_FILE_LEVEL).
"""

from __future__ import annotations

import logging
import os
import sys

# ── Formats ─────────────────────────────────────────────────────

_FMT_FULL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Console format by threshold, most verbose first
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, _FMT_FULL, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(message)s", None),
)

ENV_LEVEL = "AAC_LOG_LEVEL"
ENV_FILE = "AAC_LOG_FILE"
ENV_FILE_LEVEL = "AAC_LOG_FILE_LEVEL"

# Libraries that log chatter we never want below DEBUG
_NOISY_LOGGERS = ("jinja2", "urllib3")


def level_from_flags(verbose: bool = False, quiet: bool = False, debug: bool = False) -> str:
    """Map the global CLI flags to a level name, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path of a log file.
        log_file_level: Level for the log file; defaults to ``level``.
        quiet_third_party: Keep library loggers at WARNING unless at DEBUG.
    """
    numeric_level = _parse_level(level)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_console_handler(numeric_level))

    if log_file:
        file_level = _parse_level(log_file_level or level)
        root.addHandler(_file_handler(log_file, file_level))
        root.setLevel(min(numeric_level, file_level))
    else:
        root.setLevel(numeric_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # A broken stream (closed pipe, full disk) must never crash a command
    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next(
        ((f, d) for threshold, f, d in _CONSOLE_FORMATS if level <= threshold),
        _CONSOLE_FORMATS[-1][1:],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FMT_FULL, datefmt=_DATEFMT_FILE))
    return handler


def setup_from_env(level: str) -> None:
    """Convenience wrapper used by main.py: console level + env-driven file output."""
    setup_logging(
        level=level,
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=level.upper() != "DEBUG",
    )


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
