"""Loguru helpers for consistent console and file logging in CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from demiurge_studio.config.loader import get_log_dir

_STDERR_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"

_SINK_IDS: dict[str, int] = {}
_stderr_sink_id: int | None = None


def configure_stderr_logging(level: str = "INFO") -> None:
    """Replace the stderr sink with one at ``level`` (idempotent)."""
    global _stderr_sink_id
    level = level.strip().upper()
    # Validate before touching sinks so a bad level keeps the current setup.
    logger.level(level)
    if _stderr_sink_id is None:
        logger.remove()
    else:
        logger.remove(_stderr_sink_id)
    _stderr_sink_id = logger.add(sys.stderr, level=level, format=_STDERR_FORMAT)


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_dir = get_log_dir()
    log_path = log_dir / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    log_dir.mkdir(parents=True, exist_ok=True)
    sink_id = logger.add(
        str(log_path),
        level=level.strip().upper(),
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS[name] = sink_id
    return log_path
