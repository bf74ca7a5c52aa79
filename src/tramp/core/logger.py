"""Loguru sink setup shared by every entry point."""
from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"
_configured = False


def configure_logging(
    level: str = "INFO",
    log_dir: Path | str | None = None,
    *,
    rotation: str = "1 day",
    retention: str = "30 days",
) -> None:
    """Replace loguru's default sink with the game's sinks.

    Only the first call installs sinks; later calls are ignored until
    ``reset_logging`` is called.
    """
    global _configured
    if _configured:
        return

    logger.remove()
    logger.add(sys.stderr, level=level, format=_LOG_FORMAT)
    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(directory / "{time:YYYY-MM-DD}.log"),
            level=level,
            format=_LOG_FORMAT,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )
    _configured = True
    logger.debug("Logging configured at level {}", level)


def reset_logging() -> None:
    """Drop every sink and allow configure_logging to run again."""
    global _configured
    logger.remove()
    _configured = False
