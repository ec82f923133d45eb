"""Logging setup."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from docchat.config.settings import LogConfig, settings


def setup_logger(config: Optional[LogConfig] = None) -> Optional[Path]:
    """Route loguru output to stderr and, when configured, a rotating file.

    Args:
        config: log settings, defaults to the global ones

    Returns:
        path of the log file, None when file logging is off
    """
    config = config or settings.log
    logger.remove()

    logger.add(sys.stderr, format=config.format, level=config.level, colorize=True)

    log_path = None
    if config.log_file:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_path = config.log_dir / config.log_file
        logger.add(
            log_path,
            format=config.format,
            level=config.level,
            rotation=config.rotation,
            retention=config.retention,
            encoding="utf-8",
        )

    target = f"stderr and {log_path}" if log_path else "stderr"
    logger.debug(f"Logging to {target} at level {config.level}")
    return log_path
