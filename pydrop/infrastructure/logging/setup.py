"""
Logging setup and configuration utilities.

This module configures loguru sinks for console and rotating file output
and routes records emitted through the standard library (aiohttp, asyncio)
into the same sinks.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

from loguru import logger

from ..config.models import LoggingConfig


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Any = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage())


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup client logging with the given configuration.

    Args:
        config: Logging configuration
    """
    logger.remove()

    if config.console_enabled:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                   "<level>{level: <8}</level> | "
                   "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                   "<level>{message}</level>",
            level=config.level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=False
        )

    if config.file_enabled:
        log_dir = Path(config.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "pydrop.log",
            format=config.format,
            level=config.level.upper(),
            rotation=config.max_file_size,
            retention=config.backup_count,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def describe_logging(config: LoggingConfig) -> Dict[str, Any]:
    """Summarise the active logging configuration."""
    log_dir = Path(config.log_directory)
    return {
        'log_level': config.level,
        'log_directory': str(log_dir),
        'log_directory_exists': log_dir.exists(),
        'console_enabled': config.console_enabled,
        'file_enabled': config.file_enabled,
        'max_file_size': config.max_file_size,
        'backup_count': config.backup_count
    }
