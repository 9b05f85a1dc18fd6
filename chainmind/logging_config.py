"""Logging configuration for ChainMind.

The library itself only creates module loggers; nothing is configured on
import. Applications (and the CLI) call ``configure_logging()``.
"""

import logging
import sys
from typing import Literal

# Noisy third-party loggers kept at WARNING+
NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "websockets",
    "websockets.client",
    "asyncio",
]


def suppress_noisy_loggers() -> None:
    """Suppress noisy third-party loggers."""
    for logger_name in NOISY_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.handlers.clear()


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
) -> None:
    """Configure application logging.

    Sets up:
    - ChainMind logs at the configured level
    - Third-party library logs suppressed to WARNING+
    - Clean console output format on stderr

    Args:
        level: Override log level (defaults to settings.log_level)
    """
    from chainmind.settings import get_settings

    log_level = level or get_settings().log_level

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, filter at handler level
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, log_level))
    console_handler.setFormatter(
        logging.Formatter(
            "%(levelname)s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root_logger.addHandler(console_handler)

    logging.getLogger("chainmind").setLevel(getattr(logging, log_level))

    suppress_noisy_loggers()
