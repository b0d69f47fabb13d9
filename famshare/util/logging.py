"""Logging configuration for the API server and the maintenance scripts."""

import logging
import sys
from typing import TextIO

from famshare.config import Settings

# Client and driver libraries that log every request or statement at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "asyncpg", "sqlalchemy.engine", "dishka")


def log_level_for(settings: Settings) -> int:
    """Debug flag wins; tests stay quiet; everything else logs at INFO."""
    if settings.debug:
        return logging.DEBUG
    if settings.environment == "test":
        return logging.WARNING
    return logging.INFO


def setup_logging(settings: Settings, stream: TextIO = sys.stdout) -> None:
    """Configure the root logger for a famshare process.

    Logfire carries the structured spans; this only shapes the plain log
    lines that uvicorn and the libraries write.

    Args:
        settings: Application settings
        stream: Where log lines go
    """
    level = log_level_for(settings)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=stream,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logging.getLogger("famshare").setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: environment=%s, level=%s",
        settings.environment,
        logging.getLevelName(level),
    )
