"""Logging setup shared by the CLI, the orchestrator and the search client."""

import os
import sys
import logging
from typing import Optional

DEFAULT_LOGGER_NAME = "city-imagery"

# Libraries that log every request at INFO/DEBUG.
NOISY_LIBRARY_LOGGERS = ("aiohttp", "boto3", "botocore", "urllib3", "s3transfer")

_FORMATS = {
    "structured": (
        "%(asctime)s | %(name)s | %(levelname)-8s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
    ),
    "simple": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def _build_formatter(format_type: str) -> logging.Formatter:
    format_name = os.getenv("LOG_FORMAT", format_type).lower()
    return logging.Formatter(
        _FORMATS.get(format_name, _FORMATS["simple"]), datefmt="%Y-%m-%d %H:%M:%S"
    )


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Return a stdout logger configured from arguments and environment.

    The handler is attached once per logger name, so repeated calls are cheap
    and never duplicate output.

    Environment Variables:
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (used when ``level`` is None)
        LOG_FORMAT: "structured" or "simple" (overrides ``format_type``)
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_build_formatter(format_type))
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    return setup_logger(name)


def quiet_library_loggers(level: int = logging.WARNING) -> None:
    """Raise the threshold of HTTP and AWS client loggers."""
    for name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(level)


def set_debug_logging(logger: logging.Logger) -> None:
    """Switch a configured logger and the root logger to DEBUG."""
    logger.setLevel(logging.DEBUG)
    logging.getLogger().setLevel(logging.DEBUG)


logger = setup_logger()
