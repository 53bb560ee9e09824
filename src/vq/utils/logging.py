"""
Logging utilities for the vq library.

Importing vq never touches global logging state. Applications opt in by
calling ``setup_logging`` with an explicit configuration, optionally built
from the ``DEBUG_VQ`` environment variable via ``logging_config_from_env``.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

ROOT_LOGGER_NAME = "vq"

# Values of DEBUG_VQ that leave debug logging off.
_FALSE_VALUES = {"", "0", "false", "no", "off"}

DEFAULT_CONFIG: Dict[str, Any] = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "date_format": "%Y-%m-%d %H:%M:%S",
    "log_to_file": False,
    "log_file": "vq.log",
    "max_file_size": 10 * 1024 * 1024,  # 10MB
    "backup_count": 5,
}


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance under the ``vq`` namespace.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance; handlers are only attached by ``setup_logging``
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(config: Optional[Mapping[str, Any]] = None) -> logging.Logger:
    """
    Configure the ``vq`` logger.

    Args:
        config: Logging configuration dictionary; missing keys fall back to
            ``DEFAULT_CONFIG``

    Returns:
        The configured ``vq`` logger
    """
    config = {**DEFAULT_CONFIG, **(config or {})}

    level = getattr(logging, str(config["level"]).upper(), logging.INFO)
    formatter = logging.Formatter(config["format"], datefmt=config["date_format"])

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Replace handlers from a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config["log_to_file"]:
        log_file = Path(config["log_file"])
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=config["max_file_size"],
            backupCount=config["backup_count"],
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def debug_enabled(value: Optional[str]) -> bool:
    """Interpret a ``DEBUG_VQ`` value."""
    if value is None:
        return False
    return value.strip().lower() not in _FALSE_VALUES


def logging_config_from_env(
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Build a logging configuration from the ``DEBUG_VQ`` environment variable.

    Args:
        environ: Environment mapping to read (defaults to ``os.environ``)

    Returns:
        Configuration dictionary for ``setup_logging``
    """
    environ = os.environ if environ is None else environ
    level = "DEBUG" if debug_enabled(environ.get("DEBUG_VQ")) else "INFO"
    return {**DEFAULT_CONFIG, "level": level}
