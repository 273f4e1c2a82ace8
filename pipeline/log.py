"""Logging utilities for less-tokens runs."""

import logging
from pathlib import Path
from typing import Optional, Union

_LOGGER_NAME = "less_tokens"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger under the less_tokens hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    level: Union[str, int] = logging.INFO,
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Configure the less_tokens logger with console output and optional file sink."""
    if verbose:
        level = logging.DEBUG
    elif isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI runs more than once
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[less-tokens] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
