"""Logging setup for command-line use."""

import logging
import sys
from typing import Union


def setup_logger(name: str = "babyfoot_ratings", level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach a single stdout handler with consistent formatting."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
