"""Structured logging for pub-sub events (queue, subscribe, deliver)."""

import logging
import sys
from typing import Optional

from queued_pubsub.config import get_settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Return a configured logger; level defaults to PUBSUB_LOG_LEVEL."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
            )
        )
        logger.addHandler(handler)
        logger.setLevel(level if level is not None else get_settings().log_level)
    return logger
