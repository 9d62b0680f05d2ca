"""Process-wide logging setup."""
from __future__ import annotations
import logging

from superfeynman.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging() -> None:
    """Install a root handler once; later calls are no-ops."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
