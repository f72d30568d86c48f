import logging
from typing import Optional

from wayroute.core.settings import get_settings


def setup_logging(level: Optional[str] = None):
    # Configure logging format
    logging_format = "%(asctime)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure root logger
    logging.basicConfig(
        level=level or get_settings().LOG_LEVEL,
        format=logging_format,
        datefmt=date_format
    )

    # Configure package logger
    logging.getLogger("wayroute").setLevel(level or get_settings().LOG_LEVEL)
