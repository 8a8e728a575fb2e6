"""
Environment-driven defaults for SOSI reading.

Variables:
    SOSI_DEBUG: "true" enables debug logging in readers built from the environment
    SOSI_DEFAULT_CHARSET: 8-bit charset used when a file declares none
    SOSI_LOG_LEVEL: level name applied to the ``sosi`` logger by configure_logging()
"""

import logging
import os
from typing import Optional

from .core.constants import DEFAULT_CHARSET

DEBUG = os.getenv("SOSI_DEBUG", "false").lower() == "true"
DEFAULT_CHARSET_NAME = os.getenv("SOSI_DEFAULT_CHARSET", DEFAULT_CHARSET)
LOG_LEVEL = os.getenv("SOSI_LOG_LEVEL", "WARNING").upper()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a console handler to the ``sosi`` logger.

    Args:
        level: Level name (defaults to SOSI_LOG_LEVEL)
    """
    level_name = (level or LOG_LEVEL).upper()
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("sosi").setLevel(getattr(logging, level_name, logging.WARNING))
