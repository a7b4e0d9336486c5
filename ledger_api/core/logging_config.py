"""
Logging Configuration
=====================

Configures the standard library logging for the whole service.
Modules log through ``logging.getLogger(__name__)``.
"""
import logging
from typing import Optional

from ledger_api.core.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once per process.

    Args:
        level: Log level name; defaults to LOG_LEVEL from settings
    """
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)
