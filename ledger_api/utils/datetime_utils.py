"""
Centralized DateTime Utilities
==============================

Provides consistent datetime handling across the entire application.
All datetime operations use the timezone configured in ledger_api.core.config.

Functions:
- now(): Returns timezone-aware datetime object (the service clock)
- ensure_aware(): Attach the application timezone to naive datetimes
"""
import logging
import zoneinfo
from datetime import datetime, timezone as dt_timezone
from typing import Optional

from ledger_api.core.config import get_settings

logger = logging.getLogger(__name__)


def _get_app_timezone() -> dt_timezone:
    """
    Get the application timezone from config.
    Returns timezone object (defaults to UTC if invalid).
    """
    settings = get_settings()
    tz_str = settings.timezone

    # Handle UTC explicitly
    if tz_str.upper() == "UTC":
        return dt_timezone.utc

    try:
        return zoneinfo.ZoneInfo(tz_str)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid timezone '%s', falling back to UTC", tz_str)
        return dt_timezone.utc


def now() -> datetime:
    """
    Get current datetime with application-configured timezone.

    Returns:
        timezone-aware datetime object
    """
    app_tz = _get_app_timezone()
    return datetime.now(app_tz)


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Attach the application timezone to a naive datetime.

    MongoDB hands back naive UTC datetimes unless the client is tz-aware,
    so anything read from storage goes through here before comparisons.
    """
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=dt_timezone.utc).astimezone(_get_app_timezone())

