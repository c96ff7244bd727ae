"""
Date/Time Handling Utilities

Daily XP caps are keyed by calendar date, so "today" has to be computed
in one well-defined timezone. Rules:
- Timestamps stored on progression state are UTC and timezone-aware
- Calendar dates are derived in the configured (or given) timezone
- Never mix naive and aware datetimes
"""

import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nutrio import config

logger = logging.getLogger(__name__)


def get_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    """
    Resolve a timezone name, falling back to DEFAULT_TIMEZONE

    Args:
        tz_name: IANA timezone (e.g., "America/New_York")

    Returns:
        ZoneInfo object
    """
    tz_name = tz_name or config.DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Invalid timezone '{tz_name}': {e}")
        return ZoneInfo("UTC")


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)
    """
    return datetime.now(ZoneInfo("UTC"))


def today_in_timezone(tz_name: Optional[str] = None, now: Optional[datetime] = None) -> date:
    """
    Calendar date "today" in the given timezone

    Args:
        tz_name: IANA timezone, defaults to DEFAULT_TIMEZONE
        now: Aware datetime to convert instead of the current time
    """
    tz = get_timezone(tz_name)
    return (now or now_utc()).astimezone(tz).date()


def is_weekend(day: date) -> bool:
    """Saturday or Sunday"""
    return day.weekday() >= 5


def parse_iso_date(date_str: str) -> date:
    """
    Parse YYYY-MM-DD

    Raises:
        ValueError: If date_str is not an ISO date
    """
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"Invalid date format '{date_str}'. Expected YYYY-MM-DD") from e
