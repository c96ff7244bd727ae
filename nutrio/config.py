"""Configuration management"""
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Calendar day boundaries for daily caps are computed in this zone
# when the caller does not pass an explicit date.
DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")

# Daily XP caps (anti-farming for low-effort repeatable actions)
MEAL_LOGGING_DAILY_XP_CAP: int = int(os.getenv("MEAL_LOGGING_DAILY_XP_CAP", "200"))
WATER_LOGGING_DAILY_XP_CAP: int = int(os.getenv("WATER_LOGGING_DAILY_XP_CAP", "100"))

# Optimistic concurrency: how many times a grant is recomputed after losing
# a compare-and-swap against the progression store
STALE_STATE_MAX_RETRIES: int = int(os.getenv("STALE_STATE_MAX_RETRIES", "3"))

# Achievement catalog (JSON list of achievement definitions)
_catalog_path = os.getenv("ACHIEVEMENT_CATALOG_PATH", "")
ACHIEVEMENT_CATALOG_PATH: Optional[Path] = Path(_catalog_path) if _catalog_path else None

# Monitoring
ENABLE_PROMETHEUS: bool = os.getenv("ENABLE_PROMETHEUS", "true").lower() == "true"


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"LOG_LEVEL must be a standard logging level, got {LOG_LEVEL!r}")
    try:
        ZoneInfo(DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"DEFAULT_TIMEZONE is not a known IANA timezone: {DEFAULT_TIMEZONE!r}")
    if MEAL_LOGGING_DAILY_XP_CAP < 0 or WATER_LOGGING_DAILY_XP_CAP < 0:
        raise ValueError("Daily XP caps must be non-negative")
    if STALE_STATE_MAX_RETRIES < 0:
        raise ValueError("STALE_STATE_MAX_RETRIES must be non-negative")
    if ACHIEVEMENT_CATALOG_PATH is not None and not ACHIEVEMENT_CATALOG_PATH.is_file():
        raise ValueError(f"ACHIEVEMENT_CATALOG_PATH does not exist: {ACHIEVEMENT_CATALOG_PATH}")
