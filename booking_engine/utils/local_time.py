# booking_engine/utils/local_time.py
"""Establishment-local wall clock"""
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from booking_engine.config.settings import get_settings
from booking_engine.core.errors import ConfigError


def establishment_zone(establishment) -> ZoneInfo:
    tz_name = establishment.timezone or get_settings().DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"Invalid establishment timezone: {tz_name!r}", timezone=tz_name)


def local_now(establishment) -> datetime:
    """Current naive datetime in the establishment's time zone"""
    return datetime.now(establishment_zone(establishment)).replace(tzinfo=None)
