"""
Timezone utilities for the watch faces.

Provides timezone parsing, local timezone detection and common timezone lists.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple, Union
import time

import pytz

from core.logging.logger import get_logger

logger = get_logger(__name__)

LOCAL = 'local'

TzInfo = Union[timezone, pytz.BaseTzInfo]


def _parse_utc_offset(tz_str: str) -> Optional[timezone]:
    """Parse 'UTC', 'UTC+5:30' or 'UTC-7' into a fixed-offset timezone."""
    if not tz_str.upper().startswith('UTC'):
        return None

    offset_str = tz_str[3:]
    if not offset_str or offset_str in ('+0', '-0', '+0:00', '-0:00'):
        return timezone.utc

    if offset_str[0] in ('+', '-'):
        sign = 1 if offset_str[0] == '+' else -1
        offset_str = offset_str[1:]
    else:
        sign = 1

    if ':' in offset_str:
        hours_str, minutes_str = offset_str.split(':', 1)
        hours, minutes = int(hours_str), int(minutes_str)
    else:
        hours, minutes = int(offset_str), 0

    if not (0 <= hours <= 14 and 0 <= minutes < 60):
        raise ValueError(f"offset out of range: {tz_str}")

    return timezone(timedelta(hours=sign * hours, minutes=sign * minutes))


def parse_timezone(tz_str: Optional[str]) -> Optional[TzInfo]:
    """
    Parse timezone string into timezone object.

    Supports:
    - 'local' or empty: System local time (None)
    - pytz timezone names: 'US/Eastern', 'Europe/London', etc.
    - Custom UTC offsets: 'UTC+5:30', 'UTC-7', 'UTC+0'

    Unknown strings fall back to local time.

    Args:
        tz_str: Timezone string

    Returns:
        Timezone object or None for local time
    """
    if not tz_str or tz_str == LOCAL:
        return None

    try:
        return pytz.timezone(tz_str)
    except pytz.UnknownTimeZoneError:
        pass

    try:
        offset_tz = _parse_utc_offset(tz_str)
    except (ValueError, IndexError) as e:
        logger.warning(f"Failed to parse UTC offset '{tz_str}': {e}")
        offset_tz = None
    if offset_tz is not None:
        return offset_tz

    logger.warning(f"[FALLBACK] Unknown timezone '{tz_str}', using local time")
    return None


def validate_timezone(timezone_str: Optional[str]) -> bool:
    """
    Validate timezone string.

    Args:
        timezone_str: Timezone string to validate

    Returns:
        True if valid, False otherwise
    """
    if not timezone_str or timezone_str == LOCAL:
        return True

    try:
        pytz.timezone(timezone_str)
        return True
    except pytz.UnknownTimeZoneError:
        pass

    try:
        return _parse_utc_offset(timezone_str) is not None
    except (ValueError, IndexError):
        return False


def get_local_timezone() -> str:
    """
    Auto-detect the local timezone.

    Returns:
        A pytz timezone name whose current offset matches the system offset,
        or a 'UTC±H[:MM]' string when no name matches.
    """
    offset = -time.altzone if time.daylight and time.localtime().tm_isdst > 0 else -time.timezone

    for tz_name in pytz.common_timezones:
        try:
            now = datetime.now(pytz.timezone(tz_name))
        except pytz.UnknownTimeZoneError:
            continue
        if now.utcoffset().total_seconds() == offset:
            logger.info(f"Auto-detected timezone: {tz_name}")
            return tz_name

    hours = int(offset / 3600)
    minutes = abs(int((offset % 3600) / 60))
    if minutes == 0:
        return f"UTC{hours:+d}"
    return f"UTC{hours:+d}:{minutes:02d}"


def get_common_timezones() -> List[Tuple[str, str]]:
    """
    Get list of common timezones with display names.

    Returns:
        List of (display_name, timezone_str) tuples
    """
    timezones = [
        ("Local Time", LOCAL),
        ("UTC", "UTC"),
    ]

    common_zones = [
        "US/Eastern",
        "US/Central",
        "US/Mountain",
        "US/Pacific",
        "Europe/London",
        "Europe/Paris",
        "Europe/Berlin",
        "Europe/Moscow",
        "Africa/Lagos",
        "Africa/Nairobi",
        "Africa/Johannesburg",
        "Asia/Dubai",
        "Asia/Kolkata",
        "Asia/Singapore",
        "Asia/Tokyo",
        "Australia/Sydney",
        "Pacific/Auckland",
        "America/Sao_Paulo",
    ]
    timezones.extend((name.replace('_', ' '), name) for name in common_zones)

    return timezones
