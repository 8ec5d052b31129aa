"""Wall-clock state shared by the watch faces.

A ClockState is derived from a timestamp and a timezone string on every
render call and is never kept between frames.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import time

from faces.timezone_utils import parse_timezone

_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def to_hour12(hour: int) -> int:
    """Map a raw 0-11 hour to its displayed value (0 shows as 12)."""
    return 12 if hour == 0 else hour


def format_date_label(month: int, day: int) -> str:
    """Format as 'MMM DD', e.g. 'Jul 04'."""
    return f"{_MONTH_ABBREVIATIONS[month - 1]} {day:02d}"


@dataclass(frozen=True)
class ClockState:
    """Time fields for a single render pass."""

    timestamp_ms: int
    timezone: str
    hour24: int
    minute: int
    second: float
    month: int
    day: int

    @property
    def hour(self) -> int:
        """Raw 0-11 hour, as used for the hour hand."""
        return self.hour24 % 12

    @property
    def hour12(self) -> int:
        return to_hour12(self.hour)

    @property
    def is_pm(self) -> bool:
        return self.hour24 >= 12

    @property
    def date_label(self) -> str:
        return format_date_label(self.month, self.day)

    @property
    def time_text(self) -> str:
        return format_time_text(self)


def format_time_text(state: ClockState) -> str:
    """Format as 'H:MM AM|PM', e.g. '12:05 AM' or '1:30 PM'."""
    suffix = "PM" if state.is_pm else "AM"
    return "%d:%02d %s" % (state.hour12, state.minute, suffix)


def current_time_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def compute_state(timestamp_ms: int, timezone: str = 'local') -> ClockState:
    """
    Derive the clock state for a timestamp.

    Args:
        timestamp_ms: Epoch milliseconds
        timezone: 'local', a pytz name or a 'UTC±HH:MM' offset. Unknown
            values fall back to local time.

    Returns:
        ClockState with the seconds field carrying the millisecond fraction.
    """
    tz = parse_timezone(timezone)
    whole_seconds, millis = divmod(int(timestamp_ms), 1000)
    if tz is None:
        dt = datetime.fromtimestamp(whole_seconds)
    else:
        dt = datetime.fromtimestamp(whole_seconds, tz)

    return ClockState(
        timestamp_ms=int(timestamp_ms),
        timezone=timezone or 'local',
        hour24=dt.hour,
        minute=dt.minute,
        second=dt.second + millis / 1000.0,
        month=dt.month,
        day=dt.day,
    )
