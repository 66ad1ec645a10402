"""
Unit and time conversion utilities for openLap.

Provides speed conversion and the fixed timezone shift used for display
and the lap log.
"""

from lap_timing.config import KNOTS_TO_KMH
from lap_timing.data.models import Fix, LocalTime


# Speed conversions
def knots_to_kmh(knots):
    """Convert knots to km/h."""
    return knots * KNOTS_TO_KMH


# Time conversions
def to_local_time(fix: Fix, offset_hours: int) -> LocalTime:
    """
    Shift the fix's UTC time by a fixed number of hours.

    Only the day carries: month and year are never rolled over, so the last
    evening of a month can show day 32.
    """
    hour = fix.hour + offset_hours
    day = fix.day
    if hour >= 24:
        day += hour // 24
        hour = hour % 24
    return LocalTime(
        year=fix.year,
        month=fix.month,
        day=day,
        hour=hour,
        minute=fix.minute,
        second=fix.second,
    )


def format_timestamp(local_time: LocalTime) -> str:
    """Format as YYYY/MM/DD-HH:MM:SS for the lap log."""
    return (f"{local_time.year:04d}/{local_time.month:02d}/{local_time.day:02d}-"
            f"{local_time.hour:02d}:{local_time.minute:02d}:{local_time.second:02d}")


def format_lap_time(seconds):
    """Format seconds as M:SS.mmm, or a placeholder when unknown."""
    if seconds is None or seconds < 0:
        return "--:--.---"
    minutes = int(seconds // 60)
    secs = seconds % 60
    return f"{minutes}:{secs:06.3f}"
