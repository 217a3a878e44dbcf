"""
Formatting Utilities

Functions for parsing and formatting times of day, and for rendering
man-hour and ratio values for display.
"""

import logging
import re
from datetime import datetime, time
from typing import Optional

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

_HH_MM_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")

# Two fill values with different hours
_FILL_DEFAULTS = (datetime(2000, 1, 1, 0, 0), datetime(2000, 1, 1, 1, 0))


def parse_time_of_day(value, default: Optional[int] = None, strict: bool = False) -> Optional[int]:
    """
    Convert a time of day to minutes after midnight.

    Args:
        value: "HH:MM" / "HH:MM:SS" string, int minutes, datetime/time object,
               or any other text dateutil can read ("7:30 AM", ISO timestamps)
        default: Returned when the value is missing or can't be parsed
        strict: Raise ValueError instead of returning the default

    Returns:
        Minutes after midnight (0-1439), or default

    Examples:
        >>> parse_time_of_day("07:30")
        450
        >>> parse_time_of_day("nonsense", default=0)
        0
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if strict:
            raise ValueError("Missing time of day")
        return default

    # bool is an int subclass, never a time
    if isinstance(value, bool):
        return _reject(value, default, strict)

    if isinstance(value, (int, float)):
        minutes = int(value)
        if 0 <= minutes < MINUTES_PER_DAY:
            return minutes
        return _reject(value, default, strict)

    if isinstance(value, datetime):
        return value.hour * 60 + value.minute

    if isinstance(value, time):
        return value.hour * 60 + value.minute

    text = str(value)
    match = _HH_MM_PATTERN.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours < 24 and minutes < 60:
            return hours * 60 + minutes
        return _reject(value, default, strict)

    try:
        parsed = dateutil_parser.parse(text, default=_FILL_DEFAULTS[0])
        check = dateutil_parser.parse(text, default=_FILL_DEFAULTS[1])
    except (ValueError, OverflowError, TypeError):
        return _reject(value, default, strict)

    # Dates and bare numbers carry no time: the hour then comes from the fill value
    if parsed.hour != check.hour:
        return _reject(value, default, strict)

    return parsed.hour * 60 + parsed.minute


def _reject(value, default: Optional[int], strict: bool) -> Optional[int]:
    if strict:
        raise ValueError(f"Not a time of day: {value!r}")
    logger.warning(f"Could not parse time of day {value!r}, using {default!r}")
    return default


def format_minutes(minutes) -> str:
    """
    Format minutes after midnight as "HH:MM".

    Hours are not wrapped at 24, so a window that runs past the end of the
    day renders as e.g. "24:15".
    """
    minutes = int(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time_range(start_minutes, end_minutes) -> str:
    """Format a [start, end) pair as "HH:MM - HH:MM"."""
    return f"{format_minutes(start_minutes)} - {format_minutes(end_minutes)}"


def format_hours(value: float) -> str:
    """Man-hours / machine-hours with two decimals."""
    return f"{value:.2f}"


def format_ratio(value: float) -> str:
    """RUP or productivity rate with two decimals."""
    return f"{value:.2f}"
