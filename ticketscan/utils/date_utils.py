"""
Date, time and duration helpers shared by the provider adapters.

Providers encode durations either as ISO-8601 strings ('PT4H30M') or as raw
minutes, and times either as full timestamps or as 'YYYY-MM-DD HH:MM'
strings. Everything is normalized to 'Nh Mm' durations and local 'HH:MM'
times here.
"""

import re
from datetime import date, datetime
from typing import Any, Optional, Tuple

ISO_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?T?(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?$"
)
CLOCK_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")


def format_duration(minutes: Any) -> str:
    """
    Format a duration given in minutes as 'Nh Mm'.

    Args:
        minutes: Duration in minutes (malformed or negative input reads as 0)

    Returns:
        Human readable duration

    Examples:
        >>> format_duration(270)
        '4h 30m'
        >>> format_duration(45)
        '0h 45m'
        >>> format_duration(None)
        '0h 0m'
    """
    try:
        total = int(minutes)
    except (TypeError, ValueError):
        total = 0
    total = max(0, total)
    return f"{total // 60}h {total % 60}m"


def parse_iso_duration(value: Optional[str]) -> Optional[int]:
    """
    Parse an ISO-8601 duration into minutes.

    Returns None when the string is not a duration. Seconds are dropped.

    Examples:
        >>> parse_iso_duration("PT4H30M")
        270
        >>> parse_iso_duration("P1DT2H")
        1560
        >>> parse_iso_duration("4 hours") is None
        True
    """
    if not value or not isinstance(value, str):
        return None

    match = ISO_DURATION_PATTERN.match(value.strip().upper())
    if not match or value.strip().upper() in ("P", "PT"):
        return None

    days = int(match.group("days") or 0)
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    return days * 24 * 60 + hours * 60 + minutes


def format_iso_duration(value: Optional[str]) -> str:
    """
    Convert an ISO-8601 duration to 'Nh Mm'.

    Unparseable input is returned unchanged, and a missing value reads as zero.

    Examples:
        >>> format_iso_duration("PT4H30M")
        '4h 30m'
        >>> format_iso_duration("PT45M")
        '0h 45m'
        >>> format_iso_duration("soon")
        'soon'
    """
    if not value:
        return format_duration(0)

    minutes = parse_iso_duration(value)
    if minutes is None:
        return value
    return format_duration(minutes)


def format_local_time(value: Any) -> str:
    """
    Extract the local wall-clock time from a provider timestamp.

    Accepts ISO timestamps ('2024-01-15T10:30:00', with or without offset),
    'YYYY-MM-DD HH:MM' strings and bare 'HH:MM' strings. The wall-clock time
    is kept as given, with no timezone conversion, since providers report
    times local to the airport.

    Examples:
        >>> format_local_time("2024-01-15T10:30:00")
        '10:30'
        >>> format_local_time("2024-01-15 7:05")
        '07:05'
        >>> format_local_time("garbage")
        'garbage'
    """
    if isinstance(value, datetime):
        return value.strftime("%H:%M")

    if not value or not isinstance(value, str):
        return ""

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).strftime("%H:%M")
    except ValueError:
        pass

    match = CLOCK_PATTERN.search(text)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    return text


def split_date(value: date) -> Tuple[int, int, int]:
    """Return (year, month, day) for a date."""
    return value.year, value.month, value.day


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()
