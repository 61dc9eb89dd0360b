"""Timestamp assembly from the GPRMC time and date groups.

GPRMC splits the fix time into ``hhmmss`` and ``ddmmyy`` groups. The date
group is transmitted day first, so it is reversed into calendar order
before the two halves are merged into one UTC timestamp.
"""

import logging
from datetime import datetime, timezone

__all__ = ["assemble_datetime", "expand_year"]

logger = logging.getLogger(__name__)

# NMEA two-digit years are offsets into the current century
_CENTURY = 2000


def expand_year(year: int) -> int:
    """Expand a two-digit year (00-99 -> 2000-2099); larger years pass through."""
    if year < 100:
        return _CENTURY + year
    return year


def assemble_datetime(
    hour: int,
    minute: int,
    second: int,
    day: int,
    month: int,
    year: int,
) -> datetime | None:
    """Merge a time triple and a wire-order date triple into a UTC datetime.

    Impossible calendar values (month 13, day 0, hour 24, ...) are rejected
    rather than rolled over into a neighbouring day or month.

    Args:
        hour: Hour of day (0-23)
        minute: Minute (0-59)
        second: Second (0-59)
        day: Day of month, as it appears first in the ``ddmmyy`` group
        month: Month (1-12)
        year: Two-digit year offset, or a full year

    Returns:
        Timezone-aware UTC datetime, or None if the values do not form a
        real calendar instant

    Example:
        >>> assemble_datetime(10, 20, 30, 1, 2, 23)
        datetime.datetime(2023, 2, 1, 10, 20, 30, tzinfo=datetime.timezone.utc)
    """
    try:
        return datetime(
            expand_year(year),
            month,
            day,
            hour,
            minute,
            second,
            tzinfo=timezone.utc,
        )
    except ValueError:
        logger.debug(
            "Rejected impossible timestamp %02d:%02d:%02d %02d/%02d/%02d",
            hour, minute, second, day, month, year,
        )
        return None
