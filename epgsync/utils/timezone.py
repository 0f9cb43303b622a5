"""
Date and Time utilities

This module handles timezone loading, day-start anchoring and validation of
provider timestamps against the calendar day they were requested for.
"""
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from epgsync.errors import DateRangeError, TimezoneLoadError

logger = logging.getLogger(__name__)

UTC8_LOCATION = "Asia/Shanghai"
DATE_LABEL_FORMAT = "%Y-%m-%d"

# Accepted distance of a program start from the day-start anchor
DAY_SPAN_BEFORE = timedelta(days=1)
DAY_SPAN_AFTER = timedelta(days=1)


class DateFormatError(ValueError):
    """Raised when date format is invalid"""
    pass


def load_zone(name: str) -> ZoneInfo:
    """
    Resolve an IANA timezone name

    Raises:
        TimezoneLoadError: If the zone is unknown on this system
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise TimezoneLoadError(name) from e


def parse_date_label(label: str) -> date:
    """
    Parse a 'YYYY-MM-DD' label into a date

    Raises:
        DateFormatError: If the label is not a valid calendar date
    """
    try:
        return datetime.strptime(label, DATE_LABEL_FORMAT).date()
    except (ValueError, TypeError) as e:
        raise DateFormatError(f"Invalid date label: '{label}'") from e


def format_date_label(day: date) -> str:
    return day.strftime(DATE_LABEL_FORMAT)


def start_of_day(day: date, zone: ZoneInfo) -> datetime:
    """Midnight of the given calendar day in the given zone"""
    return datetime.combine(day, time.min, tzinfo=zone)


def today_in_zone(zone: ZoneInfo) -> date:
    return datetime.now(zone).date()


def resolve_time_range_from_timestamp(
    start_ts: int,
    end_ts: int,
    day: date,
    zone: ZoneInfo,
    channel_id: str,
) -> tuple[datetime, datetime]:
    """
    Validate raw Unix seconds against the requested day and anchor them in a zone

    The start must fall within one day either side of midnight of
    ``day`` in ``zone``; the end must be strictly after the start. The returned
    datetimes keep the absolute instants of the raw values, expressed in ``zone``.

    Args:
        start_ts: Program start, Unix seconds
        end_ts: Program end, Unix seconds
        day: Calendar day the listing was requested for
        zone: Zone the provider's day is defined in
        channel_id: Caller channel id, for diagnostics

    Returns:
        Tuple of (start_time, end_time)

    Raises:
        DateRangeError: If the timestamps do not belong to the requested day
    """
    label = format_date_label(day)

    if end_ts <= start_ts:
        raise DateRangeError(
            channel_id, label, f"end {end_ts} is not after start {start_ts}"
        )

    day_start = int(start_of_day(day, zone).timestamp())
    window_start = day_start - int(DAY_SPAN_BEFORE.total_seconds())
    window_end = day_start + int(DAY_SPAN_AFTER.total_seconds())
    if not window_start <= start_ts <= window_end:
        raise DateRangeError(
            channel_id,
            label,
            f"start {start_ts} is outside [{window_start}, {window_end}] around day start {day_start}",
        )

    try:
        start_time = datetime.fromtimestamp(start_ts, tz=zone)
        end_time = datetime.fromtimestamp(end_ts, tz=zone)
    except (OverflowError, OSError, ValueError) as e:
        raise DateRangeError(channel_id, label, str(e)) from e

    return start_time, end_time
