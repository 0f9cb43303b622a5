"""
Tests for utils/timezone.py: zone loading, day anchoring and
resolve_time_range_from_timestamp().
"""
from datetime import date, datetime, timezone

import pytest

from epgsync.errors import DateRangeError, TimezoneLoadError
from epgsync.utils.timezone import (
    DateFormatError,
    load_zone,
    parse_date_label,
    resolve_time_range_from_timestamp,
    start_of_day,
)

from tests.conftest import SHANGHAI, TARGET_DAY, epoch


class TestLoadZone:
    def test_known_zone(self):
        assert load_zone("Asia/Shanghai").key == "Asia/Shanghai"

    def test_unknown_zone_raises(self):
        with pytest.raises(TimezoneLoadError) as exc_info:
            load_zone("Mars/Olympus_Mons")
        assert exc_info.value.zone_name == "Mars/Olympus_Mons"


class TestDateLabels:
    def test_parse_valid_label(self):
        assert parse_date_label("2024-03-01") == date(2024, 3, 1)

    @pytest.mark.parametrize("label", ["2024-13-01", "01/03/2024", "", "2024-02-30"])
    def test_parse_invalid_label(self, label):
        with pytest.raises(DateFormatError):
            parse_date_label(label)


def test_start_of_day_is_midnight_in_zone():
    anchor = start_of_day(TARGET_DAY, SHANGHAI)
    assert anchor.astimezone(timezone.utc) == datetime(2024, 2, 29, 16, 0, tzinfo=timezone.utc)
    assert int(anchor.timestamp()) == 1709222400


class TestResolveTimeRange:
    def test_same_day_program_resolves(self):
        start, end = resolve_time_range_from_timestamp(
            epoch(2024, 3, 1, 8), epoch(2024, 3, 1, 9), TARGET_DAY, SHANGHAI, "henan"
        )
        assert start == datetime(2024, 3, 1, 8, 0, tzinfo=SHANGHAI)
        assert end == datetime(2024, 3, 1, 9, 0, tzinfo=SHANGHAI)
        assert start < end

    def test_absolute_instant_is_preserved(self):
        raw = epoch(2024, 3, 1, 8)
        start, _ = resolve_time_range_from_timestamp(raw, raw + 60, TARGET_DAY, SHANGHAI, "henan")
        assert int(start.timestamp()) == raw
        assert start.utcoffset().total_seconds() == 8 * 3600

    def test_previous_evening_start_is_accepted(self):
        start, _ = resolve_time_range_from_timestamp(
            epoch(2024, 2, 29, 23, 30), epoch(2024, 3, 1, 0, 30), TARGET_DAY, SHANGHAI, "henan"
        )
        assert start.day == 29

    def test_start_more_than_a_day_early_is_rejected(self):
        with pytest.raises(DateRangeError) as exc_info:
            resolve_time_range_from_timestamp(
                epoch(2024, 2, 27, 8), epoch(2024, 2, 27, 9), TARGET_DAY, SHANGHAI, "henan"
            )
        assert exc_info.value.channel_id == "henan"
        assert exc_info.value.date == "2024-03-01"

    def test_start_far_in_future_is_rejected(self):
        with pytest.raises(DateRangeError):
            resolve_time_range_from_timestamp(
                epoch(2024, 3, 5, 8), epoch(2024, 3, 5, 9), TARGET_DAY, SHANGHAI, "henan"
            )

    def test_window_lower_bound_is_inclusive(self):
        lower = epoch(2024, 2, 29)
        start, _ = resolve_time_range_from_timestamp(lower, lower + 60, TARGET_DAY, SHANGHAI, "henan")
        assert int(start.timestamp()) == lower

    def test_window_upper_bound_is_inclusive(self):
        upper = epoch(2024, 3, 2)
        start, _ = resolve_time_range_from_timestamp(upper, upper + 60, TARGET_DAY, SHANGHAI, "henan")
        assert int(start.timestamp()) == upper

    def test_start_just_past_upper_bound_is_rejected(self):
        late = epoch(2024, 3, 2, 0, 1)
        with pytest.raises(DateRangeError):
            resolve_time_range_from_timestamp(late, late + 60, TARGET_DAY, SHANGHAI, "henan")

    def test_next_day_evening_start_is_rejected(self):
        evening = epoch(2024, 3, 2, 20)
        with pytest.raises(DateRangeError):
            resolve_time_range_from_timestamp(evening, evening + 3600, TARGET_DAY, SHANGHAI, "henan")

    @pytest.mark.parametrize("offset", [0, -60])
    def test_end_not_after_start_is_rejected(self, offset):
        start = epoch(2024, 3, 1, 8)
        with pytest.raises(DateRangeError):
            resolve_time_range_from_timestamp(start, start + offset, TARGET_DAY, SHANGHAI, "henan")

    def test_day_relative_seconds_are_rejected(self):
        with pytest.raises(DateRangeError):
            resolve_time_range_from_timestamp(28800, 32400, TARGET_DAY, SHANGHAI, "henan")
