from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from calorie_club.utils.date_utils import (
    bucket,
    day_label,
    end_of_week,
    friendly_date_label,
    group_by_day,
    parse_timestamp,
    start_of_day,
    start_of_week,
)

UTC = ZoneInfo('UTC')
NEW_YORK = ZoneInfo('America/New_York')


class TestBucket:

    def test_naive_timestamps_are_read_as_utc(self):
        assert bucket(datetime(2025, 3, 4, 23, 59), UTC) == date(2025, 3, 4)
        assert bucket(datetime(2025, 3, 5, 0, 0), UTC) == date(2025, 3, 5)

    def test_zone_moves_the_day_boundary(self):
        # 03:00 UTC is still the previous evening in New York
        assert bucket(datetime(2025, 3, 4, 3, 0), NEW_YORK) == date(2025, 3, 3)

    def test_aware_timestamps_are_converted(self):
        ts = datetime(2025, 3, 4, 1, 0, tzinfo=timezone.utc)
        assert bucket(ts, NEW_YORK) == date(2025, 3, 3)
        assert bucket(ts, UTC) == date(2025, 3, 4)

    def test_same_day_same_key(self):
        morning = datetime(2025, 3, 4, 0, 1)
        night = datetime(2025, 3, 4, 23, 58)
        assert bucket(morning, UTC) == bucket(night, UTC)

    def test_rejects_non_datetime(self):
        with pytest.raises(TypeError):
            bucket('2025-03-04', UTC)
        with pytest.raises(TypeError):
            bucket(date(2025, 3, 4), UTC)


class TestRanges:

    def test_start_of_day_is_local_midnight(self):
        start = start_of_day(datetime(2025, 3, 4, 15, 30), NEW_YORK)
        assert start.tzinfo == NEW_YORK
        assert (start.year, start.month, start.day, start.hour) == (2025, 3, 4, 0)

    def test_week_starts_on_monday(self):
        wednesday = datetime(2025, 3, 5, 12, 0)
        assert start_of_week(wednesday, UTC).date() == date(2025, 3, 3)
        assert end_of_week(wednesday, UTC).date() == date(2025, 3, 9)

    def test_monday_is_its_own_week_start(self):
        monday = datetime(2025, 3, 3, 0, 0)
        assert start_of_week(monday, UTC).date() == date(2025, 3, 3)

    def test_sunday_belongs_to_previous_week(self):
        sunday = datetime(2025, 3, 9, 23, 0)
        assert start_of_week(sunday, UTC).date() == date(2025, 3, 3)


class TestGroupByDay:

    def test_groups_newest_day_first(self):
        records = [
            {'at': datetime(2025, 3, 3, 8, 0), 'n': 1},
            {'at': datetime(2025, 3, 4, 8, 0), 'n': 2},
            {'at': datetime(2025, 3, 3, 20, 0), 'n': 3},
        ]
        grouped = group_by_day(records, UTC, key=lambda r: r['at'])

        assert list(grouped) == [date(2025, 3, 4), date(2025, 3, 3)]
        assert [r['n'] for r in grouped[date(2025, 3, 3)]] == [1, 3]

    def test_empty_input(self):
        assert group_by_day([], UTC, key=lambda r: r) == {}


class TestLabels:

    def test_today_and_yesterday(self):
        now = datetime(2025, 3, 4, 12, 0)
        assert friendly_date_label(datetime(2025, 3, 4, 1, 0), now, UTC) == 'Today'
        assert friendly_date_label(datetime(2025, 3, 3, 23, 0), now, UTC) == 'Yesterday'

    def test_older_days_are_formatted(self):
        assert day_label(date(2025, 3, 1), date(2025, 3, 4)) == 'Mar 1, 2025'


class TestParseTimestamp:

    def test_z_suffix_becomes_naive_utc(self):
        assert parse_timestamp('2025-03-04T10:15:00Z') == datetime(2025, 3, 4, 10, 15)

    def test_offset_is_normalized_to_utc(self):
        assert parse_timestamp('2025-03-04T10:15:00+02:00') == datetime(2025, 3, 4, 8, 15)

    def test_date_only(self):
        assert parse_timestamp('2025-03-04') == datetime(2025, 3, 4)

    @pytest.mark.parametrize('value', ['', 'not-a-date', None, 12])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)
