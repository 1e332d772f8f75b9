"""
Calendar-day helpers.

Every timestamp in the tracker is reduced to a calendar day ("day key") in a
single configured zone before it is compared with anything else. Stored
timestamps are naive UTC, so naive input is read as UTC.
"""
from collections import OrderedDict
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Dict, Iterable, List, TypeVar

T = TypeVar("T")

DAY = timedelta(days=1)


def _require_datetime(timestamp) -> datetime:
    if isinstance(timestamp, bool) or not isinstance(timestamp, datetime):
        raise TypeError(f"Expected datetime, got {type(timestamp).__name__}")
    return timestamp


def to_zone(timestamp: datetime, zone: tzinfo) -> datetime:
    timestamp = _require_datetime(timestamp)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(zone)


def bucket(timestamp: datetime, zone: tzinfo) -> date:
    """
    Truncate a timestamp to local midnight in `zone` and return that day.
    """
    return to_zone(timestamp, zone).date()


def start_of_day(timestamp: datetime, zone: tzinfo) -> datetime:
    return datetime.combine(bucket(timestamp, zone), time.min, tzinfo=zone)


def end_of_day(timestamp: datetime, zone: tzinfo) -> datetime:
    return datetime.combine(bucket(timestamp, zone), time.max, tzinfo=zone)


def start_of_week(timestamp: datetime, zone: tzinfo) -> datetime:
    """Local midnight of the Monday starting the week of `timestamp`."""
    day = bucket(timestamp, zone)
    monday = day - timedelta(days=day.weekday())
    return datetime.combine(monday, time.min, tzinfo=zone)


def end_of_week(timestamp: datetime, zone: tzinfo) -> datetime:
    day = bucket(timestamp, zone)
    sunday = day + timedelta(days=6 - day.weekday())
    return datetime.combine(sunday, time.max, tzinfo=zone)


def days_between(later: date, earlier: date) -> int:
    return (later - earlier).days


def in_range(timestamp: datetime, start: datetime, end: datetime, zone: tzinfo) -> bool:
    local = to_zone(timestamp, zone)
    return start <= local <= end


def group_by_day(
        records: Iterable[T],
        zone: tzinfo,
        key: Callable[[T], datetime]
) -> Dict[date, List[T]]:
    """
    Group records into calendar-day buckets, most recent day first.
    Records keep their input order inside a bucket.
    """
    buckets: Dict[date, List[T]] = {}
    for record in records:
        buckets.setdefault(bucket(key(record), zone), []).append(record)

    return OrderedDict(
        (day, buckets[day]) for day in sorted(buckets, reverse=True)
    )


def format_date(day: date, fmt: str = "%b %-d, %Y") -> str:
    # %-d is not portable, build the day number by hand
    if "%-d" in fmt:
        fmt = fmt.replace("%-d", str(day.day))
    return day.strftime(fmt)


def day_label(day: date, today: date) -> str:
    diff = days_between(today, day)
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Yesterday"
    return format_date(day)


def friendly_date_label(timestamp: datetime, now: datetime, zone: tzinfo) -> str:
    return day_label(bucket(timestamp, zone), bucket(now, zone))


def parse_timestamp(value) -> datetime:
    """
    Parse an ISO-8601 timestamp from a request payload into naive UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed

