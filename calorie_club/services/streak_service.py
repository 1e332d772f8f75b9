# calorie_club/services/streak_service.py
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable

from calorie_club.utils.date_utils import DAY, bucket, days_between


@dataclass(frozen=True)
class ActivityEvent:
    user_id: int
    timestamp: datetime


@dataclass(frozen=True)
class StreakResult:
    count: int = 0


def compute_streak(events: Iterable[ActivityEvent], reference_now: datetime, zone: tzinfo) -> StreakResult:
    """
    Number of consecutive logged days ending at the most recent one.

    The streak is still alive when the last entry was yesterday; anything
    older than that breaks it. Several entries on one day count once.
    """
    day_keys = sorted({bucket(e.timestamp, zone) for e in events}, reverse=True)
    if not day_keys:
        return StreakResult(0)

    yesterday = bucket(reference_now, zone) - DAY
    if day_keys[0] < yesterday:
        return StreakResult(0)

    count = 1
    for newer, older in zip(day_keys, day_keys[1:]):
        gap = days_between(newer, older)
        if gap == 1:
            count += 1
        elif gap > 1:
            break
        # gap == 0 cannot happen after the set, nothing to count

    return StreakResult(count)


def streak_from_timestamps(user_id, timestamps: Iterable[datetime], reference_now: datetime, zone: tzinfo) -> int:
    events = [ActivityEvent(user_id=user_id, timestamp=ts) for ts in timestamps]
    return compute_streak(events, reference_now, zone).count


def longest_run(timestamps: Iterable[datetime], zone: tzinfo) -> int:
    """
    Longest run of consecutive logged days anywhere in `timestamps`.
    Used for challenge progress, where the window may already be closed.
    """
    day_keys = sorted({bucket(ts, zone) for ts in timestamps})
    if not day_keys:
        return 0

    best = current = 1
    for earlier, later in zip(day_keys, day_keys[1:]):
        if days_between(later, earlier) == 1:
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best
