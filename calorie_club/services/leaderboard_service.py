# calorie_club/services/leaderboard_service.py
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, List, Sequence

from flask import current_app
from sqlalchemy.orm import selectinload

from calorie_club.enums.app_enum import MetricKind
from calorie_club.extensions import db
from calorie_club.models.user import User
from calorie_club.models.weight_entry import WeightEntry
from calorie_club.services.streak_service import streak_from_timestamps
from calorie_club.utils.date_utils import (
    end_of_day,
    end_of_week,
    in_range,
    start_of_day,
    start_of_week,
)
from calorie_club.utils.jwt_utils import app_zone, utc_now
from calorie_club.utils.utils import require_finite, round_half_up

WEIGHT_WINDOW = 10


@dataclass(frozen=True)
class LeaderboardInput:
    subject_id: int
    display_name: str
    value: float


@dataclass(frozen=True)
class LeaderboardRow:
    subject_id: int
    display_name: str
    value: float
    rank: int

    def to_dict(self):
        return {
            "id": self.subject_id,
            "name": self.display_name,
            "value": self.value,
            "rank": self.rank,
        }


def rank(rows: Iterable[LeaderboardInput]) -> List[LeaderboardRow]:
    """
    Sort by value, highest first, and number the rows 1..n.

    Ties are not compressed: equal values get consecutive ranks and keep
    their input order (sorted() is stable).
    """
    rows = list(rows)
    for row in rows:
        require_finite(row.value, "value")

    ordered = sorted(rows, key=lambda r: r.value, reverse=True)
    return [
        LeaderboardRow(
            subject_id=r.subject_id,
            display_name=r.display_name,
            value=r.value,
            rank=index + 1,
        )
        for index, r in enumerate(ordered)
    ]


# -------------------- METRICS -------------------- #

def streak_value(timestamps: Iterable[datetime], now: datetime, zone: tzinfo) -> int:
    return streak_from_timestamps(None, timestamps, now, zone)


def _calories_between(entries, start: datetime, end: datetime, zone: tzinfo) -> int:
    total = 0
    for logged_at, calories in entries:
        if in_range(logged_at, start, end, zone):
            total += require_finite(calories, "calories")
    return round_half_up(total)


def today_calories(entries: Iterable[tuple], now: datetime, zone: tzinfo) -> int:
    """`entries` are (logged_at, calories) pairs."""
    return _calories_between(entries, start_of_day(now, zone), end_of_day(now, zone), zone)


def weekly_calories(entries: Iterable[tuple], now: datetime, zone: tzinfo) -> int:
    """Calories in the current Monday-start week."""
    return _calories_between(entries, start_of_week(now, zone), end_of_week(now, zone), zone)


def weight_loss(weights: Sequence[float], window: int = WEIGHT_WINDOW) -> float:
    """
    `weights` are ordered newest first. Positive result means weight lost.
    """
    recent = list(weights)[:window]
    if len(recent) < 2:
        return 0
    latest = require_finite(recent[0], "weight")
    oldest = require_finite(recent[-1], "weight")
    return round_half_up(oldest - latest, 1)


class LeaderboardService:

    @staticmethod
    def metric_values(metric: MetricKind, users, now: datetime, zone: tzinfo, window: int = WEIGHT_WINDOW):
        rows = []
        for user in users:
            if metric == MetricKind.streak:
                value = streak_value([e.logged_at for e in user.food_entries], now, zone)
            elif metric == MetricKind.today_calories:
                value = today_calories([(e.logged_at, e.calories) for e in user.food_entries], now, zone)
            elif metric == MetricKind.weekly_calories:
                value = weekly_calories([(e.logged_at, e.calories) for e in user.food_entries], now, zone)
            else:
                weights = (
                    db.session.query(WeightEntry.weight)
                    .filter(WeightEntry.user_id == user.id)
                    .order_by(WeightEntry.logged_at.desc(), WeightEntry.id.desc())
                    .limit(window)
                    .all()
                )
                value = weight_loss([w for (w,) in weights], window)

            rows.append(LeaderboardInput(subject_id=user.id, display_name=user.name, value=value))
        return rows

    @staticmethod
    def get_leaderboard(metric_name: str, now: datetime | None = None):
        try:
            metric = MetricKind(metric_name)
        except ValueError:
            current_app.logger.info("Unknown leaderboard type %r, returning empty board", metric_name)
            return []

        now = now or utc_now()
        window = current_app.config.get("LEADERBOARD_WEIGHT_WINDOW", WEIGHT_WINDOW)

        query = User.query.order_by(User.id.asc())
        if metric != MetricKind.weight_loss:
            query = query.options(selectinload(User.food_entries))
        users = query.all()

        rows = LeaderboardService.metric_values(metric, users, now, app_zone(), window)
        return [row.to_dict() for row in rank(rows)]
