# calorie_club/services/summary_service.py
from datetime import datetime

from flask import current_app

from calorie_club.models.food_entry import FoodEntry
from calorie_club.services.leaderboard_service import today_calories
from calorie_club.services.streak_service import streak_from_timestamps
from calorie_club.utils.date_utils import bucket
from calorie_club.utils.jwt_utils import app_zone, utc_now


class SummaryService:

    @staticmethod
    def get_daily_summary(user_id: int, now: datetime | None = None):
        """
        Today's calories against the goal, plus the food-logging streak.
        """
        zone = app_zone()
        now = now or utc_now()
        goal = current_app.config.get("DEFAULT_CALORIE_GOAL", 2000)

        rows = (
            FoodEntry.query
            .with_entities(FoodEntry.logged_at, FoodEntry.calories)
            .filter(FoodEntry.user_id == user_id)
            .all()
        )

        total = today_calories([(r.logged_at, r.calories) for r in rows], now, zone)
        streak = streak_from_timestamps(user_id, [r.logged_at for r in rows], now, zone)

        return {
            "date": bucket(now, zone).isoformat(),
            "total_calories": total,
            "goal_calories": goal,
            "remaining": max(goal - total, 0),
            "is_over": total > goal,
            "streak": streak
        }
