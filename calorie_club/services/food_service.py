# calorie_club/services/food_service.py
from datetime import timedelta

from flask import jsonify, current_app
from sqlalchemy import func

from calorie_club.extensions import db
from calorie_club.external.open_food_facts import FoodSearchError, search_foods
from calorie_club.models.food_entry import FoodEntry
from calorie_club.utils.date_utils import (
    bucket,
    day_label,
    group_by_day,
    parse_timestamp,
)
from calorie_club.utils.jwt_utils import app_zone, utc_now
from calorie_club.utils.utils import (
    parse_number,
    parse_optional_number,
    parse_text,
    round_half_up,
)

RECENT_FOODS_LIMIT = 10


def _round_avg(value):
    return round_half_up(value) if value else None


class FoodService:

    @staticmethod
    def get_entries(user_id: int, start_date: str | None, end_date: str | None):
        query = FoodEntry.query.filter_by(user_id=user_id)

        # Range only applies when both ends are given
        if start_date and end_date:
            try:
                start = parse_timestamp(start_date)
                end = parse_timestamp(end_date)
            except ValueError:
                return jsonify({"error": "Invalid date format"}), 400
            query = query.filter(FoodEntry.logged_at >= start, FoodEntry.logged_at <= end)

        entries = query.order_by(FoodEntry.logged_at.desc()).all()
        return jsonify({"entries": [e.to_dict() for e in entries]}), 200

    @staticmethod
    def add_entry(user_id: int, payload: dict):
        payload = payload if isinstance(payload, dict) else {}
        try:
            name = parse_text(payload.get("name"), "name")
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        calories = payload.get("calories")

        if not name or calories is None:
            return jsonify({"error": "Name and calories are required"}), 400

        try:
            entry = FoodEntry(
                user_id=user_id,
                name=name,
                calories=parse_number(calories, "calories"),
                protein=parse_optional_number(payload.get("protein"), "protein"),
                carbs=parse_optional_number(payload.get("carbs"), "carbs"),
                fat=parse_optional_number(payload.get("fat"), "fat"),
                logged_at=parse_timestamp(payload["loggedAt"]) if payload.get("loggedAt") else utc_now()
            )
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        db.session.add(entry)
        db.session.commit()
        current_app.logger.info("User %s logged food %r (%s kcal)", user_id, entry.name, entry.calories)

        return jsonify({"entry": entry.to_dict()}), 201

    @staticmethod
    def delete_entry(user_id: int, entry_id: int | None):
        if not entry_id:
            return jsonify({"error": "Entry ID required"}), 400

        entry = FoodEntry.query.filter_by(id=entry_id, user_id=user_id).first()
        if not entry:
            return jsonify({"error": "Entry not found"}), 404

        db.session.delete(entry)
        db.session.commit()
        return jsonify({"success": True}), 200

    @staticmethod
    def get_recent_foods(user_id: int):
        """
        Foods the user logs most often, one row per name with average macros.
        """
        rows = (
            db.session.query(
                FoodEntry.name,
                func.avg(FoodEntry.calories).label("calories"),
                func.avg(FoodEntry.protein).label("protein"),
                func.avg(FoodEntry.carbs).label("carbs"),
                func.avg(FoodEntry.fat).label("fat"),
                func.count(FoodEntry.name).label("count")
            )
            .filter(FoodEntry.user_id == user_id)
            .group_by(FoodEntry.name)
            .order_by(func.count(FoodEntry.name).desc(), func.max(FoodEntry.logged_at).desc())
            .limit(RECENT_FOODS_LIMIT)
            .all()
        )

        foods = [
            {
                "name": r.name,
                "calories": round_half_up(r.calories or 0),
                "protein": _round_avg(r.protein),
                "carbs": _round_avg(r.carbs),
                "fat": _round_avg(r.fat),
                "count": r.count
            }
            for r in rows
        ]
        return jsonify({"foods": foods}), 200

    @staticmethod
    def search(query: str | None):
        if not query or not query.strip():
            return jsonify({"results": []}), 200

        try:
            results = search_foods(query.strip())
        except FoodSearchError as e:
            current_app.logger.error("Error searching foods: %s", e)
            return jsonify({"error": "Failed to search foods"}), 502

        return jsonify({"results": results}), 200

    @staticmethod
    def get_history(user_id: int, days: int, now=None):
        """
        Per-day calorie totals for the last `days` local days, newest first.
        Days without entries are included with a zero total.
        """
        zone = app_zone()
        now = now or utc_now()
        today = bucket(now, zone)

        # Coarse UTC prefilter, one spare day covers any zone offset
        entries = (
            FoodEntry.query
            .filter(FoodEntry.user_id == user_id)
            .filter(FoodEntry.logged_at >= now - timedelta(days=days + 1))
            .order_by(FoodEntry.logged_at.desc())
            .all()
        )
        grouped = group_by_day(entries, zone, key=lambda e: e.logged_at)

        history = []
        for offset in range(days):
            day = today - timedelta(days=offset)
            day_entries = grouped.get(day, [])
            history.append({
                "date": day.isoformat(),
                "label": day_label(day, today),
                "total_calories": round_half_up(sum(e.calories for e in day_entries)),
                "entries": [e.to_dict() for e in day_entries]
            })
        return history
