# calorie_club/services/weight_service.py
from flask import jsonify, current_app

from calorie_club.extensions import db
from calorie_club.models.weight_entry import WeightEntry
from calorie_club.utils.date_utils import parse_timestamp
from calorie_club.utils.jwt_utils import utc_now
from calorie_club.utils.utils import parse_number


class WeightService:

    @staticmethod
    def get_entries(user_id: int, limit: str | None):
        query = (
            WeightEntry.query
            .filter_by(user_id=user_id)
            .order_by(WeightEntry.logged_at.desc(), WeightEntry.id.desc())
        )

        if limit:
            try:
                limit = int(limit)
            except ValueError:
                return jsonify({"error": "limit must be an integer"}), 400
            if limit < 1:
                return jsonify({"error": "limit must be >= 1"}), 400
            query = query.limit(limit)

        return jsonify({"entries": [e.to_dict() for e in query.all()]}), 200

    @staticmethod
    def add_entry(user_id: int, payload: dict):
        payload = payload if isinstance(payload, dict) else {}
        try:
            weight = parse_number(payload.get("weight"), "weight")
        except ValueError:
            weight = None

        if weight is None or weight <= 0:
            return jsonify({"error": "Valid weight is required"}), 400

        try:
            logged_at = parse_timestamp(payload["loggedAt"]) if payload.get("loggedAt") else utc_now()
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        entry = WeightEntry(user_id=user_id, weight=weight, logged_at=logged_at)
        db.session.add(entry)
        db.session.commit()
        current_app.logger.info("User %s logged weight %.1f", user_id, weight)

        return jsonify({"entry": entry.to_dict()}), 201

    @staticmethod
    def delete_entry(user_id: int, entry_id: int | None):
        if not entry_id:
            return jsonify({"error": "Entry ID required"}), 400

        entry = WeightEntry.query.filter_by(id=entry_id, user_id=user_id).first()
        if not entry:
            return jsonify({"error": "Entry not found"}), 404

        db.session.delete(entry)
        db.session.commit()
        return jsonify({"success": True}), 200
