# calorie_club/services/challenge_service.py
import logging
from datetime import date, datetime

from flask import jsonify, current_app
from sqlalchemy.orm import selectinload

from calorie_club.enums.app_enum import ChallengeGoalEnum
from calorie_club.extensions import db
from calorie_club.models.challenge import Challenge, ChallengeParticipant
from calorie_club.models.food_entry import FoodEntry
from calorie_club.models.weight_entry import WeightEntry
from calorie_club.services.streak_service import longest_run
from calorie_club.utils.date_utils import bucket, group_by_day
from calorie_club.utils.jwt_utils import app_zone, utc_now
from calorie_club.utils.utils import parse_id, parse_number, parse_text, round_half_up

logger = logging.getLogger(__name__)


def _parse_day(value) -> date:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")
    # Accept both "2025-03-01" and full ISO timestamps
    return date.fromisoformat(value.strip()[:10])


def serialize_challenge(challenge: Challenge, user_id: int | None = None) -> dict:
    participants = [p.to_dict() for p in challenge.participants]
    return {
        "id": challenge.id,
        "name": challenge.name,
        "description": challenge.description,
        "startDate": challenge.start_date.isoformat(),
        "endDate": challenge.end_date.isoformat(),
        "goalType": challenge.goal_type.value,
        "goalValue": challenge.goal_value,
        "createdById": challenge.created_by_id,
        "createdAt": challenge.created_at.isoformat() if challenge.created_at else None,
        "createdBy": {
            "id": challenge.created_by.id,
            "name": challenge.created_by.name
        } if challenge.created_by else None,
        "participants": participants,
        "isParticipant": any(p.user_id == user_id for p in challenge.participants),
        "isCreator": challenge.created_by_id == user_id,
        "participantCount": len(participants)
    }


# -------------------- PROGRESS -------------------- #

def _window(challenge: Challenge, today: date):
    """Inclusive day window, clamped so it never runs past today."""
    return challenge.start_date, min(challenge.end_date, today)


def streak_progress(timestamps, first_day: date, last_day: date, zone) -> int:
    in_window = [ts for ts in timestamps if first_day <= bucket(ts, zone) <= last_day]
    return longest_run(in_window, zone)


def calorie_progress(entries, goal_value: float, first_day: date, last_day: date, zone) -> int:
    """
    Logged days inside the window whose total stayed at or under the goal.
    `entries` are objects with `logged_at` and `calories`.
    """
    grouped = group_by_day(entries, zone, key=lambda e: e.logged_at)
    return sum(
        1
        for day, day_entries in grouped.items()
        if first_day <= day <= last_day and sum(e.calories for e in day_entries) <= goal_value
    )


def weight_loss_progress(weights, first_day: date, last_day: date, zone) -> float:
    """
    `weights` are (logged_at, weight) pairs ordered oldest first.
    Weight gained counts as zero progress.
    """
    in_window = [w for ts, w in weights if first_day <= bucket(ts, zone) <= last_day]
    if len(in_window) < 2:
        return 0
    return max(round_half_up(in_window[0] - in_window[-1], 1), 0)


def compute_progress(challenge: Challenge, user_id: int, now: datetime, zone) -> float:
    first_day, last_day = _window(challenge, bucket(now, zone))
    if last_day < first_day:
        return 0

    if challenge.goal_type == ChallengeGoalEnum.weight_loss:
        weights = (
            WeightEntry.query
            .with_entities(WeightEntry.logged_at, WeightEntry.weight)
            .filter(WeightEntry.user_id == user_id)
            .order_by(WeightEntry.logged_at.asc(), WeightEntry.id.asc())
            .all()
        )
        return weight_loss_progress(weights, first_day, last_day, zone)

    entries = FoodEntry.query.filter(FoodEntry.user_id == user_id).all()
    if challenge.goal_type == ChallengeGoalEnum.calories:
        return calorie_progress(entries, challenge.goal_value, first_day, last_day, zone)
    return streak_progress([e.logged_at for e in entries], first_day, last_day, zone)


def refresh_challenge_progress(now: datetime | None = None, challenge_id: int | None = None) -> int:
    """
    Recompute `progress` for every participant of every started challenge.
    Returns the number of participant rows updated.
    """
    zone = app_zone()
    now = now or utc_now()
    today = bucket(now, zone)

    query = Challenge.query.options(selectinload(Challenge.participants))
    if challenge_id is not None:
        query = query.filter(Challenge.id == challenge_id)
    challenges = query.filter(Challenge.start_date <= today).all()

    updated = 0
    try:
        for challenge in challenges:
            for participant in challenge.participants:
                participant.progress = compute_progress(challenge, participant.user_id, now, zone)
                updated += 1
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Refreshed progress for %d participant(s) on %s", updated, today)
    return updated


def refresh_challenge_progress_job(app):
    """APScheduler entry point, runs outside any request."""
    with app.app_context():
        try:
            refresh_challenge_progress()
        except Exception:
            logger.exception("Challenge progress refresh failed")


class ChallengeService:

    @staticmethod
    def list_challenges(user_id: int):
        challenges = (
            Challenge.query
            .options(selectinload(Challenge.participants))
            .order_by(Challenge.created_at.desc(), Challenge.id.desc())
            .all()
        )
        return jsonify({
            "challenges": [serialize_challenge(c, user_id) for c in challenges]
        }), 200

    @staticmethod
    def create_challenge(user_id: int, payload: dict):
        payload = payload if isinstance(payload, dict) else {}
        try:
            name = parse_text(payload.get("name"), "name")
            description = parse_text(payload.get("description"), "description") or None
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        goal_value = payload.get("goalValue")

        if (not name or not payload.get("startDate") or not payload.get("endDate")
                or not payload.get("goalType") or goal_value is None):
            return jsonify({"error": "Missing required fields"}), 400

        try:
            goal_type = ChallengeGoalEnum(payload["goalType"])
        except ValueError:
            return jsonify({"error": "Invalid goal type"}), 400

        try:
            start_date = _parse_day(payload["startDate"])
            end_date = _parse_day(payload["endDate"])
            goal_value = parse_number(goal_value, "goalValue")
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        if end_date < start_date:
            return jsonify({"error": "endDate must not be before startDate"}), 400

        challenge = Challenge(
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            goal_type=goal_type,
            goal_value=goal_value,
            created_by_id=user_id
        )
        # Creator joins automatically
        challenge.participants.append(ChallengeParticipant(user_id=user_id, progress=0))
        db.session.add(challenge)
        db.session.commit()
        current_app.logger.info("User %s created challenge %s (%s)", user_id, challenge.id, goal_type.value)

        return jsonify({"challenge": serialize_challenge(challenge, user_id)}), 201

    @staticmethod
    def join_challenge(user_id: int, payload: dict):
        payload = payload if isinstance(payload, dict) else {}
        challenge_id = parse_id(payload.get("challengeId"))
        if not challenge_id:
            return jsonify({"error": "Challenge ID is required"}), 400

        challenge = db.session.get(Challenge, challenge_id)
        if not challenge:
            return jsonify({"error": "Challenge not found"}), 404

        existing = ChallengeParticipant.query.filter_by(challenge_id=challenge.id, user_id=user_id).first()
        if existing:
            return jsonify({"error": "Already participating in this challenge"}), 400

        participant = ChallengeParticipant(challenge_id=challenge.id, user_id=user_id, progress=0)
        db.session.add(participant)
        db.session.commit()

        return jsonify({"participant": participant.to_dict()}), 201

    @staticmethod
    def leave_challenge(user_id: int, challenge_id: int | None):
        if not challenge_id:
            return jsonify({"error": "Challenge ID is required"}), 400

        participant = ChallengeParticipant.query.filter_by(challenge_id=challenge_id, user_id=user_id).first()
        if not participant:
            return jsonify({"error": "Not participating in this challenge"}), 400

        db.session.delete(participant)
        db.session.commit()
        return jsonify({"success": True}), 200

    @staticmethod
    def refresh(user_id: int, challenge_id: int):
        challenge = db.session.get(Challenge, challenge_id)
        if not challenge:
            return jsonify({"error": "Challenge not found"}), 404

        updated = refresh_challenge_progress(challenge_id=challenge.id)
        db.session.refresh(challenge)
        return jsonify({
            "updated": updated,
            "challenge": serialize_challenge(challenge, user_id)
        }), 200
