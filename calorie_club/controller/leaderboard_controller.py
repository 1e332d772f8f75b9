from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from calorie_club.enums.app_enum import MetricKind
from calorie_club.services.leaderboard_service import LeaderboardService
from calorie_club.utils.jwt_utils import get_current_user_id

leaderboard_bp = Blueprint("leaderboard", __name__, url_prefix="/api/v2")


@leaderboard_bp.route("/leaderboard", methods=["GET"])
@jwt_required()
def get_leaderboard():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    metric = request.args.get("type", MetricKind.streak.value)
    leaderboard = LeaderboardService.get_leaderboard(metric)
    return jsonify({"leaderboard": leaderboard, "currentUserId": user_id}), 200
