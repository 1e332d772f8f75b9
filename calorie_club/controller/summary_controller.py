from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from calorie_club.services.summary_service import SummaryService
from calorie_club.utils.jwt_utils import get_current_user_id

summary_bp = Blueprint("summary", __name__, url_prefix="/api/v2")


@summary_bp.route("/summary", methods=["GET"])
@jwt_required()
def get_summary():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    summary = SummaryService.get_daily_summary(user_id)
    return jsonify({"status": "success", "summary": summary}), 200
