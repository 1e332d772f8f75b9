from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from calorie_club.services.food_service import FoodService
from calorie_club.utils.jwt_utils import get_current_user_id

food_bp = Blueprint("food", __name__, url_prefix="/api/v2/food")

MAX_HISTORY_DAYS = 90


@food_bp.route("", methods=["GET"])
@jwt_required()
def get_food_entries():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    start_date = request.args.get("startDate")
    end_date = request.args.get("endDate")
    return FoodService.get_entries(user_id, start_date, end_date)


@food_bp.route("", methods=["POST"])
@jwt_required()
def add_food_entry():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    data = request.get_json(silent=True)
    return FoodService.add_entry(user_id, data)


@food_bp.route("", methods=["DELETE"])
@jwt_required()
def delete_food_entry():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    return FoodService.delete_entry(user_id, request.args.get("id", type=int))


@food_bp.route("/recent", methods=["GET"])
@jwt_required()
def recent_foods():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    return FoodService.get_recent_foods(user_id)


@food_bp.route("/search", methods=["GET"])
@jwt_required()
def search_foods():
    return FoodService.search(request.args.get("q"))


@food_bp.route("/history", methods=["GET"])
@jwt_required()
def food_history():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    days = request.args.get("days", 7, type=int)
    if days is None or days < 1 or days > MAX_HISTORY_DAYS:
        return jsonify({"error": f"days must be between 1 and {MAX_HISTORY_DAYS}"}), 400

    history = FoodService.get_history(user_id, days)
    return jsonify({"status": "success", "days": days, "history": history}), 200
