from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from calorie_club.services.weight_service import WeightService
from calorie_club.utils.jwt_utils import get_current_user_id

weight_bp = Blueprint("weight", __name__, url_prefix="/api/v2/weight")


@weight_bp.route("", methods=["GET"])
@jwt_required()
def get_weight_entries():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    return WeightService.get_entries(user_id, request.args.get("limit"))


@weight_bp.route("", methods=["POST"])
@jwt_required()
def add_weight_entry():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    data = request.get_json(silent=True)
    return WeightService.add_entry(user_id, data)


@weight_bp.route("", methods=["DELETE"])
@jwt_required()
def delete_weight_entry():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    return WeightService.delete_entry(user_id, request.args.get("id", type=int))
