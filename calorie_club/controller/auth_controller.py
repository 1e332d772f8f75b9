from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from calorie_club.services.auth_service import AuthService
from calorie_club.utils.jwt_utils import get_current_user_id

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v2/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True)
    return AuthService.register(data)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    return AuthService.login(data)


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    return AuthService.get_user(user_id)
