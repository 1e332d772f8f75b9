from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from calorie_club.services.challenge_service import ChallengeService
from calorie_club.utils.jwt_utils import get_current_user_id

challenge_bp = Blueprint("challenge", __name__, url_prefix="/api/v2/challenges")


@challenge_bp.route("", methods=["GET"])
@jwt_required()
def list_challenges():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    return ChallengeService.list_challenges(user_id)


@challenge_bp.route("", methods=["POST"])
@jwt_required()
def create_challenge():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    data = request.get_json(silent=True)
    return ChallengeService.create_challenge(user_id, data)


@challenge_bp.route("/join", methods=["POST"])
@jwt_required()
def join_challenge():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    data = request.get_json(silent=True)
    return ChallengeService.join_challenge(user_id, data)


@challenge_bp.route("/join", methods=["DELETE"])
@jwt_required()
def leave_challenge():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    return ChallengeService.leave_challenge(user_id, request.args.get("challengeId", type=int))


@challenge_bp.route("/<int:challenge_id>/refresh", methods=["POST"])
@jwt_required()
def refresh_challenge(challenge_id):
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized"}), 401

    return ChallengeService.refresh(user_id, challenge_id)
