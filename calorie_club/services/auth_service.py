# calorie_club/services/auth_service.py
from flask import jsonify, current_app
from flask_jwt_extended import create_access_token

from calorie_club.extensions import db
from calorie_club.models.user import User
from calorie_club.utils.utils import parse_text


def _token_for(user: User) -> str:
    # Identity must be a string for flask-jwt-extended
    return create_access_token(identity=str(user.id))


def _password(payload: dict) -> str:
    # Not stripped, whitespace is part of the password
    password = payload.get("password")
    if password is None:
        return ""
    if not isinstance(password, str):
        raise ValueError("password must be a string")
    return password


class AuthService:

    @staticmethod
    def register(payload: dict):
        payload = payload if isinstance(payload, dict) else {}
        try:
            name = parse_text(payload.get("name"), "name")
            email = parse_text(payload.get("email"), "email").lower()
            password = _password(payload)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        if not name or not email or not password:
            return jsonify({"error": "Name, email and password are required"}), 400

        if User.query.filter_by(email=email).first():
            return jsonify({"error": "Email already registered"}), 400

        user = User(name=name, email=email)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        current_app.logger.info("Registered user %s (%s)", user.id, email)

        return jsonify({
            "user": user.to_dict(),
            "access_token": _token_for(user)
        }), 201

    @staticmethod
    def login(payload: dict):
        payload = payload if isinstance(payload, dict) else {}
        try:
            email = parse_text(payload.get("email"), "email").lower()
            password = _password(payload)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        user = User.query.filter_by(email=email).first() if email else None
        if not user or not user.check_password(password):
            return jsonify({"error": "Invalid email or password"}), 401

        return jsonify({
            "user": user.to_dict(),
            "access_token": _token_for(user)
        }), 200

    @staticmethod
    def get_user(user_id: int):
        user = db.session.get(User, user_id)
        if not user:
            return jsonify({"error": "User not found"}), 404
        return jsonify({"user": user.to_dict()}), 200
