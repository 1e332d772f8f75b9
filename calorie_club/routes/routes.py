from flask import jsonify
from werkzeug.exceptions import HTTPException

from ..extensions import db, jwt


def register_routes(app):

    @app.route('/')
    def home():
        return jsonify({
            'name': 'Calorie Club',
            'api': '/api/v2'
        }), 200

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'}), 200

    # -------------------------
    # Errors
    # -------------------------
    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception('Unhandled error: %s', error)
        return jsonify({'error': 'Internal server error'}), 500

    # -------------------------
    # JWT
    # -------------------------
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'error': 'Unauthorized', 'detail': reason}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'error': 'Invalid token', 'detail': reason}), 401

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_payload):
        return jsonify({'error': 'Token expired'}), 401
