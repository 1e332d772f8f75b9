import logging

from flask import Flask
from apscheduler.schedulers.background import BackgroundScheduler
from .config import Config
from .routes import register_routes
from .extensions import db, jwt, migrate


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    app.logger.setLevel(level)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    register_routes(app)

    with app.app_context():
        from calorie_club.models import (
            user,
            food_entry,
            weight_entry,
            challenge
        )
        db.create_all()

    from calorie_club.controller.auth_controller import auth_bp
    app.register_blueprint(auth_bp)

    from calorie_club.controller.food_controller import food_bp
    app.register_blueprint(food_bp)

    from calorie_club.controller.weight_controller import weight_bp
    app.register_blueprint(weight_bp)

    from calorie_club.controller.summary_controller import summary_bp
    app.register_blueprint(summary_bp)

    from calorie_club.controller.leaderboard_controller import leaderboard_bp
    app.register_blueprint(leaderboard_bp)

    from calorie_club.controller.challenge_controller import challenge_bp
    app.register_blueprint(challenge_bp)

    if app.config.get("SCHEDULER_ENABLED", True):
        from calorie_club.services.challenge_service import refresh_challenge_progress_job
        scheduler = BackgroundScheduler(timezone=app.config.get("APP_TIMEZONE", "UTC"))
        scheduler.add_job(
            func=refresh_challenge_progress_job,
            args=[app],
            trigger="cron",
            hour=0,
            minute=5,
            id="refresh_challenge_progress"
        )
        scheduler.start()
        app.extensions["scheduler"] = scheduler
        app.logger.info("Challenge progress scheduler started")

    return app
