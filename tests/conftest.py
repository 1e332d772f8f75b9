import os
import sys
from datetime import datetime

import pytest
from flask_jwt_extended import create_access_token

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from calorie_club import create_app, db
from calorie_club.config import Config
from calorie_club.models import User
from calorie_club.services import challenge_service, food_service, leaderboard_service, summary_service


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    JWT_SECRET_KEY = 'test-jwt-secret-key-that-is-long-enough-for-hs256'
    APP_TIMEZONE = 'UTC'
    SCHEDULER_ENABLED = False
    OPEN_FOOD_FACTS_URL = 'https://off.example.test/cgi/search.pl'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(name='Alice', email=None, password='password123'):
        user = User(name=name, email=email or f'{name.lower()}@example.com')
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        token = create_access_token(identity=str(user.id))
        return {'Authorization': f'Bearer {token}'}
    return _auth_headers


@pytest.fixture
def fixed_now(monkeypatch):
    """Pin the services' clock to a Wednesday noon (UTC)."""
    now = datetime(2025, 3, 12, 12, 0)
    for module in (challenge_service, food_service, leaderboard_service, summary_service):
        monkeypatch.setattr(module, 'utc_now', lambda: now)
    return now
