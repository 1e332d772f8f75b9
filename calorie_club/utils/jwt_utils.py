from datetime import datetime
from zoneinfo import ZoneInfo

from flask import current_app
from flask_jwt_extended import get_jwt_identity


def get_current_user_id():
    identity = get_jwt_identity()
    if identity is None:
        return None
    try:
        return int(identity)
    except (TypeError, ValueError):
        return None


def app_zone() -> ZoneInfo:
    return ZoneInfo(current_app.config.get("APP_TIMEZONE", "UTC"))


def utc_now() -> datetime:
    # Naive UTC, same convention as the stored timestamps
    return datetime.utcnow()
