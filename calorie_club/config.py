import os

from dotenv import load_dotenv
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # JWT
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret-key-change-me-in-production")
    JWT_ALGORITHM = "HS256"
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ACCESS_TOKEN_EXPIRES = False

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///calorie_club.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # ======= TRACKING =======
    # Single zone used to turn timestamps into calendar days for every user
    APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")
    DEFAULT_CALORIE_GOAL = int(os.getenv("DEFAULT_CALORIE_GOAL", "2000"))
    LEADERBOARD_WEIGHT_WINDOW = int(os.getenv("LEADERBOARD_WEIGHT_WINDOW", "10"))

    # ======= OPEN FOOD FACTS =======
    OPEN_FOOD_FACTS_URL = os.getenv(
        "OPEN_FOOD_FACTS_URL", "https://world.openfoodfacts.org/cgi/search.pl"
    )
    OPEN_FOOD_FACTS_TIMEOUT = float(os.getenv("OPEN_FOOD_FACTS_TIMEOUT", "5"))
    OPEN_FOOD_FACTS_USER_AGENT = "CalorieClub-CalorieTracker/1.0"

    SCHEDULER_ENABLED = _env_bool("SCHEDULER_ENABLED", True)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
