from enum import Enum

class MetricKind(str, Enum):
    streak = "streak"
    weekly_calories = "weekly_calories"
    today_calories = "today_calories"
    weight_loss = "weight_loss"

class ChallengeGoalEnum(str, Enum):
    streak = "streak"
    calories = "calories"
    weight_loss = "weight_loss"
