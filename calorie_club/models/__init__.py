from .user import User
from .food_entry import FoodEntry
from .weight_entry import WeightEntry
from .challenge import Challenge, ChallengeParticipant
