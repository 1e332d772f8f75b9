from .streak_service import ActivityEvent, StreakResult, compute_streak
from .leaderboard_service import LeaderboardInput, LeaderboardRow, LeaderboardService, rank
