from .season_repository import SeasonRepository
from .result_repository import ResultRepository
from .prediction_repository import PredictionRepository
from .score_repository import ScoreRepository
from .leaderboard_repository import LeaderboardRepository
from .user_repository import UserRepository

__all__ = [
    "SeasonRepository",
    "ResultRepository",
    "PredictionRepository",
    "ScoreRepository",
    "LeaderboardRepository",
    "UserRepository",
]
