from .prediction import (
    TrackOrderPrediction,
    WinnerPick,
    PodiumPrediction,
    ManufacturerPrediction,
)
from .result import (
    Season,
    ScheduleEntry,
    RaceResult,
    ImsaEvent,
    ImsaClass,
    EntryResult,
    ManufacturerResult,
)
from .scoring_rule import ScoringRule, TrackOrderRules, WinnerPickRules
from .score import (
    MatchStatus,
    PickStatus,
    RejectedPrediction,
    TrackOrderScore,
    WinnerPickScore,
    PodiumScore,
    ManufacturerScore,
    UserTotal,
    UserEventScore,
    WeeklyScore,
    TrackOrderRun,
    WinnerPickRun,
    MultiClassEventScores,
)
from .leaderboard import (
    SortDirection,
    ContextKind,
    PositionChange,
    LeaderboardEntry,
    LeaderboardSnapshot,
)

__all__ = [
    "TrackOrderPrediction",
    "WinnerPick",
    "PodiumPrediction",
    "ManufacturerPrediction",
    "Season",
    "ScheduleEntry",
    "RaceResult",
    "ImsaEvent",
    "ImsaClass",
    "EntryResult",
    "ManufacturerResult",
    "ScoringRule",
    "TrackOrderRules",
    "WinnerPickRules",
    "MatchStatus",
    "PickStatus",
    "RejectedPrediction",
    "TrackOrderScore",
    "WinnerPickScore",
    "PodiumScore",
    "ManufacturerScore",
    "UserTotal",
    "UserEventScore",
    "WeeklyScore",
    "TrackOrderRun",
    "WinnerPickRun",
    "MultiClassEventScores",
    "SortDirection",
    "ContextKind",
    "PositionChange",
    "LeaderboardEntry",
    "LeaderboardSnapshot",
]
