from enum import Enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class SortDirection(str, Enum):
    ASCENDING = "ascending"  # golf: menos puntos es mejor
    DESCENDING = "descending"


class ContextKind(str, Enum):
    TRACK_ORDER = "track_order"
    WINNER_PICK = "winner_pick"
    MULTI_CLASS = "multi_class"


class PositionChange(BaseModel):
    change: int = 0  # positivo = subió, negativo = bajó
    is_new: bool = False

    class Config:
        frozen = True


class LeaderboardEntry(BaseModel):
    """Entrada en una tabla de clasificación (resultado agregado)"""

    user_id: str
    display_name: Optional[str] = None

    rank: int
    total_points: float
    contexts_participated: int = 0
    average_points: float = 0.0

    breakdown: dict[str, float] = {}
    position_change: Optional[PositionChange] = None

    class Config:
        populate_by_name = True
        frozen = True


class LeaderboardSnapshot(BaseModel):
    """Último leaderboard publicado para un contexto (base del diff siguiente)"""

    kind: ContextKind
    context_id: str
    entries: list[LeaderboardEntry]
    computed_at: datetime

    class Config:
        populate_by_name = True
