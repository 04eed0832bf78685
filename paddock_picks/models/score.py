"""
Puntuaciones calculadas por el motor de scoring.

Ninguno de estos modelos es fuente de verdad: siempre se pueden volver a
derivar de (predicciones, resultados, reglas). Lo que se guarda en BD es caché.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel

from paddock_picks.models.result import ManufacturerResult


class MatchStatus(str, Enum):
    PERFECT_MATCH = "Perfect Match"
    TRACK_MATCH_ONLY = "Track Match Only"
    NO_MATCH = "No Match"
    MISSING = "Missing"


class PickStatus(str, Enum):
    FINISHED = "finished"
    DNF = "dnf"
    MISSING = "missing"
    PENDING = "pending"  # el split todavía no tiene resultados


class RejectedPrediction(BaseModel):
    """Predicción descartada por estar mal formada (el resto del run sigue)"""

    user_id: str
    context_id: str
    key: str
    reason: str


class TrackOrderScore(BaseModel):
    user_id: str
    season_id: str

    predicted_week: int
    predicted_track: Optional[str] = None  # None si falta la predicción
    actual_week: Optional[int] = None

    track_match_points: int = 0
    week_match_points: int = 0
    points: int
    status: MatchStatus


class WinnerPickScore(BaseModel):
    user_id: str
    season_id: str
    schedule_id: str
    week: int
    division: int
    split: str

    driver_id: Optional[str] = None  # None si el usuario no eligió piloto
    finish_position: Optional[int] = None
    points: Optional[int] = None  # None mientras el split esté pendiente
    status: PickStatus


class PodiumScore(BaseModel):
    user_id: str
    event_id: str
    class_id: str

    position: int
    entry_id: str
    actual_finish: Optional[int] = None
    result_type: Optional[str] = None
    points: int


class ManufacturerScore(BaseModel):
    user_id: str
    event_id: str
    class_id: str

    manufacturer_id: str
    predicted_rank: int
    actual_rank: Optional[int] = None
    result_type: Optional[str] = None
    points: int


class UserTotal(BaseModel):
    """Total de un usuario dentro de un contexto (temporada o evento)"""

    user_id: str
    context_id: str
    display_name: Optional[str] = None

    total_points: float
    contexts_participated: int = 0  # semanas/eventos con resultado registrado

    breakdown: dict[str, float] = {}


class UserEventScore(BaseModel):
    """Fila persistida por (user, event) para el juego multiclase"""

    user_id: str
    event_id: str

    podium_points: int = 0
    manufacturer_points: int = 0
    total_points: int = 0
    predictions_made: int = 0


class WeeklyScore(BaseModel):
    week: int
    total_points: int
    prediction_count: int


class TrackOrderRun(BaseModel):
    scores: list[TrackOrderScore]
    rejected: list[RejectedPrediction] = []


class WinnerPickRun(BaseModel):
    scores: list[WinnerPickScore]
    rejected: list[RejectedPrediction] = []


class MultiClassEventScores(BaseModel):
    podium_scores: list[PodiumScore]
    manufacturer_results: list[ManufacturerResult]
    manufacturer_scores: list[ManufacturerScore]
    user_scores: list[UserEventScore]
    rejected: list[RejectedPrediction] = []
