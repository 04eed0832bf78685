from typing import Optional
from pydantic import BaseModel

from paddock_picks.core.config import Settings


class ScoringRule(BaseModel):
    """Regla de puntuación: (category, prediction_position, result_type) -> points"""

    category: str  # podium | manufacturer
    prediction_position: Optional[int] = None  # None = aplica a cualquier posición
    result_type: str  # exact | on_podium | top_5 | off_1 | off_2
    points: int

    class Config:
        populate_by_name = True


class TrackOrderRules(BaseModel):
    """Constantes de Nostradouglas (golf: menos es mejor)"""

    track_match_points: int = 10
    week_match_points: int = 5
    missing_prediction_penalty: int = 20

    max_tracks: int = 8
    max_tracks_after_week_1: int = 7

    @property
    def perfect_match_points(self) -> int:
        return self.track_match_points + self.week_match_points

    @classmethod
    def from_settings(cls, settings: Settings) -> "TrackOrderRules":
        return cls(
            track_match_points=settings.track_match_points,
            week_match_points=settings.week_match_points,
            missing_prediction_penalty=settings.missing_prediction_penalty,
            max_tracks=settings.max_tracks,
            max_tracks_after_week_1=settings.max_tracks_after_week_1,
        )


class WinnerPickRules(BaseModel):
    """Constantes de Community Predictions"""

    dnf_position_cutoff: int = 15
    divisions: list[int] = [1, 2, 3, 4, 5, 6]
    splits: list[str] = ["Gold", "Silver"]

    @classmethod
    def from_settings(cls, settings: Settings) -> "WinnerPickRules":
        return cls(
            dnf_position_cutoff=settings.winner_pick_dnf_cutoff,
            divisions=list(settings.divisions),
            splits=list(settings.splits),
        )
