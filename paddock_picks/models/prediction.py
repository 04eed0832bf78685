from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class TrackOrderPrediction(BaseModel):
    """Predicción Nostradouglas: circuito que el usuario espera en una semana"""

    user_id: str
    season_id: str

    position: int  # semana predicha (1 = primera semana)
    track_id: str

    created_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class WinnerPick(BaseModel):
    """Piloto elegido como ganador de un (division, split) en una semana"""

    user_id: str
    season_id: str
    schedule_id: str
    week: int

    division: int
    split: str  # Gold | Silver

    driver_id: str

    class Config:
        populate_by_name = True


class PodiumPrediction(BaseModel):
    """Entry elegido para una posición del podio de una clase"""

    user_id: str
    event_id: str
    class_id: str

    position: int  # 1..3
    entry_id: str

    class Config:
        populate_by_name = True


class ManufacturerPrediction(BaseModel):
    """Ranking predicho de un fabricante dentro de una clase"""

    user_id: str
    event_id: str
    class_id: str

    manufacturer_id: str
    predicted_rank: int

    class Config:
        populate_by_name = True
