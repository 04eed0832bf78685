from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class Season(BaseModel):
    id: str
    season_number: int
    name: Optional[str] = None

    prediction_deadline: Optional[datetime] = None
    week_1_prediction_deadline: Optional[datetime] = None

    class Config:
        populate_by_name = True


class ScheduleEntry(BaseModel):
    """Circuito que se corre en una semana de la temporada"""

    id: str
    season_id: str
    week: int
    track_id: str

    race_date: Optional[datetime] = None

    class Config:
        populate_by_name = True


class RaceResult(BaseModel):
    """Posición final de un piloto dentro de su split"""

    schedule_id: str
    week: int
    division: int
    split: str

    driver_id: str
    split_position: Optional[int] = None
    status: Optional[str] = None  # finished | dnf, None si no se registró

    class Config:
        populate_by_name = True


class ImsaEvent(BaseModel):
    id: str
    name: str
    year: int
    status: str = "scheduled"  # scheduled | completed

    class Config:
        populate_by_name = True


class ImsaClass(BaseModel):
    """Clase de coches de un evento multiclase (GTP, LMP2, GTD...)"""

    id: str
    event_id: str
    name: str
    has_manufacturer_prediction: bool = False

    class Config:
        populate_by_name = True


class EntryResult(BaseModel):
    """Resultado de un entry (coche) en un evento multiclase"""

    event_id: str
    entry_id: str
    class_id: str
    manufacturer_id: Optional[str] = None

    finish_position: Optional[int] = None
    status: str = "finished"  # finished | DNF | DNS

    class Config:
        populate_by_name = True


class ManufacturerResult(BaseModel):
    """Ranking derivado de un fabricante (media de posiciones de sus entries)"""

    event_id: str
    class_id: str
    manufacturer_id: str

    avg_finish_position: float
    final_rank: int

    class Config:
        populate_by_name = True
