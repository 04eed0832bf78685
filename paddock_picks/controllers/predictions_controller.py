"""
Controlador de predicciones IMSA - Edición en batch de podio y fabricantes
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from paddock_picks.core.dependencies import Database
from paddock_picks.services.event_scoring_service import EventNotFoundError
from paddock_picks.services.prediction_service import (
    InvalidPredictionError,
    PredictionLockedError,
    PredictionService,
)


router = APIRouter(prefix="/predictions", tags=["predictions"])


class PodiumSlotUpdate(BaseModel):
    position: int
    entry_id: Optional[str] = None  # None = vaciar la posición


class ManufacturerRankUpdate(BaseModel):
    rank: int
    manufacturer_id: Optional[str] = None  # None = vaciar el rank


class PodiumBatchRequest(BaseModel):
    user_id: str
    updates: list[PodiumSlotUpdate]


class ManufacturerBatchRequest(BaseModel):
    user_id: str
    updates: list[ManufacturerRankUpdate]


def _to_http(error: Exception) -> HTTPException:
    if isinstance(error, EventNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, PredictionLockedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.put("/events/{event_id}/classes/{class_id}/podium")
async def save_podium_predictions(
    event_id: str,
    class_id: str,
    request: PodiumBatchRequest,
    db: Database
):
    """Guardar las posiciones de podio de un usuario para una clase."""
    try:
        return await PredictionService(db).save_podium_predictions(
            request.user_id,
            event_id,
            class_id,
            [(u.position, u.entry_id) for u in request.updates]
        )
    except (EventNotFoundError, PredictionLockedError, InvalidPredictionError) as e:
        raise _to_http(e)


@router.put("/events/{event_id}/classes/{class_id}/manufacturers")
async def save_manufacturer_predictions(
    event_id: str,
    class_id: str,
    request: ManufacturerBatchRequest,
    db: Database
):
    """Guardar el ranking de fabricantes de un usuario para una clase."""
    try:
        return await PredictionService(db).save_manufacturer_predictions(
            request.user_id,
            event_id,
            class_id,
            [(u.rank, u.manufacturer_id) for u in request.updates]
        )
    except (EventNotFoundError, PredictionLockedError, InvalidPredictionError) as e:
        raise _to_http(e)
