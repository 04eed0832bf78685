"""
Controlador de Admin - Lanza el scoring cuando hay resultados oficiales

Todos los endpoints se pueden re-ejecutar: si se corrige un resultado, se
vuelve a llamar y los totales se sobrescriben.
"""

from fastapi import APIRouter, HTTPException, status

from paddock_picks.core.dependencies import Database
from paddock_picks.scoring.errors import MissingPrerequisiteError
from paddock_picks.services.event_scoring_service import EventNotFoundError, EventScoringService
from paddock_picks.services.track_order_service import SeasonNotFoundError, TrackOrderService
from paddock_picks.services.winner_pick_service import WinnerPickService


router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/seasons/{season_id}/track-order/score")
async def score_track_order(season_id: str, db: Database):
    """
    Calcular puntos Nostradouglas de una temporada y publicar el leaderboard.
    """
    try:
        return await TrackOrderService(db).score_season(season_id)
    except SeasonNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except MissingPrerequisiteError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/seasons/{season_id}/winner-picks/score")
async def score_winner_picks(season_id: str, db: Database):
    """
    Calcular puntos de Community Predictions de una temporada.
    """
    try:
        return await WinnerPickService(db).score_season(season_id)
    except MissingPrerequisiteError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/events/{event_id}/score")
async def score_event(event_id: str, db: Database):
    """
    Calcular rankings de fabricantes y puntos IMSA de un evento.
    """
    try:
        return await EventScoringService(db).calculate_event_scores(event_id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except MissingPrerequisiteError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
