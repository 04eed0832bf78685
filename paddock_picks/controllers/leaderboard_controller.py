"""
Controlador de leaderboards - Endpoints de clasificación

Nostradouglas e IMSA (evento) sirven el último leaderboard publicado por el
scoring. Community Predictions, IMSA temporada y all-time se calculan al vuelo.
"""

from fastapi import APIRouter, HTTPException, Query, status

from paddock_picks.core.dependencies import Database
from paddock_picks.models.leaderboard import ContextKind, LeaderboardEntry
from paddock_picks.models.result import ManufacturerResult
from paddock_picks.models.score import TrackOrderScore
from paddock_picks.scoring.errors import MissingPrerequisiteError
from paddock_picks.services.event_scoring_service import EventScoringService
from paddock_picks.services.leaderboard_service import LeaderboardNotFoundError, LeaderboardService
from paddock_picks.services.track_order_service import TrackOrderService
from paddock_picks.services.winner_pick_service import WinnerPickService


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("/track-order/{season_id}", response_model=list[LeaderboardEntry])
async def get_track_order_leaderboard(
    season_id: str,
    db: Database,
    limit: int = Query(100, ge=1, le=500)
):
    """
    Leaderboard Nostradouglas de una temporada (golf: menos puntos es mejor).
    """
    try:
        return await LeaderboardService(db).get(ContextKind.TRACK_ORDER, season_id, limit)
    except LeaderboardNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/track-order/{season_id}/users/{user_id}", response_model=list[TrackOrderScore])
async def get_track_order_user_results(season_id: str, user_id: str, db: Database):
    """Detalle por predicción de un usuario (Perfect Match / Track Match Only / ...)."""
    return await TrackOrderService(db).get_user_results(season_id, user_id)


@router.get("/winner-picks/{season_id}", response_model=list[LeaderboardEntry])
async def get_winner_pick_leaderboard(
    season_id: str,
    db: Database,
    limit: int = Query(100, ge=1, le=500)
):
    """
    Leaderboard de Community Predictions con cambios de posición respecto a
    la semana anterior.
    """
    try:
        return await WinnerPickService(db).get_leaderboard(season_id, limit)
    except MissingPrerequisiteError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/winner-picks/{season_id}/users/{user_id}")
async def get_winner_pick_history(season_id: str, user_id: str, db: Database):
    """Picks pasados del usuario con resultado, totales semanales y total."""
    return await WinnerPickService(db).get_user_history(season_id, user_id)


@router.get("/imsa/events/{event_id}", response_model=list[LeaderboardEntry])
async def get_imsa_event_leaderboard(
    event_id: str,
    db: Database,
    limit: int = Query(100, ge=1, le=500)
):
    try:
        return await EventScoringService(db).get_event_leaderboard(event_id, limit)
    except LeaderboardNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/imsa/events/{event_id}/manufacturers", response_model=list[ManufacturerResult])
async def get_imsa_manufacturer_results(event_id: str, db: Database):
    """Ranking de fabricantes por clase (media de posición de sus coches)."""
    return await EventScoringService(db).get_manufacturer_results(event_id)


@router.get("/imsa/seasons/{year}", response_model=list[LeaderboardEntry])
async def get_imsa_season_leaderboard(
    year: int,
    db: Database,
    limit: int = Query(100, ge=1, le=500)
):
    return await EventScoringService(db).get_season_leaderboard(year, limit)


@router.get("/imsa/all-time", response_model=list[LeaderboardEntry])
async def get_imsa_all_time_leaderboard(
    db: Database,
    limit: int = Query(100, ge=1, le=500)
):
    return await EventScoringService(db).get_all_time_leaderboard(limit)
