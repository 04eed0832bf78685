"""
Controlador de salud - Estado de la API y de la conexión a MongoDB
"""

from fastapi import APIRouter
from pydantic import BaseModel

from paddock_picks.core.config import get_settings
from paddock_picks.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    database: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    El scoring necesita la BD: si no hay conexión el estado es "degraded".
    """
    connected = Database.db is not None

    return HealthResponse(
        status="ok" if connected else "degraded",
        database="connected" if connected else "disconnected",
        environment=get_settings().app_env,
    )
