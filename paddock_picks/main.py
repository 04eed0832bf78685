"""
Entry point de la API
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from paddock_picks.core.config import get_settings
from paddock_picks.database import Database

from paddock_picks.controllers.admin_controller import router as admin_router
from paddock_picks.controllers.leaderboard_controller import router as leaderboard_router
from paddock_picks.controllers.predictions_controller import router as predictions_router
from paddock_picks.controllers.health_controller import router as health_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    yield
    await Database.disconnect()

# Creo la app
app = FastAPI(
    title="Paddock Picks API",
    description="Scoring y leaderboards de las predicciones de sim-racing",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan
)

# Agrego todos los routers de los controllers al app
app.include_router(health_router)
app.include_router(admin_router)
app.include_router(leaderboard_router)
app.include_router(predictions_router)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "Paddock Picks API",
        "version": "1.0.0",
        "docs": "/docs"
    }
