"""
📅 SeasonRepository - Temporadas y calendario (semana -> circuito)
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.models.result import Season, ScheduleEntry


class SeasonRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["seasons"]
        self.schedule = db["schedule"]

    async def get_by_id(self, season_id: str) -> Optional[Season]:
        """Obtiene una temporada por ID"""
        doc = await self.collection.find_one({"id": season_id})
        return Season(**doc) if doc else None

    async def get_schedule(self, season_id: str) -> list[ScheduleEntry]:
        """Calendario real de la temporada, ordenado por semana"""
        cursor = self.schedule.find({"season_id": season_id}).sort("week", 1)
        docs = await cursor.to_list(length=None)
        return [ScheduleEntry(**doc) for doc in docs]

