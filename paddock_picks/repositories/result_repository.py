"""
🏁 ResultRepository - Resultados oficiales (solo lectura para el scoring)

Los resultados los carga un administrador cuando termina la carrera.
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.models.result import EntryResult, ImsaClass, ImsaEvent, RaceResult
from paddock_picks.models.scoring_rule import ScoringRule


class ResultRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.race_results = db["race_results"]
        self.events = db["imsa_events"]
        self.classes = db["imsa_classes"]
        self.entry_results = db["imsa_entry_results"]
        self.scoring_rules = db["imsa_scoring_rules"]

    # ============================================
    # 📌 COMMUNITY PREDICTIONS
    # ============================================

    async def get_race_results(self, season_id: str) -> list[RaceResult]:
        """Resultados por split de toda la temporada"""
        cursor = self.race_results.find({"season_id": season_id}).sort([
            ("week", 1), ("division", 1), ("split", 1), ("split_position", 1)
        ])
        docs = await cursor.to_list(length=None)
        return [RaceResult(**doc) for doc in docs]

    # ============================================
    # 📌 IMSA
    # ============================================

    async def get_event(self, event_id: str) -> Optional[ImsaEvent]:
        doc = await self.events.find_one({"id": event_id})
        return ImsaEvent(**doc) if doc else None

    async def get_events_by_year(self, year: int) -> list[ImsaEvent]:
        cursor = self.events.find({"year": year}).sort("id", 1)
        docs = await cursor.to_list(length=None)
        return [ImsaEvent(**doc) for doc in docs]

    async def get_classes(self, event_id: str) -> list[ImsaClass]:
        cursor = self.classes.find({"event_id": event_id}).sort("id", 1)
        docs = await cursor.to_list(length=None)
        return [ImsaClass(**doc) for doc in docs]

    async def get_entry_results(self, event_id: str) -> list[EntryResult]:
        """
        Resultados de todos los entries del evento

        El orden (posición, entry_id) es el "orden de entrada" que usa el
        desempate del ranking de fabricantes, así que tiene que ser estable.
        """
        cursor = self.entry_results.find({"event_id": event_id}).sort([
            ("finish_position", 1), ("entry_id", 1)
        ])
        docs = await cursor.to_list(length=None)
        return [EntryResult(**doc) for doc in docs]

    async def get_scoring_rules(self) -> list[ScoringRule]:
        """Tabla de reglas de puntuación IMSA"""
        docs = await self.scoring_rules.find().to_list(length=None)
        return [ScoringRule(**doc) for doc in docs]
