"""
🎯 PredictionRepository - Predicciones de usuarios

Lectura por contexto (temporada o evento) para el scoring y edición en
batch de las predicciones IMSA con semántica delete-then-insert.
"""

from datetime import datetime, timezone
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.models.prediction import (
    ManufacturerPrediction,
    PodiumPrediction,
    TrackOrderPrediction,
    WinnerPick,
)


class PredictionRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.track_predictions = db["track_predictions"]
        self.winner_predictions = db["winner_predictions"]
        self.podium_predictions = db["imsa_podium_predictions"]
        self.manufacturer_predictions = db["imsa_manufacturer_predictions"]

    # ============================================
    # 📌 READ
    # ============================================

    async def get_track_predictions(self, season_id: str) -> list[TrackOrderPrediction]:
        """Todas las predicciones Nostradouglas de una temporada"""
        cursor = self.track_predictions.find({"season_id": season_id}).sort([
            ("user_id", 1), ("position", 1)
        ])
        docs = await cursor.to_list(length=None)
        return [TrackOrderPrediction(**doc) for doc in docs]

    async def get_winner_picks(self, season_id: str) -> list[WinnerPick]:
        """Picks de ganador de una temporada"""
        cursor = self.winner_predictions.find({"season_id": season_id}).sort([
            ("user_id", 1), ("week", 1), ("division", 1), ("split", 1)
        ])
        docs = await cursor.to_list(length=None)
        return [WinnerPick(**doc) for doc in docs]

    async def get_podium_predictions(self, event_id: str) -> list[PodiumPrediction]:
        cursor = self.podium_predictions.find({"event_id": event_id}).sort([
            ("user_id", 1), ("class_id", 1), ("position", 1)
        ])
        docs = await cursor.to_list(length=None)
        return [PodiumPrediction(**doc) for doc in docs]

    async def get_manufacturer_predictions(self, event_id: str) -> list[ManufacturerPrediction]:
        cursor = self.manufacturer_predictions.find({"event_id": event_id}).sort([
            ("user_id", 1), ("class_id", 1), ("predicted_rank", 1)
        ])
        docs = await cursor.to_list(length=None)
        return [ManufacturerPrediction(**doc) for doc in docs]

    # ============================================
    # 📌 BATCH EDITS
    # ============================================

    async def save_podium_predictions(
        self,
        user_id: str,
        event_id: str,
        class_id: str,
        updates: list[tuple[int, Optional[str]]]
    ) -> dict:
        """
        🔥 Guarda un batch de (position, entry_id | None)

        Cada posición se borra primero; si el entry es None se queda vacía.
        """
        now = datetime.now(timezone.utc)
        inserted = deleted = 0

        for position, entry_id in updates:
            result = await self.podium_predictions.delete_many({
                "user_id": user_id,
                "event_id": event_id,
                "class_id": class_id,
                "position": position,
            })
            deleted += result.deleted_count

            if entry_id is None:
                continue

            await self.podium_predictions.insert_one({
                "user_id": user_id,
                "event_id": event_id,
                "class_id": class_id,
                "position": position,
                "entry_id": entry_id,
                "updated_at": now,
            })
            inserted += 1

        return {"inserted": inserted, "deleted": deleted}

    async def save_manufacturer_predictions(
        self,
        user_id: str,
        event_id: str,
        class_id: str,
        updates: list[tuple[int, Optional[str]]]
    ) -> dict:
        """
        🔥 Guarda un batch de (predicted_rank, manufacturer_id | None)

        Se borra lo que ocupaba ese rank (y el rank anterior del fabricante)
        antes de insertar, así un fabricante nunca queda con dos ranks.
        """
        now = datetime.now(timezone.utc)
        inserted = deleted = 0
        scope = {"user_id": user_id, "event_id": event_id, "class_id": class_id}

        for rank, manufacturer_id in updates:
            result = await self.manufacturer_predictions.delete_many({**scope, "predicted_rank": rank})
            deleted += result.deleted_count

            if manufacturer_id is None:
                continue

            result = await self.manufacturer_predictions.delete_many({
                **scope, "manufacturer_id": manufacturer_id
            })
            deleted += result.deleted_count

            await self.manufacturer_predictions.insert_one({
                **scope,
                "manufacturer_id": manufacturer_id,
                "predicted_rank": rank,
                "updated_at": now,
            })
            inserted += 1

        return {"inserted": inserted, "deleted": deleted}
