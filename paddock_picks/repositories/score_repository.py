"""
💾 ScoreRepository - Escritura idempotente de puntuaciones calculadas

Todo se guarda con upserts por (user, contexto[, clase]). Cada run marca sus
filas con un run_id y al final borra las filas del mismo contexto que no
tocó: re-ejecutar el scoring deja exactamente el resultado nuevo, nunca suma.
"""

import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from paddock_picks.models.result import ManufacturerResult
from paddock_picks.models.score import (
    TrackOrderScore,
    UserEventScore,
    UserTotal,
    WinnerPickScore,
)


class ScoreRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.track_order_scores = db["track_order_scores"]
        self.track_order_user_scores = db["track_order_user_scores"]
        self.winner_pick_scores = db["winner_pick_scores"]
        self.winner_pick_user_scores = db["winner_pick_user_scores"]
        self.manufacturer_results = db["imsa_manufacturer_results"]
        self.user_event_scores = db["imsa_user_event_scores"]

    async def _replace_scope(
        self,
        collection: AsyncIOMotorCollection,
        scope: dict,
        key_fields: tuple[str, ...],
        docs: Iterable[dict]
    ) -> int:
        """
        Upsert de cada doc por key_fields y borrado de lo que quede en el scope
        sin tocar por este run. Devuelve cuántos docs se escribieron.
        """
        run_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        written = 0

        for doc in docs:
            key = {field: doc[field] for field in key_fields}
            await collection.update_one(
                key,
                {"$set": {**doc, "run_id": run_id, "updated_at": now}},
                upsert=True
            )
            written += 1

        await collection.delete_many({**scope, "run_id": {"$ne": run_id}})
        return written

    # ============================================
    # 📌 NOSTRADOUGLAS
    # ============================================

    async def replace_track_order_results(
        self,
        season_id: str,
        scores: list[TrackOrderScore],
        totals: list[UserTotal]
    ) -> int:
        """Guarda el detalle por predicción y el total por usuario de una temporada"""
        await self._replace_scope(
            self.track_order_scores,
            {"season_id": season_id},
            ("user_id", "season_id", "predicted_week"),
            (s.model_dump(mode="json") for s in scores)
        )
        return await self._replace_scope(
            self.track_order_user_scores,
            {"season_id": season_id},
            ("user_id", "season_id"),
            (
                {
                    "user_id": t.user_id,
                    "season_id": season_id,
                    "total_points": t.total_points,
                    **t.breakdown,
                }
                for t in totals
            )
        )

    async def get_track_order_scores(
        self,
        season_id: str,
        user_id: Optional[str] = None
    ) -> list[TrackOrderScore]:
        query = {"season_id": season_id}
        if user_id:
            query["user_id"] = user_id

        cursor = self.track_order_scores.find(query).sort([("user_id", 1), ("predicted_week", 1)])
        docs = await cursor.to_list(length=None)
        return [TrackOrderScore(**doc) for doc in docs]

    # ============================================
    # 📌 COMMUNITY PREDICTIONS
    # ============================================

    async def replace_winner_pick_results(
        self,
        season_id: str,
        scores: list[WinnerPickScore],
        totals: list[UserTotal]
    ) -> int:
        await self._replace_scope(
            self.winner_pick_scores,
            {"season_id": season_id},
            ("user_id", "schedule_id", "division", "split"),
            (s.model_dump(mode="json") for s in scores)
        )
        return await self._replace_scope(
            self.winner_pick_user_scores,
            {"season_id": season_id},
            ("user_id", "season_id"),
            (
                {
                    "user_id": t.user_id,
                    "season_id": season_id,
                    "total_points": t.total_points,
                    "weeks_participated": t.contexts_participated,
                    **t.breakdown,
                }
                for t in totals
            )
        )

    # ============================================
    # 📌 IMSA
    # ============================================

    async def replace_event_results(
        self,
        event_id: str,
        manufacturer_results: list[ManufacturerResult],
        user_scores: list[UserEventScore]
    ) -> int:
        """Ranking de fabricantes y totales por usuario de un evento"""
        await self._replace_scope(
            self.manufacturer_results,
            {"event_id": event_id},
            ("event_id", "class_id", "manufacturer_id"),
            (m.model_dump() for m in manufacturer_results)
        )
        return await self._replace_scope(
            self.user_event_scores,
            {"event_id": event_id},
            ("user_id", "event_id"),
            (s.model_dump() for s in user_scores)
        )

    async def get_manufacturer_results(self, event_id: str) -> list[ManufacturerResult]:
        cursor = self.manufacturer_results.find({"event_id": event_id}).sort([
            ("class_id", 1), ("final_rank", 1)
        ])
        docs = await cursor.to_list(length=None)
        return [ManufacturerResult(**doc) for doc in docs]

    async def get_event_scores(self, event_ids: Optional[list[str]] = None) -> list[UserEventScore]:
        """Totales por (user, event); sin event_ids devuelve todos (all-time)"""
        query = {} if event_ids is None else {"event_id": {"$in": event_ids}}
        docs = await self.user_event_scores.find(query).to_list(length=None)
        return [UserEventScore(**doc) for doc in docs]
