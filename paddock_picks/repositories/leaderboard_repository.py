"""
🏆 LeaderboardRepository - Último leaderboard publicado por contexto

Es el "snapshot previo" que se pasa explícitamente al builder para calcular
los cambios de posición. No hay estado global oculto.
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.models.leaderboard import ContextKind, LeaderboardEntry, LeaderboardSnapshot


class LeaderboardRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["leaderboard_snapshots"]

    async def get_snapshot(self, kind: ContextKind, context_id: str) -> Optional[LeaderboardSnapshot]:
        doc = await self.collection.find_one({"kind": kind.value, "context_id": context_id})
        if not doc:
            return None

        return LeaderboardSnapshot(
            kind=ContextKind(doc["kind"]),
            context_id=doc["context_id"],
            entries=[LeaderboardEntry(**entry) for entry in doc.get("entries", [])],
            computed_at=doc["computed_at"],
        )

    async def save_snapshot(self, snapshot: LeaderboardSnapshot) -> None:
        """Reemplaza el snapshot del contexto (upsert)"""
        await self.collection.update_one(
            {"kind": snapshot.kind.value, "context_id": snapshot.context_id},
            {
                "$set": {
                    "entries": [entry.model_dump(mode="json") for entry in snapshot.entries],
                    "computed_at": snapshot.computed_at,
                }
            },
            upsert=True
        )
