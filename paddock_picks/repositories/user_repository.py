"""
UserRepository - MongoDB access for public user profiles.
"""

from typing import Iterable

from motor.motor_asyncio import AsyncIOMotorDatabase


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["user_profiles"]

    async def get_display_names(self, user_ids: Iterable[str]) -> dict[str, str]:
        """Map user_id -> display_name for the given users (unknown users are skipped)."""
        ids = list(set(user_ids))
        if not ids:
            return {}

        cursor = self.collection.find({"user_id": {"$in": ids}})
        docs = await cursor.to_list(length=None)
        return {doc["user_id"]: doc["display_name"] for doc in docs if doc.get("display_name")}

