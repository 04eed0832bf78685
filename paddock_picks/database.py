"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from paddock_picks.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info(f"✅ Connected to MongoDB: {settings.mongodb_db_name}")

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("❌ Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency para inyectar la DB"""
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (run once al deployment)
# ============================================

async def create_indexes(db: Optional[AsyncIOMotorDatabase] = None):
    """
    Crea los índices necesarios.

    Los índices únicos son las claves de los upserts del scoring: un re-run
    sobrescribe la fila existente en lugar de duplicarla.
    """
    db = db if db is not None else Database.get_db()

    # Temporadas (Nostradouglas + Community Predictions)
    await db.seasons.create_index("id", unique=True)
    await db.schedule.create_index([("season_id", 1), ("week", 1)], unique=True)
    await db.track_predictions.create_index(
        [("user_id", 1), ("season_id", 1), ("position", 1)], unique=True
    )
    await db.winner_predictions.create_index(
        [("user_id", 1), ("schedule_id", 1), ("division", 1), ("split", 1)], unique=True
    )
    await db.race_results.create_index([("schedule_id", 1), ("division", 1), ("split", 1)])
    await db.race_results.create_index("season_id")

    # Eventos IMSA
    await db.imsa_events.create_index("id", unique=True)
    await db.imsa_classes.create_index("event_id")
    await db.imsa_entry_results.create_index([("event_id", 1), ("entry_id", 1)], unique=True)
    await db.imsa_podium_predictions.create_index(
        [("user_id", 1), ("event_id", 1), ("class_id", 1), ("position", 1)], unique=True
    )
    await db.imsa_manufacturer_predictions.create_index(
        [("user_id", 1), ("event_id", 1), ("class_id", 1), ("manufacturer_id", 1)], unique=True
    )
    await db.imsa_manufacturer_predictions.create_index(
        [("user_id", 1), ("event_id", 1), ("class_id", 1), ("predicted_rank", 1)], unique=True
    )

    # Puntuaciones calculadas (caché)
    await db.track_order_scores.create_index(
        [("user_id", 1), ("season_id", 1), ("predicted_week", 1)], unique=True
    )
    await db.track_order_user_scores.create_index([("user_id", 1), ("season_id", 1)], unique=True)
    await db.winner_pick_scores.create_index(
        [("user_id", 1), ("schedule_id", 1), ("division", 1), ("split", 1)], unique=True
    )
    await db.winner_pick_user_scores.create_index([("user_id", 1), ("season_id", 1)], unique=True)
    await db.imsa_manufacturer_results.create_index(
        [("event_id", 1), ("class_id", 1), ("manufacturer_id", 1)], unique=True
    )
    await db.imsa_user_event_scores.create_index([("user_id", 1), ("event_id", 1)], unique=True)
    await db.leaderboard_snapshots.create_index([("kind", 1), ("context_id", 1)], unique=True)

    # Perfiles públicos
    await db.user_profiles.create_index("user_id", unique=True)

    logger.info("✅ Indexes created successfully")
