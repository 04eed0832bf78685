"""
PredictionService - Batch edits of IMSA podium and manufacturer predictions.

Predictions can only change while the event is not completed.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.repositories.prediction_repository import PredictionRepository
from paddock_picks.repositories.result_repository import ResultRepository
from paddock_picks.scoring.multi_class import PODIUM_POSITIONS
from paddock_picks.services.event_scoring_service import EventNotFoundError


class PredictionServiceError(Exception):
    """Base exception for prediction service errors."""
    pass


class PredictionLockedError(PredictionServiceError):
    """Raised when trying to modify predictions of a completed event."""
    pass


class InvalidPredictionError(PredictionServiceError):
    """Raised when prediction data is invalid."""
    pass


class PredictionService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.prediction_repo = PredictionRepository(db)
        self.result_repo = ResultRepository(db)

    async def _check_open(self, event_id: str, class_id: str):
        event = await self.result_repo.get_event(event_id)
        if not event:
            raise EventNotFoundError(f"Event {event_id} not found")
        if event.status == "completed":
            raise PredictionLockedError("Cannot modify predictions for a completed event")

        classes = await self.result_repo.get_classes(event_id)
        cls = next((c for c in classes if c.id == class_id), None)
        if cls is None:
            raise InvalidPredictionError(f"Class {class_id} does not belong to event {event_id}")
        return cls

    async def save_podium_predictions(
        self,
        user_id: str,
        event_id: str,
        class_id: str,
        updates: list[tuple[int, Optional[str]]]
    ) -> dict:
        """Save (position, entry_id | None) pairs; None clears the position."""
        await self._check_open(event_id, class_id)

        for position, _ in updates:
            if position not in PODIUM_POSITIONS:
                raise InvalidPredictionError(f"Podium position must be 1-3, got {position}")

        return await self.prediction_repo.save_podium_predictions(user_id, event_id, class_id, updates)

    async def save_manufacturer_predictions(
        self,
        user_id: str,
        event_id: str,
        class_id: str,
        updates: list[tuple[int, Optional[str]]]
    ) -> dict:
        """Save (rank, manufacturer_id | None) pairs; None clears the rank."""
        cls = await self._check_open(event_id, class_id)
        if not cls.has_manufacturer_prediction:
            raise InvalidPredictionError(f"Class {class_id} has no manufacturer predictions")

        for rank, _ in updates:
            if rank < 1:
                raise InvalidPredictionError(f"Manufacturer rank must be >= 1, got {rank}")

        return await self.prediction_repo.save_manufacturer_predictions(user_id, event_id, class_id, updates)
