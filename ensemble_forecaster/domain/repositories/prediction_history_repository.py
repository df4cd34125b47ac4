"""
Domain Repository Interface - Prediction History

This module defines the repository interface for issued predictions and
the outcomes reported for them.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ensemble_forecaster.domain.entities.event import Label
from ensemble_forecaster.domain.entities.prediction import PredictionRecord


class IPredictionHistoryRepository(ABC):
    """Interface for prediction history repository."""

    @abstractmethod
    async def add(self, record: PredictionRecord) -> PredictionRecord:
        """Store a newly issued prediction."""
        pass

    @abstractmethod
    async def mark_latest_actual(self, actual: Label) -> Optional[PredictionRecord]:
        """Resolve the newest prediction if it is pending; None otherwise."""
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 50) -> List[PredictionRecord]:
        """Return the last ``limit`` records, oldest first."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Total number of predictions issued since start-up."""
        pass
