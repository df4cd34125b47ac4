"""Process-local prediction log (bounded, lost on restart)."""

from .in_memory_prediction_history_repository import (
    InMemoryPredictionHistoryRepository,
)

__all__ = ["InMemoryPredictionHistoryRepository"]
