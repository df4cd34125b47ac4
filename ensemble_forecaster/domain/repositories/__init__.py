"""Storage contract for the log of served predictions."""

from .prediction_history_repository import IPredictionHistoryRepository

__all__ = ["IPredictionHistoryRepository"]
