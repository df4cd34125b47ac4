"""
Infrastructure Repository - Prediction History In-Memory Implementation

This module implements the prediction history repository as a bounded
in-process log. Records do not survive a restart.
"""

from collections import deque
from typing import Deque, List, Optional

import structlog

from ensemble_forecaster.domain.entities.event import Label
from ensemble_forecaster.domain.entities.prediction import PredictionRecord
from ensemble_forecaster.domain.repositories.prediction_history_repository import (
    IPredictionHistoryRepository,
)

logger = structlog.get_logger(__name__)


class InMemoryPredictionHistoryRepository(IPredictionHistoryRepository):
    """Bounded in-memory implementation of prediction history repository."""

    def __init__(self, max_records: int = 500):
        self._records: Deque[PredictionRecord] = deque(maxlen=max_records)
        self._issued = 0

    async def add(self, record: PredictionRecord) -> PredictionRecord:
        self._records.append(record)
        self._issued += 1
        logger.debug(
            "prediction_history.added",
            record_id=str(record.id),
            target_index=record.target_index,
            label=record.label.value,
        )
        return record

    async def mark_latest_actual(self, actual: Label) -> Optional[PredictionRecord]:
        if not self._records:
            return None
        latest = self._records[-1]
        if not latest.pending:
            return None
        latest.resolve(actual)
        logger.info(
            "prediction_history.resolved",
            record_id=str(latest.id),
            target_index=latest.target_index,
            hit=latest.hit,
        )
        return latest

    async def list_recent(self, limit: int = 50) -> List[PredictionRecord]:
        if limit <= 0:
            return []
        return list(self._records)[-limit:]

    async def count(self) -> int:
        return self._issued
