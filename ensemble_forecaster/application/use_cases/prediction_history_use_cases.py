"""Use cases for the log of served predictions."""

from __future__ import annotations

import structlog

from ensemble_forecaster.application.dtos.prediction_dto import (
    HistoryResponseDTO,
    PredictionRecordDTO,
    UpdateActualResponseDTO,
    weights_payload,
)
from ensemble_forecaster.domain.entities.errors import PredictionHistoryEmptyError
from ensemble_forecaster.domain.entities.event import Label
from ensemble_forecaster.domain.entities.expert import WeightVector
from ensemble_forecaster.domain.ports.weight_cache import ITunedWeightCache
from ensemble_forecaster.domain.repositories.prediction_history_repository import (
    IPredictionHistoryRepository,
)

logger = structlog.get_logger(__name__)


class GetPredictionHistoryUseCase:
    """Return the most recent predictions and the weights last tuned."""

    def __init__(
        self,
        history_repository: IPredictionHistoryRepository,
        weight_cache: ITunedWeightCache,
        default_weights: WeightVector,
    ) -> None:
        self._history_repository = history_repository
        self._weight_cache = weight_cache
        self._default_weights = default_weights

    async def execute(self, limit: int = 50) -> HistoryResponseDTO:
        records = await self._history_repository.list_recent(limit)
        weights = self._weight_cache.last() or self._default_weights
        return HistoryResponseDTO(
            history=[PredictionRecordDTO.from_domain(record) for record in records],
            weights=weights_payload(weights),
            total_predictions=await self._history_repository.count(),
        )


class RecordActualOutcomeUseCase:
    """Attach the realised label to the latest pending prediction."""

    def __init__(self, history_repository: IPredictionHistoryRepository) -> None:
        self._history_repository = history_repository

    async def execute(self, actual: Label) -> UpdateActualResponseDTO:
        record = await self._history_repository.mark_latest_actual(actual)
        if record is None:
            logger.info("prediction_history.nothing_pending", actual=actual.value)
            raise PredictionHistoryEmptyError()

        logger.info(
            "prediction_history.actual_recorded",
            target_index=record.target_index,
            predicted=record.label.value,
            actual=actual.value,
            hit=record.hit,
        )
        return UpdateActualResponseDTO(
            ok=True, record=PredictionRecordDTO.from_domain(record)
        )
