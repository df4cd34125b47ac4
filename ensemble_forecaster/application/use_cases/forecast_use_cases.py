"""
Application Use Cases - Forecasting

Orchestrate one request against the forecasting core:
  * Fetch and normalise the event history from the history source
  * Reuse cached tuned weights while they are fresh
  * Run the CPU-bound forecast or backtest off the event loop
  * Log the served prediction so its outcome can be reported later
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

import structlog

from ensemble_forecaster.application.dtos.prediction_dto import (
    BacktestResponseDTO,
    PredictionResponseDTO,
)
from ensemble_forecaster.domain.entities.errors import (
    HistorySourcePayloadError,
    InsufficientDataError,
)
from ensemble_forecaster.domain.entities.event import Event
from ensemble_forecaster.domain.entities.forecast import WeightSource
from ensemble_forecaster.domain.entities.prediction import PredictionRecord
from ensemble_forecaster.domain.gateways.history_source_gateway import (
    IHistorySourceGateway,
)
from ensemble_forecaster.domain.ports.weight_cache import ITunedWeightCache
from ensemble_forecaster.domain.repositories.prediction_history_repository import (
    IPredictionHistoryRepository,
)
from ensemble_forecaster.domain.services.prediction_service import PredictionService

logger = structlog.get_logger(__name__)


class _HistoryFetcher:
    def __init__(
        self, history_gateway: IHistorySourceGateway, default_source_url: str
    ) -> None:
        self._history_gateway = history_gateway
        self._default_source_url = default_source_url

    def _resolve_source(self, source_url: Optional[str]) -> str:
        return source_url or self._default_source_url

    async def _fetch(self, source: str, timeout: Optional[float] = None) -> List[Event]:
        events = await self._history_gateway.fetch_events(source, timeout=timeout)
        if not events:
            logger.warning("forecast.no_usable_records", source=source)
            raise HistorySourcePayloadError(
                "No usable historical records from source", details={"url": source}
            )
        return events


class GeneratePredictionUseCase(_HistoryFetcher):
    """Forecast the label following the latest event of a history source."""

    def __init__(
        self,
        history_gateway: IHistorySourceGateway,
        history_repository: IPredictionHistoryRepository,
        prediction_service: PredictionService,
        weight_cache: ITunedWeightCache,
        default_source_url: str,
    ) -> None:
        super().__init__(history_gateway, default_source_url)
        self._history_repository = history_repository
        self._prediction_service = prediction_service
        self._weight_cache = weight_cache

    async def execute(
        self, source_url: Optional[str] = None, min_records: Optional[int] = None
    ) -> PredictionResponseDTO:
        """
        Generate and log a forecast.

        Args:
            source_url: History feed to forecast; the configured one when omitted
            min_records: Minimum number of usable events the caller requires

        Raises:
            HistorySourceError: When the feed cannot be fetched or is empty
            InsufficientDataError: When fewer than ``min_records`` events exist
        """
        source = self._resolve_source(source_url)
        logger.info("prediction.start", source=source, min_records=min_records)

        events = await self._fetch(source)
        if min_records is not None and len(events) < min_records:
            logger.info(
                "prediction.insufficient_data",
                source=source,
                available=len(events),
                required=min_records,
            )
            raise InsufficientDataError(available=len(events), required=min_records)

        last_event = events[-1]
        cached = self._weight_cache.get(source, last_event.index)
        forecast = await asyncio.to_thread(
            self._prediction_service.predict, events, cached
        )
        if forecast.diagnostics.weight_source is WeightSource.TUNED:
            self._weight_cache.put(source, last_event.index, forecast.weights)

        record = PredictionRecord(
            target_index=last_event.index + 1,
            label=forecast.label,
            probability_a=forecast.probability_a,
            confidence=forecast.confidence,
            source=source,
            expert_breakdown={
                name.value: p for name, p in forecast.expert_breakdown.items()
            },
        )
        await self._history_repository.add(record)
        predictions_made = await self._history_repository.count()

        logger.info(
            "prediction.completed",
            source=source,
            events=len(events),
            next_index=record.target_index,
            label=forecast.label.value,
            probability_a=round(forecast.probability_a, 4),
            weight_source=forecast.diagnostics.weight_source.value,
            accuracy=forecast.accuracy,
        )
        return PredictionResponseDTO.from_domain(
            forecast, last_event, predictions_made
        )


class RunBacktestUseCase(_HistoryFetcher):
    """Tune weights on a history source and report their walk-forward accuracy."""

    def __init__(
        self,
        history_gateway: IHistorySourceGateway,
        prediction_service: PredictionService,
        weight_cache: ITunedWeightCache,
        default_source_url: str,
        fetch_timeout: Optional[float] = None,
    ) -> None:
        super().__init__(history_gateway, default_source_url)
        self._prediction_service = prediction_service
        self._weight_cache = weight_cache
        self._fetch_timeout = fetch_timeout

    async def execute(
        self, source_url: Optional[str] = None, window: Optional[int] = None
    ) -> BacktestResponseDTO:
        source = self._resolve_source(source_url)
        window_size = window
        if window_size is None:
            window_size = self._prediction_service.params.backtest_window
        logger.info("backtest.start", source=source, window=window_size)

        events = await self._fetch(source, timeout=self._fetch_timeout)
        tuning, result = await asyncio.to_thread(self._run, events, window_size)
        if tuning.tuned:
            self._weight_cache.put(source, events[-1].index, tuning.weights)

        logger.info(
            "backtest.completed",
            source=source,
            window=window_size,
            trials=result.trials,
            accuracy=result.accuracy,
            tuned=tuning.tuned,
        )
        return BacktestResponseDTO.from_domain(
            result,
            window=window_size,
            sequence_length=len(events),
            weights=tuning.weights,
            tuned=tuning.tuned,
        )

    def _run(self, events: List[Event], window_size: int):
        tuning = self._prediction_service.tune(events)
        result = self._prediction_service.backtest(
            events, window_size, weights=tuning.weights
        )
        return tuning, result
