from __future__ import annotations

import pytest
from fastapi import HTTPException

from ensemble_forecaster.application.dtos.prediction_dto import UpdateActualRequestDTO
from ensemble_forecaster.application.use_cases.forecast_use_cases import (
    GeneratePredictionUseCase,
    RunBacktestUseCase,
)
from ensemble_forecaster.application.use_cases.prediction_history_use_cases import (
    GetPredictionHistoryUseCase,
    RecordActualOutcomeUseCase,
)
from ensemble_forecaster.domain.entities.event import Label
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.domain.services.prediction_service import PredictionService
from ensemble_forecaster.infrastructure.repositories import (
    InMemoryPredictionHistoryRepository,
)
from ensemble_forecaster.infrastructure.services.weight_cache import TunedWeightCache
from ensemble_forecaster.presentation.controllers.predictions_controller import (
    backtest,
    get_prediction_history,
    predict,
    premium_predict,
    update_actual,
)
from tests.conftest import StubHistoryGateway, make_events

SOURCE = "http://source/history"


class _ExplodingUseCase:
    async def execute(self, *args, **kwargs):
        raise RuntimeError("boom")


def _prediction_use_case(gateway, repository=None) -> GeneratePredictionUseCase:
    return GeneratePredictionUseCase(
        history_gateway=gateway,
        history_repository=repository or InMemoryPredictionHistoryRepository(),
        prediction_service=PredictionService(),
        weight_cache=TunedWeightCache(),
        default_source_url=SOURCE,
    )


@pytest.mark.asyncio
async def test_predict_returns_forecast(alternating_events) -> None:
    use_case = _prediction_use_case(StubHistoryGateway(alternating_events))

    dto = await predict(src=None, prediction_use_case=use_case)

    assert dto.label is Label.B
    assert dto.next_index == 41


@pytest.mark.asyncio
async def test_predict_maps_source_errors_to_bad_gateway(
    unreachable_source_error,
) -> None:
    gateway = StubHistoryGateway(error=unreachable_source_error)

    with pytest.raises(HTTPException) as exc:
        await predict(src=None, prediction_use_case=_prediction_use_case(gateway))

    assert exc.value.status_code == 502
    assert "request failed" in exc.value.detail


@pytest.mark.asyncio
async def test_predict_maps_empty_feed_to_bad_gateway() -> None:
    with pytest.raises(HTTPException) as exc:
        await predict(
            src="http://other/feed",
            prediction_use_case=_prediction_use_case(StubHistoryGateway([])),
        )

    assert exc.value.status_code == 502
    assert exc.value.detail == "No usable historical records from source"


@pytest.mark.asyncio
async def test_predict_hides_unexpected_errors() -> None:
    with pytest.raises(HTTPException) as exc:
        await predict(src=None, prediction_use_case=_ExplodingUseCase())

    assert exc.value.status_code == 500
    assert exc.value.detail == "Internal server error"


@pytest.mark.asyncio
async def test_premium_rejects_short_history() -> None:
    gateway = StubHistoryGateway(make_events("AB" * 10))

    with pytest.raises(HTTPException) as exc:
        await premium_predict(
            src=None,
            min_records=40,
            prediction_use_case=_prediction_use_case(gateway),
        )

    assert exc.value.status_code == 400
    assert "Need at least 40 records, got 20" in exc.value.detail


@pytest.mark.asyncio
async def test_premium_forecasts_with_enough_history(alternating_events) -> None:
    use_case = _prediction_use_case(StubHistoryGateway(alternating_events))

    dto = await premium_predict(src=None, min_records=40, prediction_use_case=use_case)

    assert dto.predictions_made == 1


@pytest.mark.asyncio
async def test_backtest_endpoint(alternating_events) -> None:
    use_case = RunBacktestUseCase(
        history_gateway=StubHistoryGateway(alternating_events),
        prediction_service=PredictionService(),
        weight_cache=TunedWeightCache(),
        default_source_url=SOURCE,
    )

    dto = await backtest(src=None, window=20, backtest_use_case=use_case)

    assert dto.window == 20
    assert dto.accuracy == 1.0


@pytest.mark.asyncio
async def test_backtest_maps_source_errors(unreachable_source_error) -> None:
    use_case = RunBacktestUseCase(
        history_gateway=StubHistoryGateway(error=unreachable_source_error),
        prediction_service=PredictionService(),
        weight_cache=TunedWeightCache(),
        default_source_url=SOURCE,
    )

    with pytest.raises(HTTPException) as exc:
        await backtest(src=None, window=None, backtest_use_case=use_case)

    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_history_and_update_actual(alternating_events) -> None:
    repository = InMemoryPredictionHistoryRepository()
    await predict(
        src=None,
        prediction_use_case=_prediction_use_case(
            StubHistoryGateway(alternating_events), repository
        ),
    )

    updated = await update_actual(
        payload=UpdateActualRequestDTO(actual="Xỉu"),
        record_use_case=RecordActualOutcomeUseCase(repository),
    )
    history = await get_prediction_history(
        limit=10,
        history_use_case=GetPredictionHistoryUseCase(
            history_repository=repository,
            weight_cache=TunedWeightCache(),
            default_weights=EnsembleParameters().default_weight_vector(),
        ),
    )

    assert updated.ok
    assert updated.record.hit is True
    assert history.total_predictions == 1
    assert history.history[0].actual is Label.B


@pytest.mark.asyncio
async def test_update_actual_without_prediction() -> None:
    with pytest.raises(HTTPException) as exc:
        await update_actual(
            payload=UpdateActualRequestDTO(actual="A"),
            record_use_case=RecordActualOutcomeUseCase(
                InMemoryPredictionHistoryRepository()
            ),
        )

    assert exc.value.status_code == 404
