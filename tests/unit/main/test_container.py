from __future__ import annotations

import asyncio

import pytest

from ensemble_forecaster.application.use_cases.forecast_use_cases import (
    GeneratePredictionUseCase,
)
from ensemble_forecaster.domain.entities.errors import ParameterValidationError
from ensemble_forecaster.domain.entities.expert import REQUIRED_EXPERTS, ExpertName
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.domain.services.prediction_service import PredictionService
from ensemble_forecaster.main.config import AppSettings
from ensemble_forecaster.main.container import (
    app_lifespan,
    build_ensemble_parameters,
    get_container,
    init_container,
)


def test_build_ensemble_parameters_from_settings() -> None:
    params = build_ensemble_parameters(
        {"active_experts": ["markov1", "run_bias"], "grid_values": [0, 1]}
    )

    assert params.active_experts == (ExpertName.MARKOV1, ExpertName.RUN_BIAS)
    assert params.grid_values == (0.0, 1.0)


def test_build_ensemble_parameters_rejects_invalid_values() -> None:
    with pytest.raises(ParameterValidationError):
        build_ensemble_parameters(
            {"active_experts": list(REQUIRED_EXPERTS), "grid_min_sum": 5.0}
        )


@pytest.mark.asyncio
async def test_init_and_get_container() -> None:
    settings = AppSettings()
    container = init_container(settings)
    assert get_container() is container

    params = container.ensemble_parameters()
    assert isinstance(params, EnsembleParameters)
    assert params.active_experts == REQUIRED_EXPERTS
    assert params.backtest_window == settings.ensemble.backtest_window

    service = container.prediction_service()
    assert isinstance(service, PredictionService)
    assert service.params is params
    assert container.prediction_service() is service

    use_case = container.generate_prediction_use_case()
    assert isinstance(use_case, GeneratePredictionUseCase)
    assert container.generate_prediction_use_case() is not use_case

    async with app_lifespan() as resolved:
        assert resolved is container


@pytest.mark.asyncio
async def test_app_lifespan_clears_weight_cache() -> None:
    container = init_container(AppSettings())
    cache = container.weight_cache()
    weights = container.ensemble_parameters().default_weight_vector()
    cache.put("http://source", 10, weights)

    async with app_lifespan():
        await asyncio.sleep(0)
        assert cache.get("http://source", 10) is weights

    assert cache.get("http://source", 10) is None


def test_history_use_case_receives_default_weights() -> None:
    container = init_container(AppSettings())
    use_case = container.get_prediction_history_use_case()

    assert (
        use_case._default_weights
        == container.ensemble_parameters().default_weight_vector()
    )


def test_get_container_without_init_raises(monkeypatch) -> None:
    monkeypatch.setattr("ensemble_forecaster.main.container._app_container", None)
    with pytest.raises(RuntimeError):
        get_container()
