"""
Wiring of the forecaster.

Settings flow in through ``config``; singletons hold the shared state
(weight cache, prediction log) and every request gets fresh use cases.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict

from dependency_injector import containers, providers

from ensemble_forecaster.application.models import SystemInfo
from ensemble_forecaster.application.use_cases.forecast_use_cases import (
    GeneratePredictionUseCase,
    RunBacktestUseCase,
)
from ensemble_forecaster.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from ensemble_forecaster.application.use_cases.prediction_history_use_cases import (
    GetPredictionHistoryUseCase,
    RecordActualOutcomeUseCase,
)
from ensemble_forecaster.domain.entities.expert import ExpertName
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.domain.services.parameters_validator import (
    validate_parameters,
)
from ensemble_forecaster.domain.services.prediction_service import PredictionService
from ensemble_forecaster.infrastructure.gateways.history_source_gateway import (
    HttpHistorySourceGateway,
)
from ensemble_forecaster.infrastructure.repositories import (
    InMemoryPredictionHistoryRepository,
)
from ensemble_forecaster.infrastructure.services.health_check_service import (
    HealthCheckService,
)
from ensemble_forecaster.infrastructure.services.weight_cache import TunedWeightCache
from ensemble_forecaster.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


def build_ensemble_parameters(ensemble: Dict[str, Any]) -> EnsembleParameters:
    """Map the ``ensemble`` settings section onto validated domain parameters."""
    values = dict(ensemble)
    values["active_experts"] = tuple(
        ExpertName(name) for name in values.get("active_experts", ())
    )
    values["grid_values"] = tuple(float(v) for v in values.get("grid_values", ()))
    params = EnsembleParameters(**values)
    validate_parameters(params)
    return params


class AppContainer(containers.DeclarativeContainer):
    """Providers for every port and use case of the forecaster."""

    wiring_config = containers.WiringConfiguration(
        packages=["..presentation", "..application"]
    )

    # Settings
    config = providers.Configuration()

    # Domain
    ensemble_parameters = providers.Singleton(
        build_ensemble_parameters,
        ensemble=config.ensemble,
    )

    prediction_service = providers.Singleton(
        PredictionService,
        params=ensemble_parameters,
    )

    # Infrastructure
    prediction_history_repository = providers.Singleton(
        InMemoryPredictionHistoryRepository,
        max_records=config.history.max_records,
    )

    weight_cache = providers.Singleton(
        TunedWeightCache,
        enabled=config.cache.enabled,
        ttl_seconds=config.cache.ttl_seconds,
        retune_interval=config.cache.retune_interval,
    )

    # Gateways
    history_source_gateway = providers.Singleton(
        HttpHistorySourceGateway,
        default_url=config.source.url,
        timeout=config.source.timeout,
    )

    health_check_service = providers.Singleton(
        HealthCheckService,
        history_source_url=config.source.url,
        http_timeout=config.source.health_timeout,
    )

    system_info = providers.Singleton(
        SystemInfo,
        title=config.service.title,
        description=config.service.description,
        version=config.service.version,
        environment=providers.Callable(
            lambda env: env.value if hasattr(env, "value") else str(env),
            config.environment,
        ),
        git_commit=config.service.git_commit,
        build_time=config.service.build_time,
        history_source_url=config.source.url,
    )

    # Application (use cases)
    generate_prediction_use_case = providers.Factory(
        GeneratePredictionUseCase,
        history_gateway=history_source_gateway,
        history_repository=prediction_history_repository,
        prediction_service=prediction_service,
        weight_cache=weight_cache,
        default_source_url=config.source.url,
    )

    run_backtest_use_case = providers.Factory(
        RunBacktestUseCase,
        history_gateway=history_source_gateway,
        prediction_service=prediction_service,
        weight_cache=weight_cache,
        default_source_url=config.source.url,
        fetch_timeout=config.source.backtest_timeout,
    )

    get_prediction_history_use_case = providers.Factory(
        GetPredictionHistoryUseCase,
        history_repository=prediction_history_repository,
        weight_cache=weight_cache,
        default_weights=ensemble_parameters.provided.default_weight_vector.call(),
    )

    record_actual_outcome_use_case = providers.Factory(
        RecordActualOutcomeUseCase,
        history_repository=prediction_history_repository,
    )

    get_health_status_use_case = providers.Factory(
        GetHealthStatusUseCase,
        health_check_service=health_check_service,
    )

    get_application_info_use_case = providers.Factory(
        GetApplicationInfoUseCase,
        health_check_service=health_check_service,
        history_repository=prediction_history_repository,
        system_info=system_info,
        parameters=ensemble_parameters,
    )


_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Build the process-wide container from ``settings``."""
    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Return the container built by ``init_container``."""
    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Resolve the ensemble parameters before the first request is served,
    failing start-up on an invalid configuration. Cached weights are
    dropped on shutdown.
    """
    container = get_container()

    params = container.ensemble_parameters()
    weight_cache = container.weight_cache()

    try:
        logger.info(
            "container.resources.initialized",
            active_experts=[name.value for name in params.active_experts],
            source=container.system_info().public_source_url,
        )
        yield container

    finally:
        weight_cache.clear()
        logger.info("container.resources.shutdown")
