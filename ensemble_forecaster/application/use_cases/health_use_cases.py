"""Use cases behind the ``/health`` and ``/info`` system endpoints."""

from datetime import datetime, timezone
from typing import Optional

from ensemble_forecaster.application.dtos.health_dto import (
    ApplicationInfoDTO,
    SystemHealthDTO,
)
from ensemble_forecaster.application.models import SystemInfo
from ensemble_forecaster.domain.entities.health import (
    ApplicationInfo,
    ForecasterRuntime,
)
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.domain.ports.health_check import IHealthCheckService
from ensemble_forecaster.domain.repositories.prediction_history_repository import (
    IPredictionHistoryRepository,
)


class GetHealthStatusUseCase:
    def __init__(self, health_check_service: IHealthCheckService) -> None:
        self._health_check_service = health_check_service

    async def execute(self) -> SystemHealthDTO:
        return SystemHealthDTO.from_domain(await self._health_check_service.evaluate())


class GetApplicationInfoUseCase:
    """Describe the running forecaster: build, uptime, source health, ensemble."""

    def __init__(
        self,
        health_check_service: IHealthCheckService,
        history_repository: IPredictionHistoryRepository,
        system_info: SystemInfo,
        parameters: EnsembleParameters,
    ) -> None:
        self._health_check_service = health_check_service
        self._history_repository = history_repository
        self._info = system_info
        self._parameters = parameters

    async def execute(self, started_at: Optional[datetime]) -> ApplicationInfoDTO:
        now = datetime.now(timezone.utc)
        started = started_at or now

        info = ApplicationInfo(
            name=self._info.title,
            description=self._info.description,
            version=self._info.version,
            environment=self._info.environment,
            git_commit=self._info.git_commit,
            build_time=self._info.build_time,
            started_at=started,
            uptime_seconds=max(0.0, (now - started).total_seconds()),
            health=await self._health_check_service.evaluate(),
            runtime=await self._runtime(),
        )
        return ApplicationInfoDTO.from_domain(info)

    async def _runtime(self) -> ForecasterRuntime:
        params = self._parameters
        return ForecasterRuntime(
            history_source=self._info.public_source_url,
            predictions_served=await self._history_repository.count(),
            active_experts=[name.value for name in params.active_experts],
            min_history=params.min_history,
            backtest_window=params.backtest_window,
            tuning_window=params.tuning_window,
        )
