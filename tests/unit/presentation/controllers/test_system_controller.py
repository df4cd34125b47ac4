from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi import Request, Response

from ensemble_forecaster.application.models import SystemInfo
from ensemble_forecaster.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from ensemble_forecaster.domain.entities.health import (
    DependencyStatus,
    ServiceStatus,
    SystemHealth,
)
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.infrastructure.repositories import (
    InMemoryPredictionHistoryRepository,
)
from ensemble_forecaster.presentation.controllers.system_controller import (
    health,
    info,
)


class _HealthService:
    def __init__(self, status: ServiceStatus):
        self._health = SystemHealth(
            status=status,
            dependencies=[DependencyStatus(name="history_source", status=status)],
        )

    async def evaluate(self) -> SystemHealth:
        return self._health


@pytest.mark.asyncio
async def test_health_endpoint_returns_status():
    response = Response()
    dto = await health(
        response=response,
        health_use_case=GetHealthStatusUseCase(_HealthService(ServiceStatus.UP)),
    )
    assert dto.status is ServiceStatus.UP
    assert dto.dependencies[0].name == "history_source"
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_endpoint_flags_down_source_with_503():
    response = Response()
    dto = await health(
        response=response,
        health_use_case=GetHealthStatusUseCase(_HealthService(ServiceStatus.DOWN)),
    )
    assert dto.status is ServiceStatus.DOWN
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_info_endpoint_returns_application_info():
    system_info = SystemInfo(
        title="Ensemble Forecaster",
        description="desc",
        version="1.0",
        environment="dev",
        git_commit="abc",
        build_time="now",
        history_source_url="http://feed/history",
    )
    info_use_case = GetApplicationInfoUseCase(
        _HealthService(ServiceStatus.DEGRADED),
        InMemoryPredictionHistoryRepository(),
        system_info,
        EnsembleParameters(),
    )

    scope = {
        "type": "http",
        "method": "GET",
        "path": "/info",
        "headers": [],
        "query_string": b"",
        "server": ("test", 80),
        "app": SimpleNamespace(
            state=SimpleNamespace(started_at=datetime.now(timezone.utc))
        ),
    }
    request = Request(scope)

    dto = await info(request=request, info_use_case=info_use_case)
    assert dto.name == "Ensemble Forecaster"
    assert dto.status is ServiceStatus.DEGRADED
    assert dto.runtime.predictions_served == 0
    assert dto.runtime.history_source == "http://feed/history"
