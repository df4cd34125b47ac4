from __future__ import annotations

from datetime import datetime, timezone

from ensemble_forecaster.application.dtos.health_dto import (
    ApplicationInfoDTO,
    SystemHealthDTO,
)
from ensemble_forecaster.domain.entities.health import (
    ApplicationInfo,
    DependencyStatus,
    ForecasterRuntime,
    ServiceStatus,
    SystemHealth,
)


def test_system_health_dto_from_domain() -> None:
    health = SystemHealth(
        status=ServiceStatus.DEGRADED,
        dependencies=[
            DependencyStatus(
                name="history_source",
                status=ServiceStatus.DEGRADED,
                message="HTTP 404",
                latency_ms=12.5,
                details={"status_code": 404},
            )
        ],
    )

    dto = SystemHealthDTO.from_domain(health)

    assert dto.status is ServiceStatus.DEGRADED
    assert dto.dependencies[0].name == "history_source"
    assert dto.dependencies[0].details == {"status_code": 404}


def test_application_info_dto_from_domain() -> None:
    started = datetime(2024, 9, 9, 12, 0, tzinfo=timezone.utc)
    info = ApplicationInfo(
        name="Ensemble Forecaster",
        description="desc",
        version="1.0.0",
        environment="production",
        git_commit="abc123",
        build_time="2024-09-09T11:00:00Z",
        started_at=started,
        uptime_seconds=12.5,
        health=SystemHealth.from_dependencies(
            [DependencyStatus(name="history_source", status=ServiceStatus.UP)]
        ),
        runtime=ForecasterRuntime(
            history_source="http://feed/history",
            predictions_served=4,
            active_experts=["markov1", "run_bias"],
            min_history=8,
            backtest_window=250,
            tuning_window=200,
        ),
    )

    dto = ApplicationInfoDTO.from_domain(info)
    payload = dto.model_dump(mode="json")

    assert dto.started_at == started
    assert payload["status"] == "up"
    assert payload["runtime"]["predictions_served"] == 4
    assert payload["runtime"]["active_experts"] == ["markov1", "run_bias"]
    assert payload["dependencies"][0]["status"] == "up"
