"""Response models of the ``/health`` and ``/info`` endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ensemble_forecaster.domain.entities.health import (
    ApplicationInfo,
    DependencyStatus,
    ForecasterRuntime,
    ServiceStatus,
    SystemHealth,
)

_SOURCE_PROBE_EXAMPLE = {
    "name": "history_source",
    "status": "up",
    "message": "HTTP 200",
    "checked_at": "2024-09-09T12:00:05Z",
    "latency_ms": 91.7,
    "details": {"status_code": 200},
}


class DependencyStatusDTO(BaseModel):
    name: str = Field(description="Probed collaborator, e.g. history_source")
    status: ServiceStatus
    message: Optional[str] = Field(default=None, description="Outcome of the probe")
    checked_at: datetime
    latency_ms: Optional[float] = Field(
        default=None, description="Round trip of the probe in milliseconds"
    )
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, probe: DependencyStatus) -> "DependencyStatusDTO":
        return cls(
            name=probe.name,
            status=probe.status,
            message=probe.message,
            checked_at=probe.checked_at,
            latency_ms=probe.latency_ms,
            details=probe.details,
        )


def _probes(health: SystemHealth) -> List[DependencyStatusDTO]:
    return [DependencyStatusDTO.from_domain(probe) for probe in health.dependencies]


class SystemHealthDTO(BaseModel):
    """Worst status among the probes, with every probe listed."""

    status: ServiceStatus
    dependencies: List[DependencyStatusDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, health: SystemHealth) -> "SystemHealthDTO":
        return cls(status=health.status, dependencies=_probes(health))

    model_config = {
        "json_schema_extra": {
            "example": {"status": "up", "dependencies": [_SOURCE_PROBE_EXAMPLE]}
        }
    }


class ForecasterRuntimeDTO(BaseModel):
    history_source: str = Field(description="Configured feed, credentials removed")
    predictions_served: int = Field(ge=0)
    active_experts: List[str]
    min_history: int
    backtest_window: int
    tuning_window: int

    @classmethod
    def from_domain(cls, runtime: ForecasterRuntime) -> "ForecasterRuntimeDTO":
        return cls(
            history_source=runtime.history_source,
            predictions_served=runtime.predictions_served,
            active_experts=list(runtime.active_experts),
            min_history=runtime.min_history,
            backtest_window=runtime.backtest_window,
            tuning_window=runtime.tuning_window,
        )


class ApplicationInfoDTO(BaseModel):
    """Build metadata, uptime, source health and ensemble configuration."""

    name: str
    description: str
    version: str
    environment: str
    git_commit: str
    build_time: str
    started_at: datetime
    uptime_seconds: float = Field(ge=0)
    status: ServiceStatus = Field(description="Status of the history source")
    dependencies: List[DependencyStatusDTO] = Field(default_factory=list)
    runtime: ForecasterRuntimeDTO

    @classmethod
    def from_domain(cls, info: ApplicationInfo) -> "ApplicationInfoDTO":
        return cls(
            name=info.name,
            description=info.description,
            version=info.version,
            environment=info.environment,
            git_commit=info.git_commit,
            build_time=info.build_time,
            started_at=info.started_at,
            uptime_seconds=info.uptime_seconds,
            status=info.health.status,
            dependencies=_probes(info.health),
            runtime=ForecasterRuntimeDTO.from_domain(info.runtime),
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Ensemble Forecaster",
                "description": "Ensemble forecaster for binary outcome sequences",
                "version": "1.0.0",
                "environment": "production",
                "git_commit": "abcdef1",
                "build_time": "2024-09-09T11:30:00Z",
                "started_at": "2024-09-09T12:00:00Z",
                "uptime_seconds": 3600.5,
                "status": "up",
                "dependencies": [_SOURCE_PROBE_EXAMPLE],
                "runtime": {
                    "history_source": "https://example.org/api/history",
                    "predictions_served": 42,
                    "active_experts": ["markov1", "markov2", "run_bias"],
                    "min_history": 8,
                    "backtest_window": 250,
                    "tuning_window": 200,
                },
            }
        }
    }
