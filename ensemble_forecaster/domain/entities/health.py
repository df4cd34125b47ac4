"""Reachability of the history source and runtime facts shown by ``/info``."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class ServiceStatus(str, Enum):
    UP = "up"
    DEGRADED = "degraded"
    DOWN = "down"
    UNKNOWN = "unknown"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


# DOWN outranks DEGRADED, which outranks UNKNOWN.
_SEVERITY = {
    ServiceStatus.UP: 0,
    ServiceStatus.UNKNOWN: 1,
    ServiceStatus.DEGRADED: 2,
    ServiceStatus.DOWN: 3,
}


@dataclass(slots=True)
class DependencyStatus:
    """Outcome of one probe against an external collaborator."""

    name: str
    status: ServiceStatus
    message: Optional[str] = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    latency_ms: Optional[float] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class SystemHealth:
    status: ServiceStatus
    dependencies: List[DependencyStatus] = field(default_factory=list)

    @classmethod
    def from_dependencies(
        cls, dependencies: Iterable[DependencyStatus]
    ) -> SystemHealth:
        """Overall status is the most severe dependency status (UP when empty)."""
        probes = list(dependencies)
        worst = max(
            (probe.status for probe in probes),
            key=lambda status: status.severity,
            default=ServiceStatus.UP,
        )
        return cls(status=worst, dependencies=probes)

    @property
    def serving(self) -> bool:
        return self.status is not ServiceStatus.DOWN


@dataclass(frozen=True, slots=True)
class ForecasterRuntime:
    """What the running forecaster is configured with and has done so far."""

    history_source: str
    predictions_served: int
    active_experts: List[str]
    min_history: int
    backtest_window: int
    tuning_window: int


@dataclass(slots=True)
class ApplicationInfo:
    name: str
    description: str
    version: str
    environment: str
    git_commit: str
    build_time: str
    started_at: datetime
    uptime_seconds: float
    health: SystemHealth
    runtime: ForecasterRuntime
