"""Probes the history source over HTTP for the health endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from time import perf_counter

import httpx
import structlog

from ensemble_forecaster.domain.entities.health import (
    DependencyStatus,
    ServiceStatus,
    SystemHealth,
)
from ensemble_forecaster.domain.ports.health_check import IHealthCheckService

logger = structlog.get_logger(__name__)

HISTORY_SOURCE = "history_source"


def status_for_http(status_code: int) -> ServiceStatus:
    """Server errors mean the feed is down, client errors that it is misaddressed."""
    if status_code >= 500:
        return ServiceStatus.DOWN
    if status_code >= 400:
        return ServiceStatus.DEGRADED
    return ServiceStatus.UP


class HealthCheckService(IHealthCheckService):
    def __init__(self, history_source_url: str, *, http_timeout: float = 5.0) -> None:
        self._history_source_url = history_source_url
        self._http_timeout = http_timeout

    async def evaluate(self) -> SystemHealth:
        probe = await self._probe_history_source()
        return SystemHealth.from_dependencies([probe])

    async def _probe_history_source(self) -> DependencyStatus:
        url = self._history_source_url
        if not url:
            return DependencyStatus(
                name=HISTORY_SOURCE,
                status=ServiceStatus.UNKNOWN,
                message="Service URL not configured.",
            )

        started = perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self._http_timeout) as client:
                response = await client.get(url)
        except httpx.RequestError as exc:
            logger.warning("health.history_source.unreachable", url=url, error=str(exc))
            return DependencyStatus(
                name=HISTORY_SOURCE,
                status=ServiceStatus.DOWN,
                message=f"HTTP request failed: {exc}",
                latency_ms=_elapsed_ms(started),
                details={"url": url},
            )

        return DependencyStatus(
            name=HISTORY_SOURCE,
            status=status_for_http(response.status_code),
            message=f"HTTP {response.status_code}",
            latency_ms=_elapsed_ms(started),
            details={
                "url": url,
                "status_code": response.status_code,
                "checked_at": datetime.now(timezone.utc).isoformat(),
            },
        )


def _elapsed_ms(started: float) -> float:
    return (perf_counter() - started) * 1000
