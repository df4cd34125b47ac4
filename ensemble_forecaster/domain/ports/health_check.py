"""Port through which the system use cases learn whether the feed is reachable."""

from __future__ import annotations

from typing import Protocol

from ensemble_forecaster.domain.entities.health import SystemHealth


class IHealthCheckService(Protocol):
    async def evaluate(self) -> SystemHealth:
        """Probe every external dependency and fold the results together."""
        ...
