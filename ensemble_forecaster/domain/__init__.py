"""
Forecasting core.

The services are synchronous and free of I/O; the outer layers reach
the feed and the stores through the interfaces in ``gateways``,
``repositories`` and ``ports``.
"""

from ensemble_forecaster.domain import (
    entities,
    gateways,
    ports,
    repositories,
    services,
)

__all__ = ["entities", "gateways", "repositories", "services", "ports"]
