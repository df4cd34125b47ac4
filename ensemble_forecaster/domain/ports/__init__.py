"""Domain ports package."""

from .health_check import IHealthCheckService
from .weight_cache import ITunedWeightCache

__all__ = ["IHealthCheckService", "ITunedWeightCache"]
