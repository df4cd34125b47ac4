"""Infrastructure services package."""

from .health_check_service import HealthCheckService
from .weight_cache import TunedWeightCache

__all__ = ["HealthCheckService", "TunedWeightCache"]
