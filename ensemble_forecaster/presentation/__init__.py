"""HTTP surface of the forecaster: the forecast and system routers."""

from ensemble_forecaster.presentation.controllers import forecast_router, system_router

__all__ = ["forecast_router", "system_router"]
