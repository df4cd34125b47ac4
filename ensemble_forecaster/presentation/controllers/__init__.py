"""FastAPI routers, mounted by ``main.app.create_app``."""

from .predictions_controller import router as forecast_router
from .system_controller import router as system_router

__all__ = ["forecast_router", "system_router"]
