"""Composition root: settings, the dependency container and the FastAPI app."""

from .config import AppSettings, get_settings
from .container import (
    AppContainer,
    build_ensemble_parameters,
    get_container,
    init_container,
)

__all__ = [
    "AppContainer",
    "AppSettings",
    "build_ensemble_parameters",
    "get_container",
    "get_settings",
    "init_container",
]
