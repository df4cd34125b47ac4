"""Pydantic request and response models of the HTTP API."""

from .health_dto import (
    ApplicationInfoDTO,
    DependencyStatusDTO,
    ForecasterRuntimeDTO,
    SystemHealthDTO,
)
from .prediction_dto import (
    BacktestResponseDTO,
    BacktestTrialDTO,
    EventDTO,
    ForecastDiagnosticsDTO,
    HistoryResponseDTO,
    PredictionRecordDTO,
    PredictionResponseDTO,
    UpdateActualRequestDTO,
    UpdateActualResponseDTO,
)

__all__ = [
    "SystemHealthDTO",
    "DependencyStatusDTO",
    "ApplicationInfoDTO",
    "ForecasterRuntimeDTO",
    "EventDTO",
    "ForecastDiagnosticsDTO",
    "PredictionResponseDTO",
    "BacktestTrialDTO",
    "BacktestResponseDTO",
    "PredictionRecordDTO",
    "HistoryResponseDTO",
    "UpdateActualRequestDTO",
    "UpdateActualResponseDTO",
]
