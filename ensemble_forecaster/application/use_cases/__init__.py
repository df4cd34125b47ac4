"""One class per endpoint action; each exposes an async ``execute``."""

from .forecast_use_cases import GeneratePredictionUseCase, RunBacktestUseCase
from .health_use_cases import GetApplicationInfoUseCase, GetHealthStatusUseCase
from .prediction_history_use_cases import (
    GetPredictionHistoryUseCase,
    RecordActualOutcomeUseCase,
)

__all__ = [
    "GeneratePredictionUseCase",
    "RunBacktestUseCase",
    "GetPredictionHistoryUseCase",
    "RecordActualOutcomeUseCase",
    "GetHealthStatusUseCase",
    "GetApplicationInfoUseCase",
]
