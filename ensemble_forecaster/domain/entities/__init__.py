"""
Domain Entities Package

Value objects shared by the forecasting core and the outer layers.
"""

from .errors import (
    DegenerateWeightError,
    DomainError,
    HistorySourceError,
    HistorySourcePayloadError,
    InsufficientDataError,
    ParameterValidationError,
    PredictionHistoryEmptyError,
)
from .event import LABEL_THRESHOLD, Event, Label
from .expert import REQUIRED_EXPERTS, ExpertName, ExpertOutput, WeightVector
from .forecast import (
    BacktestResult,
    BacktestTrial,
    DriftReport,
    Forecast,
    ForecastDiagnostics,
    Regime,
    WeightSource,
)
from .health import (
    ApplicationInfo,
    DependencyStatus,
    ForecasterRuntime,
    ServiceStatus,
    SystemHealth,
)
from .parameters import DEFAULT_WEIGHTS, EnsembleParameters
from .prediction import PredictionRecord

__all__ = [
    "Event",
    "Label",
    "LABEL_THRESHOLD",
    "ExpertName",
    "ExpertOutput",
    "WeightVector",
    "REQUIRED_EXPERTS",
    "DEFAULT_WEIGHTS",
    "EnsembleParameters",
    "BacktestResult",
    "BacktestTrial",
    "DriftReport",
    "Forecast",
    "ForecastDiagnostics",
    "Regime",
    "WeightSource",
    "PredictionRecord",
    "SystemHealth",
    "DependencyStatus",
    "ServiceStatus",
    "ApplicationInfo",
    "ForecasterRuntime",
    "DomainError",
    "InsufficientDataError",
    "DegenerateWeightError",
    "HistorySourceError",
    "HistorySourcePayloadError",
    "PredictionHistoryEmptyError",
    "ParameterValidationError",
]
