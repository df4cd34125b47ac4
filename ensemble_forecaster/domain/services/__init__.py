"""
Domain Services Package

Pure functions and services implementing the forecasting core: feature
extraction, drift detection, experts, combination, backtesting, tuning and
the prediction service orchestrating them.
"""

from .backtester import ReplayStep, backtest, replay_window, score_replay
from .combiner import combine
from .drift import PageHinkleyDetector, detect_drift
from .experts import EXPERT_REGISTRY, score_experts
from .parameters_validator import validate_parameters
from .prediction_service import PredictionService
from .tuner import TuningResult, iter_candidates, tune, tune_weights

__all__ = [
    "EXPERT_REGISTRY",
    "PageHinkleyDetector",
    "PredictionService",
    "ReplayStep",
    "TuningResult",
    "backtest",
    "combine",
    "detect_drift",
    "iter_candidates",
    "replay_window",
    "score_experts",
    "score_replay",
    "tune",
    "tune_weights",
    "validate_parameters",
]
