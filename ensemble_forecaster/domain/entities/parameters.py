"""Hyperparameters of the forecasting core, passed explicitly to every call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from ensemble_forecaster.domain.entities.expert import (
    REQUIRED_EXPERTS,
    ExpertName,
    WeightVector,
)

# Untuned weights favour the contrarian run expert so a streak on sparse
# history is forecast to break.
DEFAULT_WEIGHTS: Dict[ExpertName, float] = {
    ExpertName.MARKOV1: 0.10,
    ExpertName.MARKOV2: 0.05,
    ExpertName.RECENCY_BLEND: 0.05,
    ExpertName.RUN_BIAS: 0.65,
    ExpertName.NGRAM_FOLLOW: 0.05,
    ExpertName.TOTAL_HEURISTIC: 0.10,
    ExpertName.DEEP_NGRAM: 0.10,
    ExpertName.PAIRWISE: 0.10,
    ExpertName.FUSION: 0.10,
    ExpertName.GRAPHICAL: 0.10,
    ExpertName.VOLATILITY: 0.05,
    ExpertName.TOTAL_TREND: 0.05,
    ExpertName.LOGISTIC: 0.10,
}


@dataclass(frozen=True)
class EnsembleParameters:
    """
    Every constant of the ensemble in one immutable value.

    The defaults reproduce the reference behaviour; the container builds
    an instance from ``EnsembleSettings`` so deployments can override them.
    """

    active_experts: Tuple[ExpertName, ...] = REQUIRED_EXPERTS
    default_weights: Dict[ExpertName, float] = field(
        default_factory=lambda: dict(DEFAULT_WEIGHTS)
    )

    # Backtesting
    min_history: int = 8
    backtest_window: int = 250
    sample_size: int = 20

    # Tuning
    tuning_min_events: int = 30
    tuning_window: int = 200
    grid_values: Tuple[float, ...] = (0.0, 0.5, 1.0)
    grid_min_sum: float = 1.0
    grid_max_sum: float = 3.0
    max_candidates: int = 300
    sum_penalty: float = 1e-4

    # Combiner
    drift_penalty: float = 0.15
    probability_floor: float = 0.001
    probability_ceiling: float = 0.999
    abstain_threshold: float = 0.04

    # Page-Hinkley
    drift_alpha: float = 0.995
    drift_delta: float = 0.01
    drift_lambda: float = 6.0

    def default_weight_vector(self) -> WeightVector:
        return WeightVector(
            {name: self.default_weights.get(name, 0.0) for name in self.active_experts}
        )
