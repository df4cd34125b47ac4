"""
Prediction service.

Orchestrates one forecasting pass over a complete event sequence: weight
tuning, expert scoring, drift detection, combination and the walk-forward
backtest that measures the realised accuracy of the chosen weights.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Optional, Sequence

from ensemble_forecaster.domain.entities.event import Event, Label
from ensemble_forecaster.domain.entities.expert import WeightVector
from ensemble_forecaster.domain.entities.forecast import (
    BacktestResult,
    DriftReport,
    Forecast,
    ForecastDiagnostics,
    WeightSource,
)
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.domain.services import features
from ensemble_forecaster.domain.services.backtester import (
    replay_window,
    score_replay,
    window_start,
)
from ensemble_forecaster.domain.services.combiner import combine
from ensemble_forecaster.domain.services.drift import detect_drift
from ensemble_forecaster.domain.services.experts import score_experts
from ensemble_forecaster.domain.services.tuner import TuningResult, tune
from ensemble_forecaster.shared.consts import EnumRiskLevel

TIE_BREAK_WINDOW = 10
CONFIDENCE_FLOOR = 0.05
CONFIDENCE_CEILING = 0.99
LOW_RISK_ENTROPY = 0.6
HIGH_RISK_ENTROPY = 0.95


def majority_label(events: Sequence[Event], n: int = TIE_BREAK_WINDOW) -> Label:
    """Most frequent label of the last ``n`` events; A wins a tied count."""
    counts = Counter(features.labels_of(events[-n:]))
    return Label.A if counts[Label.A] >= counts[Label.B] else Label.B


def resolve_label(probability_a: float, events: Sequence[Event]) -> Label:
    if probability_a == 0.5:
        return majority_label(events)
    return Label.A if probability_a > 0.5 else Label.B


def confidence_of(probability_a: float) -> float:
    """Distance from a coin flip as a percentage with two decimals."""
    spread = abs(probability_a - 0.5) * 2
    spread = min(CONFIDENCE_CEILING, max(CONFIDENCE_FLOOR, spread))
    return round(spread * 100, 2)


def binary_entropy(probability_a: float) -> float:
    entropy = 0.0
    for p in (probability_a, 1.0 - probability_a):
        if p > 0:
            entropy -= p * math.log2(p)
    return entropy


def risk_of(probability_a: float) -> EnumRiskLevel:
    entropy = binary_entropy(probability_a)
    if entropy < LOW_RISK_ENTROPY:
        return EnumRiskLevel.LOW
    if entropy > HIGH_RISK_ENTROPY:
        return EnumRiskLevel.HIGH
    return EnumRiskLevel.MEDIUM


class PredictionService:
    """Pure forecasting facade over the domain services."""

    def __init__(self, params: Optional[EnsembleParameters] = None):
        self.params = params or EnsembleParameters()

    def tune(self, events: Sequence[Event]) -> TuningResult:
        return tune(list(events), self.params)

    def backtest(
        self,
        events: Sequence[Event],
        window_size: Optional[int] = None,
        weights: Optional[WeightVector] = None,
    ) -> BacktestResult:
        """
        Walk-forward report over the trailing ``window_size`` events.

        Without explicit ``weights`` the sequence is tuned first, so the
        report measures the weights a forecast would use.
        """
        events = list(events)
        window = self.params.backtest_window if window_size is None else window_size
        if weights is None:
            weights = self.tune(events).weights
        steps = replay_window(events, window, self.params)
        return score_replay(steps, weights, self.params)

    def predict(
        self, events: Sequence[Event], weights: Optional[WeightVector] = None
    ) -> Forecast:
        """
        Forecast the label following ``events``.

        ``weights`` skips tuning (e.g. weights reused from a cache). Short
        sequences fall back to the share of A over the whole sequence.
        """
        events = list(events)
        params = self.params

        if len(events) < params.min_history:
            return self._fallback(events)

        replay_size = params.backtest_window
        if weights is None:
            replay_size = max(replay_size, params.tuning_window)
        replay = replay_window(events, replay_size, params)

        if weights is None:
            tuning = tune(events, params, steps=replay)
            weights = tuning.weights
            source = WeightSource.TUNED if tuning.tuned else WeightSource.DEFAULT
        else:
            source = WeightSource.CACHED

        outputs = score_experts(events, params.active_experts)
        drift = detect_drift(
            events,
            alpha=params.drift_alpha,
            delta=params.drift_delta,
            threshold=params.drift_lambda,
        )
        probability = combine(
            outputs,
            weights,
            drift,
            drift_penalty=params.drift_penalty,
            floor=params.probability_floor,
            ceiling=params.probability_ceiling,
        )

        first = window_start(len(events), params.backtest_window, params.min_history)
        backtest = score_replay(
            [step for step in replay if step.position >= first], weights, params
        )

        return Forecast(
            probability_a=probability,
            label=resolve_label(probability, events),
            accuracy=backtest.accuracy,
            confidence=confidence_of(probability),
            risk=risk_of(probability),
            regime=features.detect_regime(events),
            weights=weights,
            expert_breakdown={
                name: output.probability_a for name, output in outputs.items()
            },
            rationales={name: output.rationale for name, output in outputs.items()},
            backtest=backtest,
            diagnostics=ForecastDiagnostics(
                abstain=abs(probability - 0.5) < params.abstain_threshold,
                weight_source=source,
                drift=drift,
                sequence_length=len(events),
            ),
        )

    def _fallback(self, events: Sequence[Event]) -> Forecast:
        probability = features.recent_frequency(events, len(events))
        return Forecast(
            probability_a=probability,
            label=resolve_label(probability, events),
            accuracy=None,
            confidence=confidence_of(probability),
            risk=risk_of(probability),
            regime=features.detect_regime(events),
            weights=self.params.default_weight_vector(),
            diagnostics=ForecastDiagnostics(
                insufficient_data=True,
                abstain=abs(probability - 0.5) < self.params.abstain_threshold,
                weight_source=WeightSource.DEFAULT,
                drift=DriftReport(),
                sequence_length=len(events),
            ),
        )
