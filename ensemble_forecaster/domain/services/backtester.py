"""
Walk-forward backtesting.

For each position ``i`` of the trailing window the ensemble is scored on
``events[:i + 1]`` and compared with ``events[i + 1]``. Expert outputs and
the drift report of a prefix do not depend on the weight vector, so the
replay is split in two: ``replay_window`` computes them once and
``score_replay`` re-combines them for any number of weight vectors. The
result is the same as recomputing everything per weight vector.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ensemble_forecaster.domain.entities.event import Event, Label
from ensemble_forecaster.domain.entities.expert import (
    ExpertName,
    ExpertOutput,
    WeightVector,
)
from ensemble_forecaster.domain.entities.forecast import (
    BacktestResult,
    BacktestTrial,
    DriftReport,
)
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.domain.services.combiner import combine
from ensemble_forecaster.domain.services.drift import detect_drift
from ensemble_forecaster.domain.services.experts import score_experts


@dataclass(frozen=True, slots=True)
class ReplayStep:
    position: int
    next_event_index: int
    outputs: Dict[ExpertName, ExpertOutput]
    drift: DriftReport
    actual: Label


def label_for(probability_a: float) -> Label:
    """
    Walk-forward decision rule: A when ``probability_a >= 0.5``.

    Served forecasts settle an exact 0.5 on the recent majority instead
    (``prediction_service.resolve_label``); trials keep the plain threshold
    so the score of a weight vector does not depend on that tie-break.
    """
    return Label.A if probability_a >= 0.5 else Label.B


def window_start(length: int, window_size: int, min_history: int) -> int:
    """First position of the walk-forward loop."""
    return max(0, length - window_size) + min_history


def replay_window(
    events: Sequence[Event],
    window_size: int,
    params: EnsembleParameters,
) -> List[ReplayStep]:
    n = len(events)
    start = window_start(n, window_size, params.min_history)
    if start > n - 2:
        return []

    # Page-Hinkley is causal: the report of events[:i + 1] is the full
    # pass truncated to the alarms raised at positions <= i.
    full_drift = detect_drift(
        events[: n - 1],
        alpha=params.drift_alpha,
        delta=params.drift_delta,
        threshold=params.drift_lambda,
    )

    steps: List[ReplayStep] = []
    for i in range(start, n - 1):
        prefix = events[: i + 1]
        raised = bisect_right(full_drift.alarm_indices, i)
        steps.append(
            ReplayStep(
                position=i,
                next_event_index=events[i + 1].index,
                outputs=score_experts(prefix, params.active_experts),
                drift=DriftReport(
                    alarm_count=raised, alarm_indices=full_drift.alarm_indices[:raised]
                ),
                actual=events[i + 1].label,
            )
        )
    return steps


def score_replay(
    steps: Sequence[ReplayStep],
    weights: WeightVector,
    params: EnsembleParameters,
    detailed: bool = True,
) -> BacktestResult:
    """Re-combine replayed expert outputs with ``weights`` and count hits."""
    result = BacktestResult()
    expert_hits: Dict[ExpertName, int] = {}

    for step in steps:
        probability = combine(
            step.outputs,
            weights,
            step.drift,
            drift_penalty=params.drift_penalty,
            floor=params.probability_floor,
            ceiling=params.probability_ceiling,
        )
        predicted = label_for(probability)
        result.trials += 1
        if predicted is step.actual:
            result.correct += 1

        if detailed:
            result.sample.append(
                BacktestTrial(
                    position=step.position,
                    event_index=step.next_event_index,
                    probability_a=probability,
                    predicted=predicted,
                    actual=step.actual,
                )
            )
            for name, output in step.outputs.items():
                hit = label_for(output.probability_a) is step.actual
                expert_hits[name] = expert_hits.get(name, 0) + int(hit)

    if detailed:
        result.sample = result.sample[-params.sample_size :]
        result.expert_accuracy = _expert_accuracy(
            expert_hits, result.trials, params.active_experts
        )
    return result


def _expert_accuracy(
    hits: Dict[ExpertName, int], trials: int, names: Sequence[ExpertName]
) -> Dict[ExpertName, Optional[float]]:
    if trials == 0:
        return {name: None for name in names}
    return {name: hits.get(name, 0) / trials for name in names}


def backtest(
    events: Sequence[Event],
    weights: WeightVector,
    window_size: int,
    params: Optional[EnsembleParameters] = None,
) -> BacktestResult:
    """
    Walk-forward accuracy of ``weights`` over the last ``window_size`` events.

    Each trial predicts A when the combined probability is at least 0.5.
    """
    params = params or EnsembleParameters()
    return score_replay(replay_window(events, window_size, params), weights, params)
