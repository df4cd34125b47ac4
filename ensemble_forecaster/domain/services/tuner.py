"""
Deterministic grid search over ensemble weights.

Candidates are the cartesian product of ``grid_values`` over the active
experts, in ``itertools.product`` order, filtered by the raw-sum range and
capped at ``max_candidates``. Every candidate is scored by the backtester
on the same replay; the strictly best score wins, so ties keep the first
enumerated candidate.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from ensemble_forecaster.domain.entities.event import Event
from ensemble_forecaster.domain.entities.expert import WeightVector
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.domain.services.backtester import (
    ReplayStep,
    replay_window,
    score_replay,
    window_start,
)


@dataclass(frozen=True, slots=True)
class TuningResult:
    weights: WeightVector
    score: Optional[float]
    accuracy: Optional[float]
    candidates_evaluated: int
    tuned: bool


def iter_candidates(params: EnsembleParameters) -> Iterator[WeightVector]:
    """Lazily yield the bounded candidate set in a fixed order."""
    names = params.active_experts
    grid = itertools.product(params.grid_values, repeat=len(names))
    plausible = (
        combo
        for combo in grid
        if params.grid_min_sum <= sum(combo) <= params.grid_max_sum
    )
    for combo in itertools.islice(plausible, params.max_candidates):
        yield WeightVector(dict(zip(names, combo)))


def score_candidate(
    steps: Sequence[ReplayStep], weights: WeightVector, params: EnsembleParameters
) -> float:
    accuracy = score_replay(steps, weights, params, detailed=False).accuracy
    return (accuracy or 0.0) - params.sum_penalty * abs(weights.total - 1.0)


def _untuned(params: EnsembleParameters) -> TuningResult:
    return TuningResult(
        weights=params.default_weight_vector(),
        score=None,
        accuracy=None,
        candidates_evaluated=0,
        tuned=False,
    )


def tune(
    events: Sequence[Event],
    params: Optional[EnsembleParameters] = None,
    steps: Optional[Sequence[ReplayStep]] = None,
) -> TuningResult:
    """
    Pick the best weight vector for ``events``.

    ``steps`` may carry a replay computed for a window at least as large
    as ``tuning_window``; the steps outside the tuning window are ignored.
    """
    params = params or EnsembleParameters()
    if len(events) < params.tuning_min_events:
        return _untuned(params)

    first = window_start(len(events), params.tuning_window, params.min_history)
    if steps is None:
        steps = replay_window(events, params.tuning_window, params)
    window: List[ReplayStep] = [step for step in steps if step.position >= first]

    best: Optional[WeightVector] = None
    best_score = float("-inf")
    evaluated = 0
    for candidate in iter_candidates(params):
        evaluated += 1
        score = score_candidate(window, candidate, params)
        if score > best_score:
            best, best_score = candidate, score

    if best is None:
        return _untuned(params)

    accuracy = score_replay(window, best, params, detailed=False).accuracy
    return TuningResult(
        weights=best,
        score=best_score,
        accuracy=accuracy,
        candidates_evaluated=evaluated,
        tuned=True,
    )


def tune_weights(
    events: Sequence[Event], params: Optional[EnsembleParameters] = None
) -> WeightVector:
    """Best weight vector for ``events`` (the default one on sparse data)."""
    return tune(events, params).weights
