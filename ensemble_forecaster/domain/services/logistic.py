"""
Logistic-regression expert expressed as a deterministic fold.

Training is a pure function of the prefix: parameters start at zero,
gradient descent runs a fixed number of epochs with a fixed learning-rate
schedule, and the result is returned as an explicit ``LogisticParameters``
value that the scoring call receives. Nothing is kept between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ensemble_forecaster.domain.entities.event import LABEL_THRESHOLD, Event, Label

FEATURE_WINDOW = 10
MIN_SAMPLES_START = 5
VALUE_SCALE = 5.0


@dataclass(frozen=True)
class LogisticParameters:
    weights: np.ndarray
    bias: float
    samples: int


def _sigmoid(z: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-z))


def _values(events: Sequence[Event]) -> np.ndarray:
    return np.array(
        [
            LABEL_THRESHOLD if event.measured_value is None else event.measured_value
            for event in events
        ],
        dtype=float,
    )


def extract_features(events: Sequence[Event], position: int) -> np.ndarray:
    """Features of ``events[:position]`` used to predict ``events[position]``."""
    window = events[max(0, position - FEATURE_WINDOW) : position]
    totals = _values(window) if window else np.array([LABEL_THRESHOLD])

    ratio_a = (
        sum(1 for event in window if event.label is Label.A) / len(window)
        if window
        else 0.5
    )

    streak = 0
    if window:
        last = window[-1].label
        for event in reversed(window):
            if event.label is not last:
                break
            streak += 1

    recent = _values(events[max(0, position - 3) : position])[::-1]
    lags = [
        (recent[i] - LABEL_THRESHOLD) / VALUE_SCALE if i < len(recent) else 0.0
        for i in range(3)
    ]

    return np.array(
        [
            (float(totals.mean()) - LABEL_THRESHOLD) / VALUE_SCALE,
            float(totals.std()),
            ratio_a,
            streak / FEATURE_WINDOW,
            *lags,
        ],
        dtype=float,
    )


def fit_logistic(
    events: Sequence[Event],
    epochs: int = 80,
    learning_rate: float = 0.06,
    decay: float = 0.98,
) -> Optional[LogisticParameters]:
    """Fit on every position of ``events``; None when there is nothing to fit."""
    if len(events) <= MIN_SAMPLES_START:
        return None

    x = np.vstack(
        [extract_features(events, i) for i in range(MIN_SAMPLES_START, len(events))]
    )
    y = np.array(
        [1.0 if event.label is Label.A else 0.0 for event in events[MIN_SAMPLES_START:]]
    )

    weights = np.zeros(x.shape[1])
    bias = 0.0
    rate = learning_rate
    samples = x.shape[0]
    for epoch in range(epochs):
        error = _sigmoid(x @ weights + bias) - y
        weights = weights - rate * (x.T @ error) / samples
        bias -= rate * float(error.sum()) / samples
        if epoch % 20 == 0:
            rate *= decay

    return LogisticParameters(weights=weights, bias=bias, samples=samples)


def score_logistic(
    events: Sequence[Event], parameters: Optional[LogisticParameters]
) -> float:
    """Probability that the event after ``events`` is A."""
    if parameters is None:
        return 0.5
    features = extract_features(events, len(events))
    return float(_sigmoid(np.array(features @ parameters.weights + parameters.bias)))
