"""Page-Hinkley changepoint detection over the binary label series."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ensemble_forecaster.domain.entities.event import Event, Label
from ensemble_forecaster.domain.entities.forecast import DriftReport


class PageHinkleyDetector:
    """
    One-sided Page-Hinkley test for an upward shift of the mean.

    The running mean is exponentially weighted with decay ``alpha`` and
    bias-corrected, so early observations are not measured against a zero
    start. The mean is always updated before the cumulative statistic.
    After an alarm the statistic and its minimum restart at zero while the
    mean keeps its memory.
    """

    def __init__(
        self, alpha: float = 0.995, delta: float = 0.01, threshold: float = 6.0
    ):
        self.alpha = alpha
        self.delta = delta
        self.threshold = threshold
        self.reset()

    def reset(self) -> None:
        self._weighted_sum = 0.0
        self._steps = 0
        self.mean = 0.0
        self.statistic = 0.0
        self.minimum = 0.0
        self.alarm_indices: List[int] = []

    def update(self, x: float) -> bool:
        self._steps += 1
        self._weighted_sum = self.alpha * self._weighted_sum + (1.0 - self.alpha) * x
        self.mean = self._weighted_sum / (1.0 - self.alpha**self._steps)

        self.statistic += x - self.mean - self.delta
        self.minimum = min(self.minimum, self.statistic)

        if self.statistic - self.minimum > self.threshold:
            self.alarm_indices.append(self._steps - 1)
            self.statistic = 0.0
            self.minimum = 0.0
            return True
        return False

    def run(self, series: Iterable[float]) -> DriftReport:
        self.reset()
        for x in series:
            self.update(x)
        return DriftReport(
            alarm_count=len(self.alarm_indices),
            alarm_indices=tuple(self.alarm_indices),
        )


def label_series(events: Sequence[Event]) -> List[float]:
    return [1.0 if event.label is Label.A else 0.0 for event in events]


def detect_drift(
    events: Sequence[Event],
    alpha: float = 0.995,
    delta: float = 0.01,
    threshold: float = 6.0,
) -> DriftReport:
    """Run a fresh detector over the labels of ``events``."""
    return PageHinkleyDetector(alpha, delta, threshold).run(label_series(events))
