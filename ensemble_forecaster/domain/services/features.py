"""
Feature extractors over an event prefix.

Every function here is pure and takes the prefix ``H`` (oldest first,
newest last). None of them look beyond the prefix they are given, which
is what makes the walk-forward backtest free of lookahead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ensemble_forecaster.domain.entities.event import Event, Label
from ensemble_forecaster.domain.entities.forecast import Regime

# (upper bound inclusive, probability of A) for the last measured value.
TOTAL_VALUE_TABLE: Tuple[Tuple[float, float], ...] = (
    (5.0, 0.30),
    (8.0, 0.40),
    (12.0, 0.50),
    (15.0, 0.60),
)
TOTAL_VALUE_TOP = 0.70

REGIME_WINDOW = 20
REGIME_MIN_EVENTS = 6


def labels_of(events: Sequence[Event]) -> List[Label]:
    return [event.label for event in events]


def recent_frequency(events: Sequence[Event], n: int) -> float:
    """Share of label A among the last ``n`` events, 0.5 when empty."""
    window = events[-n:] if n > 0 else []
    if not window:
        return 0.5
    return sum(1 for event in window if event.label is Label.A) / len(window)


@dataclass(frozen=True, slots=True)
class RunInfo:
    ongoing_run_length: int
    last_label: Optional[Label]
    max_run_length: int


def run_info(events: Sequence[Event]) -> RunInfo:
    if not events:
        return RunInfo(ongoing_run_length=0, last_label=None, max_run_length=0)

    last_label = events[-1].label
    ongoing = 0
    for event in reversed(events):
        if event.label is not last_label:
            break
        ongoing += 1

    longest = current = 0
    previous: Optional[Label] = None
    for event in events:
        current = current + 1 if event.label is previous else 1
        previous = event.label
        longest = max(longest, current)

    return RunInfo(
        ongoing_run_length=ongoing, last_label=last_label, max_run_length=longest
    )


def _empty_row() -> Dict[Label, int]:
    return {Label.A: 0, Label.B: 0}


@dataclass(slots=True)
class MarkovCounts:
    """Order-1 and order-2 transition counts of a label sequence."""

    order1: Dict[Label, Dict[Label, int]] = field(default_factory=dict)
    order2: Dict[Tuple[Label, Label], Dict[Label, int]] = field(default_factory=dict)

    @staticmethod
    def _probability_a(row: Optional[Dict[Label, int]]) -> float:
        if not row:
            return 0.5
        seen = row[Label.A] + row[Label.B]
        if seen == 0:
            return 0.5
        return row[Label.A] / max(seen, 1)

    def p_next_a(self, last: Label) -> float:
        return self._probability_a(self.order1.get(last))

    def p_next_a_order2(self, context: Tuple[Label, Label]) -> float:
        return self._probability_a(self.order2.get(context))

    def order2_seen(self, context: Tuple[Label, Label]) -> int:
        row = self.order2.get(context)
        return 0 if row is None else row[Label.A] + row[Label.B]


def markov_counts(events: Sequence[Event]) -> MarkovCounts:
    labels = labels_of(events)
    counts = MarkovCounts()
    for current, following in zip(labels, labels[1:]):
        counts.order1.setdefault(current, _empty_row())[following] += 1
    for first, second, following in zip(labels, labels[1:], labels[2:]):
        counts.order2.setdefault((first, second), _empty_row())[following] += 1
    return counts


def ngram_follow_counts(events: Sequence[Event], w: int) -> Tuple[int, int]:
    """
    Count earlier occurrences of the trailing pattern and their A followers.

    The pattern is the last ``w`` labels (fewer if the prefix is shorter).
    Patterns shorter than 3 are not searched and yield ``(0, 0)``.
    """
    labels = labels_of(events)
    target = labels[-w:] if w > 0 else []
    size = len(target)
    if size < 3:
        return 0, 0

    matches = followed_by_a = 0
    for start in range(len(labels) - size):
        if labels[start : start + size] == target:
            matches += 1
            if labels[start + size] is Label.A:
                followed_by_a += 1
    return matches, followed_by_a


def ngram_follow_rate(events: Sequence[Event], w: int) -> float:
    """Fraction of earlier pattern matches followed by A, 0.5 without a match."""
    matches, followed_by_a = ngram_follow_counts(events, w)
    if matches == 0:
        return 0.5
    return followed_by_a / matches


def last_measured_value(events: Sequence[Event]) -> Optional[float]:
    for event in reversed(events):
        if event.measured_value is not None:
            return event.measured_value
    return None


def total_value_heuristic(value: Optional[float]) -> float:
    if value is None:
        return 0.5
    for upper_bound, probability in TOTAL_VALUE_TABLE:
        if value <= upper_bound:
            return probability
    return TOTAL_VALUE_TOP


def alternation_rate(labels: Sequence[Label]) -> float:
    if len(labels) < 2:
        return 0.0
    changes = sum(1 for left, right in zip(labels, labels[1:]) if left is not right)
    return changes / (len(labels) - 1)


def detect_regime(events: Sequence[Event]) -> Regime:
    """Classify the recent behaviour of the sequence; diagnostics only."""
    window = events[-REGIME_WINDOW:]
    if len(window) < REGIME_MIN_EVENTS:
        return Regime.UNKNOWN

    rate = alternation_rate(labels_of(window))
    runs = run_info(window)

    if rate >= 0.8:
        return Regime.ALTERNATING
    if runs.max_run_length >= 5 or rate <= 0.3:
        return Regime.STREAKY
    if rate >= 0.6:
        return Regime.CHOPPY
    return Regime.MIXED
