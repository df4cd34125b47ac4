"""
Expert scoring functions.

Each expert maps an event prefix to the probability that the next label
is A, together with a short rationale. ``EXPERT_REGISTRY`` is the single
table from ``ExpertName`` to its function; it covers every name so weight
vectors and expert outputs stay exhaustive.
"""

from __future__ import annotations

from functools import cached_property
from typing import Callable, Dict, Iterable, Optional, Sequence

import numpy as np

from ensemble_forecaster.domain.entities.event import Event, Label
from ensemble_forecaster.domain.entities.expert import ExpertName, ExpertOutput
from ensemble_forecaster.domain.services import features
from ensemble_forecaster.domain.services.logistic import fit_logistic, score_logistic

RUN_BIAS_MIN_LENGTH = 3
RUN_BIAS_AGAINST_A = 0.22
RUN_BIAS_AGAINST_B = 0.78
NGRAM_WINDOW = 6
DEEP_NGRAM_WINDOWS = range(3, 9)
PAIRWISE_LAGS = (1, 2, 3)
FUSION_HORIZONS = (3, 5, 10, 20)
VALUE_WINDOW = 10
TREND_WINDOW = 6


class Prefix:
    """An event prefix with its shared statistics computed at most once."""

    def __init__(self, events: Sequence[Event]):
        self.events = events

    def __len__(self) -> int:
        return len(self.events)

    @property
    def last_label(self) -> Optional[Label]:
        return self.events[-1].label if self.events else None

    @cached_property
    def markov(self) -> features.MarkovCounts:
        return features.markov_counts(self.events)

    @cached_property
    def runs(self) -> features.RunInfo:
        return features.run_info(self.events)

    @cached_property
    def measured_values(self) -> np.ndarray:
        return np.array(
            [e.measured_value for e in self.events if e.measured_value is not None],
            dtype=float,
        )

    def order1(self) -> float:
        last = self.last_label
        return 0.5 if last is None else self.markov.p_next_a(last)

    def order2(self) -> Optional[float]:
        """Order-2 probability, or None when the context was never observed."""
        if len(self.events) < 2:
            return None
        context = (self.events[-2].label, self.events[-1].label)
        if self.markov.order2_seen(context) == 0:
            return None
        return self.markov.p_next_a_order2(context)


def _output(name: ExpertName, probability: float, rationale: str) -> ExpertOutput:
    return ExpertOutput(
        name=name, probability_a=min(1.0, max(0.0, probability)), rationale=rationale
    )


def markov1(prefix: Prefix) -> ExpertOutput:
    p = prefix.order1()
    last = prefix.last_label.value if prefix.last_label else "-"
    return _output(ExpertName.MARKOV1, p, f"P(A|{last})={p:.3f}")


def markov2(prefix: Prefix) -> ExpertOutput:
    p1 = prefix.order1()
    p2 = prefix.order2()
    if p2 is None:
        return _output(ExpertName.MARKOV2, p1, f"order-2 unseen, order-1={p1:.3f}")
    p = 0.6 * p1 + 0.4 * p2
    return _output(ExpertName.MARKOV2, p, f"order-1={p1:.3f} order-2={p2:.3f}")


def recency_blend(prefix: Prefix) -> ExpertOutput:
    last5 = features.recent_frequency(prefix.events, 5)
    last10 = features.recent_frequency(prefix.events, 10)
    p = 0.6 * last5 + 0.4 * last10
    return _output(
        ExpertName.RECENCY_BLEND, p, f"A share last5={last5:.2f} last10={last10:.2f}"
    )


def run_bias(prefix: Prefix) -> ExpertOutput:
    runs = prefix.runs
    if runs.ongoing_run_length < RUN_BIAS_MIN_LENGTH or runs.last_label is None:
        return _output(
            ExpertName.RUN_BIAS, 0.5, f"run length {runs.ongoing_run_length}"
        )
    p = RUN_BIAS_AGAINST_A if runs.last_label is Label.A else RUN_BIAS_AGAINST_B
    return _output(
        ExpertName.RUN_BIAS,
        p,
        f"break {runs.last_label.value} run of {runs.ongoing_run_length}",
    )


def ngram_follow(prefix: Prefix) -> ExpertOutput:
    p = features.ngram_follow_rate(prefix.events, NGRAM_WINDOW)
    return _output(ExpertName.NGRAM_FOLLOW, p, f"{NGRAM_WINDOW}-gram follow={p:.3f}")


def total_heuristic(prefix: Prefix) -> ExpertOutput:
    value = features.last_measured_value(prefix.events)
    p = features.total_value_heuristic(value)
    return _output(ExpertName.TOTAL_HEURISTIC, p, f"last total={value}")


def deep_ngram(prefix: Prefix) -> ExpertOutput:
    rates = []
    for window in DEEP_NGRAM_WINDOWS:
        matches, followed_by_a = features.ngram_follow_counts(prefix.events, window)
        if matches:
            rates.append(followed_by_a / matches)
    if not rates:
        return _output(ExpertName.DEEP_NGRAM, 0.5, "no pattern matched")
    p = sum(rates) / len(rates)
    return _output(ExpertName.DEEP_NGRAM, p, f"{len(rates)} windows matched")


def pairwise(prefix: Prefix) -> ExpertOutput:
    """Co-occurrence of labels ``lag`` steps apart, averaged over lags."""
    labels = features.labels_of(prefix.events)
    rates = []
    for lag in PAIRWISE_LAGS:
        if len(labels) <= lag:
            continue
        anchor = labels[-lag]
        pairs = [
            following
            for current, following in zip(labels, labels[lag:])
            if current is anchor
        ]
        if pairs:
            rates.append(sum(1 for label in pairs if label is Label.A) / len(pairs))
    if not rates:
        return _output(ExpertName.PAIRWISE, 0.5, "no co-occurrence")
    p = sum(rates) / len(rates)
    return _output(ExpertName.PAIRWISE, p, f"lags={len(rates)} rate={p:.3f}")


def fusion(prefix: Prefix) -> ExpertOutput:
    shares = [features.recent_frequency(prefix.events, h) for h in FUSION_HORIZONS]
    p = sum(shares) / len(shares)
    return _output(ExpertName.FUSION, p, f"horizon mean={p:.3f}")


def graphical(prefix: Prefix) -> ExpertOutput:
    p1 = prefix.order1()
    p2 = prefix.order2()
    p = p1 if p2 is None else 0.5 * p1 + 0.5 * p2
    return _output(ExpertName.GRAPHICAL, p, f"markov blend={p:.3f}")


def volatility(prefix: Prefix) -> ExpertOutput:
    values = prefix.measured_values[-VALUE_WINDOW:]
    if values.size == 0:
        return _output(ExpertName.VOLATILITY, 0.5, "no totals")
    spread = float(np.var(values))
    p = 1.0 / (1.0 + np.exp(-(spread - 5.0) / 3.0)) * 0.9 + 0.05
    return _output(ExpertName.VOLATILITY, float(p), f"variance={spread:.2f}")


def total_trend(prefix: Prefix) -> ExpertOutput:
    values = prefix.measured_values[-TREND_WINDOW:]
    if values.size < 2:
        return _output(ExpertName.TOTAL_TREND, 0.5, "not enough totals")
    trend = float(np.diff(values).mean())
    return _output(ExpertName.TOTAL_TREND, 0.5 + trend / 6.0, f"trend={trend:.2f}")


def logistic(prefix: Prefix) -> ExpertOutput:
    parameters = fit_logistic(prefix.events)
    if parameters is None:
        return _output(ExpertName.LOGISTIC, 0.5, "not enough samples")
    p = score_logistic(prefix.events, parameters)
    return _output(ExpertName.LOGISTIC, p, f"fitted on {parameters.samples} samples")


EXPERT_REGISTRY: Dict[ExpertName, Callable[[Prefix], ExpertOutput]] = {
    ExpertName.MARKOV1: markov1,
    ExpertName.MARKOV2: markov2,
    ExpertName.RECENCY_BLEND: recency_blend,
    ExpertName.RUN_BIAS: run_bias,
    ExpertName.NGRAM_FOLLOW: ngram_follow,
    ExpertName.TOTAL_HEURISTIC: total_heuristic,
    ExpertName.DEEP_NGRAM: deep_ngram,
    ExpertName.PAIRWISE: pairwise,
    ExpertName.FUSION: fusion,
    ExpertName.GRAPHICAL: graphical,
    ExpertName.VOLATILITY: volatility,
    ExpertName.TOTAL_TREND: total_trend,
    ExpertName.LOGISTIC: logistic,
}


def score_experts(
    events: Sequence[Event], names: Iterable[ExpertName]
) -> Dict[ExpertName, ExpertOutput]:
    """Run the named experts on ``events`` in the order given."""
    prefix = Prefix(events)
    return {name: EXPERT_REGISTRY[name](prefix) for name in names}
