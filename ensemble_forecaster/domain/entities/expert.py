"""Domain entities describing experts, their outputs and their weights."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

from ensemble_forecaster.domain.entities.errors import DegenerateWeightError


class ExpertName(str, Enum):
    """Identifiers of every scoring function the ensemble knows about."""

    MARKOV1 = "markov1"
    MARKOV2 = "markov2"
    RECENCY_BLEND = "recency_blend"
    RUN_BIAS = "run_bias"
    NGRAM_FOLLOW = "ngram_follow"
    TOTAL_HEURISTIC = "total_heuristic"
    DEEP_NGRAM = "deep_ngram"
    PAIRWISE = "pairwise"
    FUSION = "fusion"
    GRAPHICAL = "graphical"
    VOLATILITY = "volatility"
    TOTAL_TREND = "total_trend"
    LOGISTIC = "logistic"


REQUIRED_EXPERTS: Tuple[ExpertName, ...] = (
    ExpertName.MARKOV1,
    ExpertName.MARKOV2,
    ExpertName.RECENCY_BLEND,
    ExpertName.RUN_BIAS,
    ExpertName.NGRAM_FOLLOW,
    ExpertName.TOTAL_HEURISTIC,
)


@dataclass(frozen=True, slots=True)
class ExpertOutput:
    """Probability of label A proposed by one expert for the next event."""

    name: ExpertName
    probability_a: float
    rationale: str = ""


class WeightVector(Mapping):
    """
    Immutable per-expert weights.

    Every ``ExpertName`` is always present (missing ones are 0.0) so a
    weight vector can never silently drop an expert. Unknown keys raise
    ``ValueError``; negative or non-finite weights raise
    ``DegenerateWeightError``. A vector summing to zero is legal, the
    combiner falls back to uniform weights for it.
    """

    __slots__ = ("_weights",)

    def __init__(
        self, weights: Optional[Mapping[Union[ExpertName, str], float]] = None
    ) -> None:
        resolved: Dict[ExpertName, float] = {name: 0.0 for name in ExpertName}
        for key, value in (weights or {}).items():
            name = ExpertName(key)
            weight = float(value)
            if not math.isfinite(weight) or weight < 0.0:
                raise DegenerateWeightError(
                    f"Weight for {name.value} must be finite and non-negative",
                    details={"expert": name.value, "weight": value},
                )
            resolved[name] = weight
        self._weights = resolved

    def __getitem__(self, key: Union[ExpertName, str]) -> float:
        return self._weights[ExpertName(key)]

    def __iter__(self) -> Iterator[ExpertName]:
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __repr__(self) -> str:
        active = {k.value: v for k, v in self._weights.items() if v > 0.0}
        return f"WeightVector({active})"

    @property
    def total(self) -> float:
        return sum(self._weights.values())

    def normalized(self, names: Iterable[ExpertName]) -> Dict[ExpertName, float]:
        """Weights of ``names`` divided by their sum, uniform if that sum is <= 0."""
        subset = {name: self._weights[name] for name in names}
        if not subset:
            return {}
        total = sum(subset.values())
        if total <= 0.0:
            uniform = 1.0 / len(subset)
            return {name: uniform for name in subset}
        return {name: weight / total for name, weight in subset.items()}

    def as_dict(self, names: Optional[Iterable[ExpertName]] = None) -> Dict[str, float]:
        keys = list(names) if names is not None else list(self._weights)
        return {name.value: self._weights[name] for name in keys}
