"""Weighted blend of expert outputs into a single probability."""

from __future__ import annotations

from typing import Mapping, Optional

from ensemble_forecaster.domain.entities.expert import (
    ExpertName,
    ExpertOutput,
    WeightVector,
)
from ensemble_forecaster.domain.entities.forecast import DriftReport

DRIFT_PENALTY = 0.15
PROBABILITY_FLOOR = 0.001
PROBABILITY_CEILING = 0.999


def combine(
    outputs: Mapping[ExpertName, ExpertOutput],
    weights: WeightVector,
    drift: Optional[DriftReport] = None,
    *,
    drift_penalty: float = DRIFT_PENALTY,
    floor: float = PROBABILITY_FLOOR,
    ceiling: float = PROBABILITY_CEILING,
) -> float:
    """
    Blend expert probabilities of label A.

    Weights are normalised over the experts present in ``outputs``
    (uniform when they sum to zero). A drifting sequence pulls the blend
    toward 0.5 by ``drift_penalty``. The result is clamped to
    ``[floor, ceiling]``.
    """
    if not outputs:
        return 0.5

    normalized = weights.normalized(outputs.keys())
    raw = sum(
        outputs[name].probability_a * weight for name, weight in normalized.items()
    )

    if drift is not None and drift.alarm_count > 0:
        raw = raw * (1.0 - drift_penalty) + 0.5 * drift_penalty

    return min(ceiling, max(floor, raw))
