"""Domain entities produced by one forecasting pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ensemble_forecaster.domain.entities.event import Label
from ensemble_forecaster.domain.entities.expert import ExpertName, WeightVector
from ensemble_forecaster.shared.consts import EnumRiskLevel


class Regime(str, Enum):
    """Qualitative shape of the recent label sequence."""

    UNKNOWN = "unknown"
    STREAKY = "streaky"
    ALTERNATING = "alternating"
    CHOPPY = "choppy"
    MIXED = "mixed"


class WeightSource(str, Enum):
    DEFAULT = "default"
    TUNED = "tuned"
    CACHED = "cached"


@dataclass(frozen=True, slots=True)
class DriftReport:
    """Outcome of a Page-Hinkley pass over the label series."""

    alarm_count: int = 0
    alarm_indices: Tuple[int, ...] = ()

    @property
    def drifting(self) -> bool:
        return self.alarm_count > 0


@dataclass(frozen=True, slots=True)
class BacktestTrial:
    """One walk-forward step: forecast from ``events[:position + 1]``."""

    position: int
    event_index: int
    probability_a: float
    predicted: Label
    actual: Label

    @property
    def correct(self) -> bool:
        return self.predicted is self.actual


@dataclass(slots=True)
class BacktestResult:
    """Realised accuracy of the ensemble over a trailing window."""

    trials: int = 0
    correct: int = 0
    sample: List[BacktestTrial] = field(default_factory=list)
    expert_accuracy: Dict[ExpertName, Optional[float]] = field(default_factory=dict)

    @property
    def accuracy(self) -> Optional[float]:
        if self.trials == 0:
            return None
        return self.correct / self.trials


@dataclass(slots=True)
class ForecastDiagnostics:
    insufficient_data: bool = False
    abstain: bool = False
    weight_source: WeightSource = WeightSource.DEFAULT
    drift: DriftReport = field(default_factory=DriftReport)
    sequence_length: int = 0


@dataclass(slots=True)
class Forecast:
    """Probabilistic forecast of the label following the supplied sequence."""

    probability_a: float
    label: Label
    accuracy: Optional[float]
    confidence: float
    risk: EnumRiskLevel
    regime: Regime
    weights: WeightVector
    expert_breakdown: Dict[ExpertName, float] = field(default_factory=dict)
    rationales: Dict[ExpertName, str] = field(default_factory=dict)
    backtest: Optional[BacktestResult] = None
    diagnostics: ForecastDiagnostics = field(default_factory=ForecastDiagnostics)

    @property
    def probability_b(self) -> float:
        return 1.0 - self.probability_a

    def explanation(self) -> str:
        lines = [
            f"P(A)={self.probability_a * 100:.2f}% -> {self.label.value} "
            f"with confidence {self.confidence}%."
        ]
        lines.extend(
            f"- {name.value}: {text}" for name, text in self.rationales.items()
        )
        return "\n".join(lines)
