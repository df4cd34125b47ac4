"""
Application DTOs - Prediction

Data Transfer Objects for forecasts, backtests and the prediction log
produced by the forecasting use cases.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ensemble_forecaster.domain.entities.event import Event, Label
from ensemble_forecaster.domain.entities.expert import WeightVector
from ensemble_forecaster.domain.entities.forecast import (
    BacktestResult,
    BacktestTrial,
    Forecast,
    ForecastDiagnostics,
    Regime,
    WeightSource,
)
from ensemble_forecaster.domain.entities.prediction import PredictionRecord
from ensemble_forecaster.shared.consts import EnumRiskLevel


def weights_payload(weights: WeightVector) -> Dict[str, float]:
    return {name: weight for name, weight in weights.as_dict().items() if weight > 0}


class EventDTO(BaseModel):
    """Last observed event of the sequence a forecast was computed from."""

    index: int = Field(description="Position of the event in the source feed")
    measured_value: Optional[float] = Field(
        default=None, description="Measured value (dice total) of the event"
    )
    label: Label = Field(description="Observed label")
    dice: Optional[Tuple[int, ...]] = Field(
        default=None, description="Individual dice faces when the source provides them"
    )

    @classmethod
    def from_domain(cls, event: Event) -> "EventDTO":
        return cls(
            index=event.index,
            measured_value=event.measured_value,
            label=event.label,
            dice=event.dice,
        )


class ForecastDiagnosticsDTO(BaseModel):
    insufficient_data: bool
    abstain: bool = Field(
        description="True when the probability is too close to 0.5 to act on"
    )
    weight_source: WeightSource
    drift_alarms: int = Field(ge=0)
    drift_alarm_positions: List[int] = Field(default_factory=list)
    sequence_length: int = Field(ge=0)

    @classmethod
    def from_domain(cls, diagnostics: ForecastDiagnostics) -> "ForecastDiagnosticsDTO":
        return cls(
            insufficient_data=diagnostics.insufficient_data,
            abstain=diagnostics.abstain,
            weight_source=diagnostics.weight_source,
            drift_alarms=diagnostics.drift.alarm_count,
            drift_alarm_positions=list(diagnostics.drift.alarm_indices),
            sequence_length=diagnostics.sequence_length,
        )


class PredictionResponseDTO(BaseModel):
    """DTO returned by the prediction endpoints."""

    last_event: EventDTO
    next_index: int = Field(description="Index of the event being forecast")
    label: Label = Field(description="Forecast label")
    probability_a: float = Field(ge=0.0, le=1.0)
    probability_b: float = Field(ge=0.0, le=1.0)
    accuracy: Optional[float] = Field(
        default=None,
        description="Walk-forward accuracy of the weights used; null without trials",
    )
    confidence: float = Field(ge=0.0, le=100.0, description="Confidence in percent")
    risk: EnumRiskLevel
    regime: Regime
    weights: Dict[str, float] = Field(default_factory=dict)
    expert_breakdown: Dict[str, float] = Field(default_factory=dict)
    explanation: str
    diagnostics: ForecastDiagnosticsDTO
    predictions_made: int = Field(
        ge=0, description="Number of predictions served since start-up"
    )

    @classmethod
    def from_domain(
        cls, forecast: Forecast, last_event: Event, predictions_made: int
    ) -> "PredictionResponseDTO":
        return cls(
            last_event=EventDTO.from_domain(last_event),
            next_index=last_event.index + 1,
            label=forecast.label,
            probability_a=round(forecast.probability_a, 4),
            probability_b=round(forecast.probability_b, 4),
            accuracy=forecast.accuracy,
            confidence=forecast.confidence,
            risk=forecast.risk,
            regime=forecast.regime,
            weights=weights_payload(forecast.weights),
            expert_breakdown={
                name.value: round(p, 4) for name, p in forecast.expert_breakdown.items()
            },
            explanation=forecast.explanation(),
            diagnostics=ForecastDiagnosticsDTO.from_domain(forecast.diagnostics),
            predictions_made=predictions_made,
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "last_event": {
                    "index": 1200,
                    "measured_value": 12,
                    "label": "A",
                    "dice": [3, 4, 5],
                },
                "next_index": 1201,
                "label": "B",
                "probability_a": 0.4213,
                "probability_b": 0.5787,
                "accuracy": 0.54,
                "confidence": 15.74,
                "risk": "high",
                "regime": "mixed",
                "weights": {"markov1": 1.0, "run_bias": 0.5},
                "expert_breakdown": {"markov1": 0.48, "run_bias": 0.22},
                "explanation": "P(A)=42.13% -> B with confidence 15.74%.",
                "diagnostics": {
                    "insufficient_data": False,
                    "abstain": False,
                    "weight_source": "tuned",
                    "drift_alarms": 0,
                    "drift_alarm_positions": [],
                    "sequence_length": 250,
                },
                "predictions_made": 12,
            }
        }
    }


class BacktestTrialDTO(BaseModel):
    position: int
    event_index: int
    probability_a: float
    predicted: Label
    actual: Label
    correct: bool

    @classmethod
    def from_domain(cls, trial: BacktestTrial) -> "BacktestTrialDTO":
        return cls(
            position=trial.position,
            event_index=trial.event_index,
            probability_a=round(trial.probability_a, 4),
            predicted=trial.predicted,
            actual=trial.actual,
            correct=trial.correct,
        )


class BacktestResponseDTO(BaseModel):
    """DTO returned by the backtest endpoint."""

    window: int = Field(ge=0, description="Trailing window replayed")
    sequence_length: int = Field(ge=0)
    trials: int = Field(ge=0)
    correct: int = Field(ge=0)
    accuracy: Optional[float] = None
    tuned: bool = Field(description="False when default weights were used")
    weights: Dict[str, float] = Field(default_factory=dict)
    expert_accuracy: Dict[str, Optional[float]] = Field(default_factory=dict)
    sample: List[BacktestTrialDTO] = Field(
        default_factory=list, description="Most recent walk-forward trials"
    )

    @classmethod
    def from_domain(
        cls,
        result: BacktestResult,
        *,
        window: int,
        sequence_length: int,
        weights: WeightVector,
        tuned: bool,
    ) -> "BacktestResponseDTO":
        return cls(
            window=window,
            sequence_length=sequence_length,
            trials=result.trials,
            correct=result.correct,
            accuracy=result.accuracy,
            tuned=tuned,
            weights=weights_payload(weights),
            expert_accuracy={
                name.value: accuracy
                for name, accuracy in result.expert_accuracy.items()
            },
            sample=[BacktestTrialDTO.from_domain(trial) for trial in result.sample],
        )


class PredictionRecordDTO(BaseModel):
    id: UUID
    target_index: int
    label: Label
    probability_a: float
    confidence: float
    source: str
    actual: Optional[Label] = None
    hit: Optional[bool] = None
    created_at: datetime
    resolved_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, record: PredictionRecord) -> "PredictionRecordDTO":
        return cls(
            id=record.id,
            target_index=record.target_index,
            label=record.label,
            probability_a=round(record.probability_a, 4),
            confidence=record.confidence,
            source=record.source,
            actual=record.actual,
            hit=record.hit,
            created_at=record.created_at,
            resolved_at=record.resolved_at,
        )


class HistoryResponseDTO(BaseModel):
    """DTO returned by the prediction history endpoint."""

    history: List[PredictionRecordDTO] = Field(default_factory=list)
    weights: Dict[str, float] = Field(
        default_factory=dict, description="Most recently tuned weights"
    )
    total_predictions: int = Field(ge=0)


class UpdateActualRequestDTO(BaseModel):
    """Payload reporting the realised label of the latest prediction."""

    actual: Label = Field(description='Realised label: "A"/"B" or "Tài"/"Xỉu"')

    @field_validator("actual", mode="before")
    @classmethod
    def _coerce_label(cls, value):
        if isinstance(value, Label):
            return value
        if not isinstance(value, str):
            raise ValueError('actual must be "A", "B", "Tài" or "Xỉu"')
        return Label.coerce(value)

    model_config = {"json_schema_extra": {"example": {"actual": "Tài"}}}


class UpdateActualResponseDTO(BaseModel):
    ok: bool = True
    record: PredictionRecordDTO
