from __future__ import annotations

from copy import deepcopy

import pytest

from ensemble_forecaster.domain.entities.event import Label
from ensemble_forecaster.domain.entities.expert import (
    REQUIRED_EXPERTS,
    ExpertName,
    WeightVector,
)
from ensemble_forecaster.domain.entities.forecast import Regime, WeightSource
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters
from ensemble_forecaster.domain.services.prediction_service import (
    PredictionService,
    binary_entropy,
    confidence_of,
    majority_label,
    resolve_label,
    risk_of,
)
from ensemble_forecaster.shared.consts import EnumRiskLevel
from tests.conftest import make_events

RUN_BIAS_HEAVY = WeightVector(
    {
        ExpertName.MARKOV1: 0.1,
        ExpertName.MARKOV2: 0.1,
        ExpertName.RECENCY_BLEND: 0.1,
        ExpertName.RUN_BIAS: 1.0,
        ExpertName.NGRAM_FOLLOW: 0.1,
        ExpertName.TOTAL_HEURISTIC: 0.1,
    }
)


@pytest.mark.parametrize(
    "probability, expected", [(0.5, 5.0), (0.9, 80.0), (0.1, 80.0), (1.0, 99.0)]
)
def test_confidence_of(probability: float, expected: float) -> None:
    assert confidence_of(probability) == pytest.approx(expected)


@pytest.mark.parametrize(
    "probability, expected",
    [
        (0.5, EnumRiskLevel.HIGH),
        (0.99, EnumRiskLevel.LOW),
        (0.8, EnumRiskLevel.MEDIUM),
        (0.2, EnumRiskLevel.MEDIUM),
    ],
)
def test_risk_of(probability: float, expected: EnumRiskLevel) -> None:
    assert risk_of(probability) is expected


def test_binary_entropy_bounds() -> None:
    assert binary_entropy(0.5) == pytest.approx(1.0)
    assert binary_entropy(1.0) == 0.0
    assert binary_entropy(0.0) == 0.0


def test_majority_label() -> None:
    assert majority_label(make_events("AABB")) is Label.A
    assert majority_label(make_events("ABBB")) is Label.B
    assert majority_label(make_events("B" * 20 + "A" * 10)) is Label.A
    assert majority_label([]) is Label.A


def test_resolve_label() -> None:
    events = make_events("ABB")
    assert resolve_label(0.5, events) is Label.B
    assert resolve_label(0.6, events) is Label.A
    assert resolve_label(0.4, events) is Label.A.opposite


def test_empty_sequence_falls_back() -> None:
    forecast = PredictionService().predict([])

    assert forecast.probability_a == 0.5
    assert forecast.label is Label.A
    assert forecast.accuracy is None
    assert forecast.diagnostics.insufficient_data
    assert forecast.diagnostics.abstain
    assert forecast.diagnostics.weight_source is WeightSource.DEFAULT
    assert forecast.regime is Regime.UNKNOWN


def test_short_sequence_uses_frequency() -> None:
    forecast = PredictionService().predict(make_events("AAAAB"))

    assert forecast.probability_a == pytest.approx(0.8)
    assert forecast.label is Label.A
    assert forecast.diagnostics.insufficient_data
    assert forecast.diagnostics.sequence_length == 5
    assert forecast.weights == EnsembleParameters().default_weight_vector()


def test_minimum_history_without_trials() -> None:
    forecast = PredictionService().predict(make_events("ABABABAB"))

    assert not forecast.diagnostics.insufficient_data
    assert forecast.backtest.trials == 0
    assert forecast.accuracy is None
    assert forecast.diagnostics.weight_source is WeightSource.DEFAULT


def test_streak_on_sparse_history_is_forecast_to_break() -> None:
    forecast = PredictionService().predict(make_events("A" * 10))

    assert forecast.diagnostics.weight_source is WeightSource.DEFAULT
    assert not forecast.diagnostics.insufficient_data
    assert forecast.expert_breakdown[ExpertName.RUN_BIAS] == pytest.approx(0.22)
    assert forecast.expert_breakdown[ExpertName.MARKOV1] == 1.0
    assert forecast.probability_a == pytest.approx(0.443)
    assert forecast.label is Label.B
    assert not forecast.diagnostics.abstain


def test_predict_leaves_input_untouched(mixed_events) -> None:
    snapshot = deepcopy(mixed_events)

    PredictionService().predict(mixed_events)

    assert mixed_events == snapshot


def test_alternating_forecast_is_tuned(alternating_events) -> None:
    forecast = PredictionService().predict(alternating_events)

    assert forecast.label is Label.B
    assert forecast.probability_b > 0.5
    assert forecast.accuracy == 1.0
    assert forecast.regime is Regime.ALTERNATING
    assert forecast.diagnostics.weight_source is WeightSource.TUNED
    assert forecast.backtest.trials == 31
    assert set(forecast.expert_breakdown) == set(REQUIRED_EXPERTS)


def test_supplied_weights_skip_tuning(streak_events) -> None:
    forecast = PredictionService().predict(streak_events, RUN_BIAS_HEAVY)

    assert forecast.probability_a == pytest.approx(0.67 / 1.5)
    assert forecast.label is Label.B
    assert forecast.weights is RUN_BIAS_HEAVY
    assert forecast.diagnostics.weight_source is WeightSource.CACHED
    assert forecast.regime is Regime.STREAKY
    assert not forecast.diagnostics.drift.drifting


def test_coin_flip_abstains_and_uses_majority(streak_events) -> None:
    weights = WeightVector({ExpertName.TOTAL_HEURISTIC: 1.0})
    forecast = PredictionService().predict(streak_events, weights)

    assert forecast.probability_a == 0.5
    assert forecast.diagnostics.abstain
    assert forecast.label is Label.A


def test_drift_is_reported(shifted_events) -> None:
    forecast = PredictionService().predict(shifted_events)

    assert forecast.diagnostics.drift.drifting
    assert forecast.diagnostics.sequence_length == 100


def test_predict_accepts_any_sequence(alternating_events) -> None:
    service = PredictionService()
    from_list = service.predict(alternating_events)
    from_tuple = service.predict(tuple(alternating_events))

    assert from_list.probability_a == from_tuple.probability_a


def test_forecast_accuracy_matches_backtest(mixed_events) -> None:
    service = PredictionService()
    forecast = service.predict(mixed_events)
    report = service.backtest(mixed_events, weights=forecast.weights)

    assert forecast.accuracy == report.accuracy
    assert forecast.backtest.trials == report.trials


def test_backtest_tunes_without_weights(alternating_events) -> None:
    service = PredictionService()
    report = service.backtest(alternating_events, window_size=20)

    assert report.trials == 11
    assert report.accuracy == 1.0


def test_zero_window_is_not_replaced_by_default(alternating_events) -> None:
    report = PredictionService().backtest(
        alternating_events, window_size=0, weights=RUN_BIAS_HEAVY
    )

    assert report.trials == 0
    assert report.accuracy is None


def test_explanation_lists_experts(alternating_events) -> None:
    text = PredictionService().predict(alternating_events).explanation()

    assert text.startswith("P(A)=")
    assert "- markov1:" in text
