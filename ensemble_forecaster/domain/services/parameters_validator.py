"""Domain service helpers for validating ensemble parameters."""

import math
from typing import List

from ensemble_forecaster.domain.entities.errors import ParameterValidationError
from ensemble_forecaster.domain.entities.parameters import EnsembleParameters


def _validate_windows(params: EnsembleParameters, errors: List[str]) -> None:
    if params.min_history < 1:
        errors.append("Minimum history must be at least 1 event.")
    if params.backtest_window <= 0:
        errors.append("Backtest window must be greater than 0.")
    if params.tuning_window <= 0:
        errors.append("Tuning window must be greater than 0.")
    if params.sample_size < 0:
        errors.append("Backtest sample size cannot be negative.")
    if params.tuning_min_events < params.min_history:
        errors.append(
            "Tuning minimum events cannot be lower than the minimum history."
        )


def _validate_grid(params: EnsembleParameters, errors: List[str]) -> None:
    if not params.grid_values:
        errors.append("Tuning grid must define at least one value.")
    for value in params.grid_values:
        if not math.isfinite(value) or value < 0:
            errors.append(f"Tuning grid value {value!r} must be finite and >= 0.")
    if params.grid_min_sum > params.grid_max_sum:
        errors.append("Tuning grid minimum sum cannot exceed the maximum sum.")
    if params.max_candidates <= 0:
        errors.append("Maximum number of candidates must be greater than 0.")


def _validate_probabilities(params: EnsembleParameters, errors: List[str]) -> None:
    if not 0.0 <= params.probability_floor < params.probability_ceiling <= 1.0:
        errors.append(
            "Probability floor and ceiling must satisfy 0 <= floor < ceiling <= 1."
        )
    if not 0.0 <= params.drift_penalty <= 1.0:
        errors.append("Drift penalty must be between 0 and 1.")
    if not 0.0 <= params.abstain_threshold < 0.5:
        errors.append(
            "Abstain threshold must be between 0 (inclusive) and 0.5 (exclusive)."
        )


def validate_parameters(params: EnsembleParameters) -> None:
    """Validate the ensemble hyperparameters.

    Raises:
        ParameterValidationError: If one or more validation rules fail.
    """

    errors: List[str] = []

    if not params.active_experts:
        errors.append("At least one expert must be active.")
    if len(set(params.active_experts)) != len(params.active_experts):
        errors.append("Active experts must not repeat.")

    _validate_windows(params, errors)
    _validate_grid(params, errors)
    _validate_probabilities(params, errors)

    if not 0.0 < params.drift_alpha < 1.0:
        errors.append("Drift alpha must be strictly between 0 and 1.")
    if params.drift_lambda <= 0:
        errors.append("Drift threshold must be greater than 0.")

    if errors:
        raise ParameterValidationError(
            "Ensemble parameters are invalid.", details={"errors": errors}
        )
