"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
The forecasting core itself never raises for data-volume reasons; these
errors are raised at its edges (weight construction, the source adapter,
the use cases).
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InsufficientDataError(DomainError):
    """Raised when a caller-imposed minimum number of events is not met."""

    def __init__(
        self,
        available: int,
        required: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.available = available
        self.required = required
        message = (
            f"Not enough data. Need at least {required} records, got {available}."
        )
        super().__init__(message, details)


class DegenerateWeightError(DomainError):
    """Raised when a weight vector holds negative or non-finite weights."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class HistorySourceError(DomainError):
    """Raised when the history source cannot be reached or answers an error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class HistorySourcePayloadError(HistorySourceError):
    """Raised when the history source answers with an unusable payload."""


class PredictionHistoryEmptyError(DomainError):
    """Raised when no pending prediction exists to attach an outcome to."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__("No pending prediction to update", details)


class ParameterValidationError(DomainError):
    """Raised when ensemble parameters fail validation."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
