"""
Use cases tying the history feed, the forecasting core and the prediction
log together, and the DTOs they answer with.
"""

from ensemble_forecaster.application import dtos, models, use_cases

__all__ = ["dtos", "use_cases", "models"]
