"""
Shared module - Cross-cutting concerns / Shared Layer

Enums and logging helpers used by every other layer. This package must
not depend on Infrastructure or Frameworks beyond structlog.
"""

from .consts import EnumEnvironment, EnumLogLevel, EnumRiskLevel
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "EnumEnvironment",
    "EnumLogLevel",
    "EnumRiskLevel",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
