from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnumRiskLevel(str, Enum):
    """Qualitative risk attached to a forecast, derived from its entropy."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
