"""
Forecaster settings.

Each group reads its own prefixed environment variables (``SOURCE_URL``,
``ENSEMBLE_MIN_HISTORY`` ...). ``AppSettings`` also accepts the nested form
(``ENSEMBLE__MIN_HISTORY``) and a local ``.env`` file.
"""

from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ensemble_forecaster.domain.entities.expert import REQUIRED_EXPERTS, ExpertName
from ensemble_forecaster.shared import EnumEnvironment, EnumLogLevel


class ServiceSettings(BaseSettings):
    """HTTP service configuration settings."""

    title: str = Field(default="Ensemble Forecaster", description="Service title")
    description: str = Field(
        default="Ensemble forecaster for binary outcome sequences with "
        "walk-forward validated weights",
        description="Service description",
    )
    version: str = Field(default="1.0.0", description="Service version")
    git_commit: str = Field(
        default="unknown",
        description="Git commit hash",
        validation_alias=AliasChoices("SERVICE_GIT_COMMIT", "GIT_COMMIT"),
    )
    build_time: str = Field(
        default="unknown",
        description="Build timestamp",
        validation_alias=AliasChoices("SERVICE_BUILD_TIME", "BUILD_TIME"),
    )
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(
        default=3000,
        description="Port to bind the server",
        validation_alias=AliasChoices("SERVICE_PORT", "PORT"),
    )
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    model_config = SettingsConfigDict(
        env_prefix="SERVICE_", case_sensitive=False, extra="ignore"
    )


class SourceSettings(BaseSettings):
    """History source configuration settings."""

    url: str = Field(
        default="https://fullsrc-daynesun.onrender.com/api/taixiu/history",
        description="Default history feed used when a request names no source",
    )
    timeout: float = Field(
        default=8.0, gt=0, description="Request timeout in seconds"
    )
    backtest_timeout: float = Field(
        default=10.0, gt=0, description="Request timeout in seconds for backtests"
    )
    health_timeout: float = Field(
        default=5.0, gt=0, description="Request timeout in seconds for health checks"
    )

    model_config = SettingsConfigDict(
        env_prefix="SOURCE_", case_sensitive=False, extra="ignore"
    )


class EnsembleSettings(BaseSettings):
    """Forecasting core configuration settings."""

    active_experts: List[ExpertName] = Field(
        default_factory=lambda: list(REQUIRED_EXPERTS),
        description="Experts combined by the ensemble and tuned over",
    )
    min_history: int = Field(default=8, ge=1)
    backtest_window: int = Field(default=250, ge=1)
    sample_size: int = Field(default=20, ge=0)
    tuning_min_events: int = Field(default=30, ge=1)
    tuning_window: int = Field(default=200, ge=1)
    grid_values: List[float] = Field(default_factory=lambda: [0.0, 0.5, 1.0])
    grid_min_sum: float = Field(default=1.0)
    grid_max_sum: float = Field(default=3.0)
    max_candidates: int = Field(default=300, ge=1)
    sum_penalty: float = Field(default=1e-4, ge=0)
    drift_penalty: float = Field(default=0.15, ge=0, le=1)
    abstain_threshold: float = Field(default=0.04, ge=0)
    drift_alpha: float = Field(default=0.995, gt=0, lt=1)
    drift_delta: float = Field(default=0.01)
    drift_lambda: float = Field(default=6.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="ENSEMBLE_", case_sensitive=False, extra="ignore"
    )


class CacheSettings(BaseSettings):
    """Tuned weight cache configuration settings."""

    enabled: bool = Field(default=True, description="Reuse tuned weights")
    ttl_seconds: float = Field(
        default=300.0, gt=0, description="Maximum age of cached weights"
    )
    retune_interval: int = Field(
        default=10,
        ge=1,
        description="New events after which cached weights are tuned again",
    )

    model_config = SettingsConfigDict(
        env_prefix="CACHE_", case_sensitive=False, extra="ignore"
    )


class HistorySettings(BaseSettings):
    """Prediction log configuration settings."""

    max_records: int = Field(
        default=500, ge=1, description="Predictions kept in memory"
    )

    model_config = SettingsConfigDict(
        env_prefix="HISTORY_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Root settings object handed to the container."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    service: ServiceSettings = Field(default_factory=ServiceSettings)
    source: SourceSettings = Field(default_factory=SourceSettings)
    ensemble: EnsembleSettings = Field(default_factory=EnsembleSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """Read the settings afresh; tests monkeypatch this to inject their own."""
    return AppSettings()
