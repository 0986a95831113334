"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gridsense.shared import EnumEnvironment, EnumLogLevel
from gridsense.shared.env import load_secret_file_variables

MIN_HISTORY_FLOOR = 10


class ServiceSettings(BaseSettings):
    """HTTP service configuration settings."""

    title: str = Field(default="GridSense", description="Service title")
    description: str = Field(
        default="Energy price ingest, forecasting and decision service",
        description="Service description",
    )
    version: str = Field(default="1.0.0", description="Service version")
    debug: bool = Field(default=False, description="Enable debug mode")
    port: int = Field(default=5001, description="Port to bind the server")

    model_config = SettingsConfigDict(
        env_prefix="SERVICE_", case_sensitive=False, extra="ignore"
    )


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    mongo_uri: str = Field(
        default="mongodb://localhost:27017/gridsense",
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="gridsense", description="Name of the MongoDB database"
    )
    enabled: bool = Field(
        default=True, description="Archive readings and store decisions in MongoDB"
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )


class RedisSettings(BaseSettings):
    """Redis history store and decision cache settings."""

    url: str = Field(default="redis://localhost:6379/0", description="Redis URL")
    enabled: bool = Field(default=True, description="Use Redis for history and cache")
    ttl_timeseries: int = Field(
        default=3600, ge=1, description="TTL of history points in seconds"
    )
    ttl_decisions: int = Field(
        default=86400, ge=1, description="TTL of cached decisions in seconds"
    )
    max_points_per_series: int = Field(
        default=1000, ge=1, description="Timeline length kept per series"
    )

    model_config = SettingsConfigDict(
        env_prefix="REDIS_", case_sensitive=False, extra="ignore"
    )


class KafkaSettings(BaseSettings):
    """Message bus configuration settings."""

    bootstrap_servers: str = Field(
        default="localhost:9092", description="Comma separated Kafka brokers"
    )
    energy_topic: str = Field(default="meter-readings", description="Inbound topic")
    processed_topic: str = Field(
        default="energy-processed", description="Topic receiving decisions"
    )
    stream_topic: str = Field(
        default="energy-stream-predictions",
        description="Topic receiving streaming spot predictions",
    )
    consumer_group: str = Field(
        default="algorithm-processor", description="Consumer group id"
    )
    enable_consumer: bool = Field(
        default=True, description="Run the consumer loop inside the API process"
    )
    enable_producer: bool = Field(default=True, description="Publish to Kafka")

    model_config = SettingsConfigDict(
        env_prefix="KAFKA_", case_sensitive=False, extra="ignore"
    )


class ForecastSettings(BaseSettings):
    """Forecaster configuration settings."""

    spike_delta_pct: float = Field(
        default=15.0, description="Rise over the last price counted as a spike (%)"
    )
    min_points: int = Field(
        default=12, ge=2, description="Window size reaching full confidence"
    )
    horizon_points: int = Field(
        default=4, ge=1, description="Points projected by the trend forecaster"
    )
    price_lookback: int = Field(
        default=24, ge=2, description="Records used by the spot forecaster"
    )
    default_horizon_minutes: float = Field(
        default=60.0, gt=0, description="Spot horizon when a request sets none"
    )
    stream_horizon_minutes: float = Field(
        default=60.0, gt=0, description="Spot horizon of streaming predictions"
    )

    model_config = SettingsConfigDict(
        env_prefix="FORECAST_", case_sensitive=False, extra="ignore"
    )


class DecisionSettings(BaseSettings):
    """Decision engine configuration settings."""

    price_threshold: float = Field(default=80.0, description="Critical price")
    low_price_threshold: float = Field(default=25.0, description="Low price")
    offpeak_hours: str = Field(
        default="0-6,22-23", description="Inclusive off-peak hour ranges"
    )

    model_config = SettingsConfigDict(
        env_prefix="DECISION_", case_sensitive=False, extra="ignore"
    )


class IngestSettings(BaseSettings):
    """Ingest coordinator configuration settings."""

    history_lookback_points: int = Field(
        default=48, ge=1, description="Window size fetched per message"
    )
    min_history_points: int = Field(
        default=12, description="Minimum window size before deciding"
    )
    process_every_n: int = Field(
        default=1, ge=1, description="Process every Nth admitted message"
    )
    max_messages_per_second: int = Field(
        default=200, ge=0, description="Admission cap per second"
    )
    stream_buffer_size: int = Field(
        default=48, ge=1, description="Points buffered per series for streaming"
    )
    max_stream_series: int = Field(
        default=100, ge=1, description="Series tracked by the stream buffer"
    )

    model_config = SettingsConfigDict(
        env_prefix="INGEST_", case_sensitive=False, extra="ignore"
    )

    @field_validator("min_history_points")
    @classmethod
    def _floor_min_history(cls, value: int) -> int:
        return max(MIN_HISTORY_FLOOR, value)


class PredictionProxySettings(BaseSettings):
    """On-demand prediction configuration settings."""

    remote_url: str = Field(
        default="", description="Remote prediction service URL (empty = local)"
    )
    timeout_seconds: float = Field(
        default=10.0, gt=0, description="Remote request timeout in seconds"
    )
    max_history_limit: int = Field(
        default=1000, ge=1, description="Maximum history points per request"
    )

    model_config = SettingsConfigDict(
        env_prefix="PREDICTION_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format",
    )
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    service: ServiceSettings = Field(default_factory=ServiceSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    kafka: KafkaSettings = Field(default_factory=KafkaSettings)
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)
    decision: DecisionSettings = Field(default_factory=DecisionSettings)
    ingest: IngestSettings = Field(default_factory=IngestSettings)
    prediction: PredictionProxySettings = Field(
        default_factory=PredictionProxySettings
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on enviroment.
    """
    load_secret_file_variables()
    return AppSettings()
