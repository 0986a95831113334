"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from operator import attrgetter
from typing import Optional

from dependency_injector import containers, providers

from gridsense.application.models import PipelineConfig, StreamConfig
from gridsense.application.services.ingest_coordinator import IngestCoordinator
from gridsense.application.services.result_sink import ResultSink
from gridsense.application.use_cases.decision_use_cases import GetLatestDecisionUseCase
from gridsense.application.use_cases.health_use_cases import GetHealthStatusUseCase
from gridsense.application.use_cases.process_message_use_case import (
    ProcessMessageUseCase,
)
from gridsense.application.use_cases.spot_prediction_use_case import (
    SpotPredictionUseCase,
)
from gridsense.domain.services.decision_engine import DecisionEngine, parse_offpeak_ranges
from gridsense.domain.services.forecaster import TrendForecaster
from gridsense.domain.services.spot_forecaster import SpotPriceForecaster
from gridsense.infrastructure.messaging import KafkaMessageConsumer
from gridsense.infrastructure.services.health_check_service import HealthCheckService
from gridsense.shared import get_logger

from .config import AppSettings, get_settings
from .resources import ConnectedResources, connect_resources

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependecy-injector."""

    wiring_config = containers.WiringConfiguration(packages=["..presentation"])

    # Settings
    config = providers.Configuration()

    # Infrastructure, replaced by the connected resources at startup
    resources = providers.Singleton(
        ConnectedResources.offline,
        max_points_per_series=config.redis.max_points_per_series,
    )
    capabilities = providers.Callable(attrgetter("capabilities"), resources)

    # Domain services
    trend_forecaster = providers.Singleton(
        TrendForecaster,
        spike_delta_pct=config.forecast.spike_delta_pct,
        min_points=config.forecast.min_points,
    )

    spot_forecaster = providers.Singleton(
        SpotPriceForecaster,
        lookback=config.forecast.price_lookback,
        min_points=config.forecast.min_points,
    )

    decision_engine = providers.Singleton(
        DecisionEngine,
        price_threshold=config.decision.price_threshold,
        low_price_threshold=config.decision.low_price_threshold,
        offpeak_hours=providers.Callable(
            parse_offpeak_ranges, config.decision.offpeak_hours
        ),
    )

    # Application
    pipeline_config = providers.Singleton(
        PipelineConfig,
        history_lookback_points=config.ingest.history_lookback_points,
        min_history_points=config.ingest.min_history_points,
        horizon_points=config.forecast.horizon_points,
    )

    stream_config = providers.Singleton(
        StreamConfig,
        max_messages_per_second=config.ingest.max_messages_per_second,
        process_every_n=config.ingest.process_every_n,
        stream_buffer_size=config.ingest.stream_buffer_size,
        max_stream_series=config.ingest.max_stream_series,
        stream_horizon_minutes=config.forecast.stream_horizon_minutes,
        stream_topic=config.kafka.stream_topic,
    )

    result_sink = providers.Factory(
        ResultSink,
        cache=providers.Callable(attrgetter("decision_cache"), capabilities),
        decision_store=providers.Callable(attrgetter("decision_store"), capabilities),
        publisher=providers.Callable(attrgetter("publisher"), capabilities),
        topic=config.kafka.processed_topic,
    )

    process_message_use_case = providers.Factory(
        ProcessMessageUseCase,
        capabilities=capabilities,
        result_sink=result_sink,
        forecaster=trend_forecaster,
        decision_engine=decision_engine,
        config=pipeline_config,
    )

    ingest_coordinator = providers.Singleton(
        IngestCoordinator,
        process_message=process_message_use_case,
        spot_forecaster=spot_forecaster,
        config=stream_config,
        publisher=providers.Callable(attrgetter("publisher"), capabilities),
    )

    spot_prediction_use_case = providers.Factory(
        SpotPredictionUseCase,
        capabilities=capabilities,
        forecaster=spot_forecaster,
        default_horizon_minutes=config.forecast.default_horizon_minutes,
        max_history_limit=config.prediction.max_history_limit,
    )

    get_latest_decision_use_case = providers.Factory(
        GetLatestDecisionUseCase,
        capabilities=capabilities,
    )

    health_check_service = providers.Factory(
        HealthCheckService,
        mongo_database=providers.Callable(attrgetter("mongo_database"), resources),
        redis_client=providers.Callable(attrgetter("redis_client"), resources),
        publisher=providers.Callable(attrgetter("publisher"), resources),
        mongo_enabled=config.database.enabled,
        redis_enabled=config.redis.enabled,
        kafka_enabled=config.kafka.enable_producer,
    )

    get_health_status_use_case = providers.Factory(
        GetHealthStatusUseCase,
        health_check_service=health_check_service,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: Optional[AppContainer] = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


def build_consumer(container: AppContainer, settings: AppSettings) -> KafkaMessageConsumer:
    return KafkaMessageConsumer(
        coordinator=container.ingest_coordinator(),
        bootstrap_servers=settings.kafka.bootstrap_servers,
        topic=settings.kafka.energy_topic,
        group_id=settings.kafka.consumer_group,
    )


@asynccontextmanager
async def app_lifespan(
    settings: Optional[AppSettings] = None, start_consumer: Optional[bool] = None
):
    """
    Centralized lifecycle management for external resources.

    Connects the collaborators, swaps them into the container and, when
    enabled, runs the Kafka consumer loop as a background task until exit.
    """
    container = get_container()
    settings = settings or get_settings()
    if start_consumer is None:
        start_consumer = settings.kafka.enable_consumer

    resources = await connect_resources(settings)
    container.resources.override(providers.Object(resources))
    container.ingest_coordinator.reset()

    consumer_task: Optional[asyncio.Task] = None
    try:
        if start_consumer:
            consumer_task = asyncio.create_task(
                build_consumer(container, settings).run()
            )
        logger.info("container.resources.initialized")
        yield container

    finally:
        if consumer_task is not None:
            consumer_task.cancel()
            with suppress(asyncio.CancelledError):
                await consumer_task
        await resources.close()
        container.resources.reset_override()
        container.ingest_coordinator.reset()
        logger.info("container.resources.shutdown")
