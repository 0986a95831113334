"""
Worker Entry Point - Main Layer

Runs the Kafka consumer loop without the HTTP surface. Both the API and
the worker are application entry points that belong to the Main layer.
"""

import asyncio
import sys

from gridsense.main.config import get_settings
from gridsense.main.container import app_lifespan, build_consumer, init_container
from gridsense.shared import configure_logging, get_logger, update_logging_from_settings

# Configure logging with basic settings first
configure_logging()

# Load settings
settings = get_settings()

# Update logging with complete settings
update_logging_from_settings(settings)

logger = get_logger(__name__)


async def run_worker() -> int:
    """Consume until cancelled. Returns a non-zero code if the bus is unusable."""
    settings = get_settings()
    init_container(settings)

    async with app_lifespan(settings, start_consumer=False) as container:
        coordinator = container.ingest_coordinator()
        logger.info(
            "worker.starting",
            topic=settings.kafka.energy_topic,
            group_id=settings.kafka.consumer_group,
        )
        await build_consumer(container, settings).run()

        if coordinator.disabled_reason:
            logger.error("worker.consumer_disabled", reason=coordinator.disabled_reason)
            return 1

    logger.info("worker.stopped", stats=coordinator.stats())
    return 0


def main() -> None:
    """Main entry point for the standalone consumer."""
    try:
        exit_code = asyncio.run(run_worker())
    except KeyboardInterrupt:
        logger.info("worker.interrupted")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
