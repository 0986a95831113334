"""Message bus adapters - Infrastructure Layer."""

from .kafka_consumer import KafkaMessageConsumer
from .kafka_publisher import KafkaDecisionPublisher

__all__ = ["KafkaDecisionPublisher", "KafkaMessageConsumer"]
