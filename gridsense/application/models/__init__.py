"""Application-level models shared by use cases."""

from .capabilities import PipelineCapabilities
from .pipeline import IngestedReading, PipelineConfig, PipelineResult, StreamConfig

__all__ = [
    "IngestedReading",
    "PipelineCapabilities",
    "PipelineConfig",
    "PipelineResult",
    "StreamConfig",
]
