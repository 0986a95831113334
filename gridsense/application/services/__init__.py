"""Application services coordinating the pipeline."""

from .ingest_coordinator import IngestCoordinator
from .result_sink import ResultSink, decision_cache_key

__all__ = ["IngestCoordinator", "ResultSink", "decision_cache_key"]
