"""DTOs for the admission-controlled ingest endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field

from gridsense.domain.entities.ingest import IngestOutcome


class IngestRequestDTO(BaseModel):
    """One record or a batch of records submitted through admission control."""

    messages: List[Union[Dict[str, Any], str]] = Field(
        min_length=1,
        description="Raw records, either JSON objects or JSON-encoded strings",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "messages": [
                    {
                        "DateTime": "2025-03-02T10:00:00Z",
                        "Price": 42.1,
                        "AREA": "NO1",
                        "CUSTOMER": "c-17",
                        "meter_id": "m-0017",
                    }
                ]
            }
        }
    }


class IngestResponseDTO(BaseModel):
    outcomes: List[str] = Field(
        description="Terminal state per message, or 'rejected' for unparseable bodies"
    )
    counts: Dict[str, int] = Field(default_factory=dict)


class IngestStatsDTO(BaseModel):
    """Counters kept by the ingest coordinator since it started."""

    received: int = 0
    rejected: int = 0
    rate_limited: int = 0
    sampled_out: int = 0
    processed: int = 0
    processing_failed: int = 0
    stream_published: int = 0
    buffered_series: int = 0
    consumer_running: bool = False

    @classmethod
    def from_counters(
        cls,
        counters: Dict[str, int],
        buffered_series: int,
        consumer_running: bool,
    ) -> "IngestStatsDTO":
        return cls(
            received=counters.get("received", 0),
            rejected=counters.get("rejected", 0),
            rate_limited=counters.get(IngestOutcome.RATE_LIMITED.value, 0),
            sampled_out=counters.get(IngestOutcome.SAMPLED_OUT.value, 0),
            processed=counters.get(IngestOutcome.PROCESSED.value, 0),
            processing_failed=counters.get(IngestOutcome.PROCESSING_FAILED.value, 0),
            stream_published=counters.get("stream_published", 0),
            buffered_series=buffered_series,
            consumer_running=consumer_running,
        )
