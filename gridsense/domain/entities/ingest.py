"""Terminal states of a message handled by the ingest coordinator."""

from __future__ import annotations

from enum import Enum


class IngestOutcome(str, Enum):
    RATE_LIMITED = "rate-limited"
    SAMPLED_OUT = "sampled-out"
    PROCESSED = "processed"
    PROCESSING_FAILED = "processing-failed"
