"""
Presentation Layer - Ingest Controller

Submits records through the coordinator's admission control and exposes
its counters.
"""

from collections import Counter

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from gridsense.application.dtos.ingest_dto import (
    IngestRequestDTO,
    IngestResponseDTO,
    IngestStatsDTO,
)
from gridsense.application.services.ingest_coordinator import IngestCoordinator
from gridsense.main.container import AppContainer

REJECTED = "rejected"

router = APIRouter(prefix="/ingest", tags=["Ingest"])


@router.post(
    "/messages",
    response_model=IngestResponseDTO,
    summary="Ingest records through admission control",
)
@inject
async def ingest_messages(
    request: IngestRequestDTO,
    coordinator: IngestCoordinator = Depends(Provide[AppContainer.ingest_coordinator]),
) -> IngestResponseDTO:
    outcomes = []
    for message in request.messages:
        outcome = await coordinator.consume(message)
        outcomes.append(outcome.value if outcome is not None else REJECTED)
    return IngestResponseDTO(outcomes=outcomes, counts=dict(Counter(outcomes)))


@router.get("/stats", response_model=IngestStatsDTO, summary="Coordinator counters")
@inject
async def ingest_stats(
    coordinator: IngestCoordinator = Depends(Provide[AppContainer.ingest_coordinator]),
) -> IngestStatsDTO:
    return IngestStatsDTO.from_counters(
        coordinator.stats(),
        buffered_series=len(coordinator.stream_buffer),
        consumer_running=coordinator.consumer_running,
    )
