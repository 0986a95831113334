"""Collaborators the pipeline can reach in the current process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gridsense.domain.gateways.remote_prediction_gateway import IRemotePredictionGateway
from gridsense.domain.ports.decision_sinks import IDecisionCache, IDecisionPublisher
from gridsense.domain.repositories.decision_repository import IDecisionRepository
from gridsense.domain.repositories.history_store import IHistoryStore
from gridsense.domain.repositories.reading_archive import IReadingArchive


@dataclass(frozen=True)
class PipelineCapabilities:
    """
    Handles connected at startup.

    Only the history store is mandatory; every other handle is None when the
    backing service is disabled or could not be reached.
    """

    history_store: IHistoryStore
    decision_cache: Optional[IDecisionCache] = None
    decision_store: Optional[IDecisionRepository] = None
    reading_archive: Optional[IReadingArchive] = None
    publisher: Optional[IDecisionPublisher] = None
    remote_prediction: Optional[IRemotePredictionGateway] = None
