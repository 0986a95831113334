"""Use cases for reading stored decisions."""

from gridsense.application.dtos.decision_dto import DecisionDTO
from gridsense.application.models import PipelineCapabilities
from gridsense.domain.entities.errors import DependencyError, DomainError


class DecisionNotFoundError(DomainError):
    """Raised when a series has no stored decision."""


class GetLatestDecisionUseCase:
    """Return the newest decision stored for a series."""

    def __init__(self, capabilities: PipelineCapabilities) -> None:
        self._capabilities = capabilities

    async def execute(self, series_id: str) -> DecisionDTO:
        store = self._capabilities.decision_store
        if store is None:
            raise DependencyError("Decision store is not available")

        document = await store.find_latest(series_id)
        if not document:
            raise DecisionNotFoundError(
                f"No decision stored for series {series_id}",
                details={"series_id": series_id},
            )
        return DecisionDTO.from_document(document)
