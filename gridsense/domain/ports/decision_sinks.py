"""Outbound ports the result sink writes decisions to."""

from __future__ import annotations

from typing import Any, Dict, Protocol


class IDecisionCache(Protocol):
    """Key/value cache holding the latest decision payloads."""

    async def upsert(self, key: str, payload: Dict[str, Any]) -> None:
        ...


class IDecisionPublisher(Protocol):
    """Message bus producer."""

    async def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        ...
