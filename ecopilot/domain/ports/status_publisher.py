"""Domain port for the live optimization status channel."""

from __future__ import annotations

from typing import Protocol

from ecopilot.domain.entities.optimization import OptimizationState


class IStatusPublisher(Protocol):
    async def publish(self, state: OptimizationState) -> None:
        """Mirror a state transition to subscribers. Must not raise."""
        ...
