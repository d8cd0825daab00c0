"""
Domain Repository Interface - Optimization State
"""

from abc import ABC, abstractmethod
from typing import Optional

from ecopilot.domain.entities.optimization import OptimizationState


class IOptimizationRepository(ABC):
    """Interface for optimization lifecycle persistence."""

    @abstractmethod
    async def get_by_id(self, optimization_id: str) -> Optional[OptimizationState]:
        """Get an optimization state by ID."""
        pass

    @abstractmethod
    async def create(self, state: OptimizationState) -> bool:
        """Insert a new state; False if the ID already exists."""
        pass

    @abstractmethod
    async def save(self, state: OptimizationState) -> OptimizationState:
        """Persist a non-terminal transition of an existing state."""
        pass

    @abstractmethod
    async def complete(self, state: OptimizationState) -> bool:
        """
        Terminal write.

        Only succeeds while the stored state is not yet terminal.

        Returns:
            False when the stored state was already COMPLETED or FAILED.
        """
        pass
