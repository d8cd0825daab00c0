"""
Domain Repository Interface - Daily Usage

The per-day usage record and its breach guard are the only contended
resources of the pipeline; implementations must make both
:meth:`append_reading` and :meth:`claim_optimization_trigger` atomic.
Both are also replayed when the queue redelivers a reading, so both are
keyed by the reading's id.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ecopilot.domain.entities.optimization import OptimizationRequest
from ecopilot.domain.entities.usage import DailyUsage


class IUsageRepository(ABC):
    """Interface for daily usage persistence."""

    @abstractmethod
    async def get_by_date(self, date: str) -> Optional[DailyUsage]:
        """Get the usage aggregate for a day."""
        pass

    @abstractmethod
    async def append_reading(
        self, date: str, value: float, reading_id: str
    ) -> DailyUsage:
        """
        Atomically append a reading, creating the day if absent.

        A reading id already applied to the day leaves the aggregate
        unchanged and returns it as stored.
        """
        pass

    @abstractmethod
    async def claim_optimization_trigger(
        self, date: str, reading_id: str, request: OptimizationRequest
    ) -> Optional[OptimizationRequest]:
        """
        Atomically set the day's breach guard on behalf of one reading.

        Returns:
            The request to emit when ``reading_id`` owns the guard: ``request``
            for the caller that set it, or the request stored with the guard
            when the owning reading is redelivered. None for every other
            reading.
        """
        pass

    @abstractmethod
    async def is_optimization_triggered(self, date: str) -> bool:
        """Check whether the day's breach guard is set."""
        pass
