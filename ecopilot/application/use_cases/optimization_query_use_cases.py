"""
Application Use Cases - Read side of the pipeline
"""

from ecopilot.application.dtos.optimization_dto import OptimizationStateDTO
from ecopilot.application.dtos.sensor_dto import DailyUsageDTO
from ecopilot.domain.entities.errors import DomainError, OptimizationNotFoundError
from ecopilot.domain.repositories.optimization_repository import IOptimizationRepository
from ecopilot.domain.repositories.usage_repository import IUsageRepository


class UsageNotFoundError(DomainError):
    def __init__(self, date: str):
        super().__init__(f"No usage recorded for {date}", {"date": date})


class GetOptimizationUseCase:
    def __init__(self, optimization_repository: IOptimizationRepository):
        self.optimization_repository = optimization_repository

    async def execute(self, optimization_id: str) -> OptimizationStateDTO:
        """
        Raises:
            OptimizationNotFoundError: If no state exists for the ID.
        """
        state = await self.optimization_repository.get_by_id(optimization_id)
        if state is None:
            raise OptimizationNotFoundError(optimization_id)
        return OptimizationStateDTO.from_entity(state)


class GetDailyUsageUseCase:
    def __init__(self, usage_repository: IUsageRepository):
        self.usage_repository = usage_repository

    async def execute(self, date: str) -> DailyUsageDTO:
        usage = await self.usage_repository.get_by_date(date)
        if usage is None:
            raise UsageNotFoundError(date)
        triggered = await self.usage_repository.is_optimization_triggered(date)
        return DailyUsageDTO.from_entity(usage, optimization_triggered=triggered)
