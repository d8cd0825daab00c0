"""
Application Use Cases - Usage Aggregation

Folds each reading into its day's usage aggregate and raises at most one
``optimization.required`` event per day once the daily maximum is breached.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import structlog

from ecopilot.domain.entities.optimization import OptimizationRequest
from ecopilot.domain.entities.usage import DailyUsage, Thresholds
from ecopilot.domain.ports.event_publishers import IOptimizationEventPublisher
from ecopilot.domain.repositories.preferences_repository import IPreferencesRepository
from ecopilot.domain.repositories.usage_repository import IUsageRepository
from ecopilot.domain.services.identifiers import generate_optimization_id

logger = structlog.get_logger(__name__)


@dataclass
class AggregationOutcome:
    """What one reading did to its day."""

    usage: DailyUsage
    thresholds: Thresholds
    exceeded: bool
    request: Optional[OptimizationRequest] = None

    @property
    def emitted(self) -> bool:
        return self.request is not None


class UsageAggregationUseCase:
    """Aggregator of the pipeline."""

    def __init__(
        self,
        usage_repository: IUsageRepository,
        preferences_repository: IPreferencesRepository,
        event_publisher: IOptimizationEventPublisher,
        default_thresholds: Optional[Thresholds] = None,
    ):
        self.usage_repository = usage_repository
        self.preferences_repository = preferences_repository
        self.event_publisher = event_publisher
        self.default_thresholds = default_thresholds or Thresholds()

    async def process_reading(
        self,
        sensor_id: str,
        value: float,
        date: str,
        timestamp: datetime,
        reading_id: str,
    ) -> AggregationOutcome:
        """
        Aggregate one reading and emit a breach signal if due.

        The value is trusted as validated upstream. Storage and publish
        errors propagate to the caller. Replaying the same ``reading_id``
        leaves the day's aggregate untouched, and when that reading owns
        the day's breach guard the stored request is emitted again.
        """
        logger.info(
            "aggregation.reading_received",
            sensor_id=sensor_id,
            reading_id=reading_id,
            value=value,
            date=date,
            timestamp=timestamp.isoformat(),
        )

        usage = await self.usage_repository.append_reading(date, value, reading_id)
        logger.info(
            "aggregation.daily_usage_updated",
            date=date,
            total_consumption=usage.total_consumption,
            reading_count=usage.reading_count,
            peak_usage=usage.peak_usage,
            avg_usage=round(usage.avg_usage, 2),
        )

        thresholds = await self._load_thresholds()
        exceeded = thresholds.is_exceeded_by(usage.total_consumption)
        logger.info(
            "aggregation.threshold_check",
            total_consumption=usage.total_consumption,
            daily_max=thresholds.daily_max,
            threshold_exceeded=exceeded,
        )

        outcome = AggregationOutcome(usage=usage, thresholds=thresholds, exceeded=exceeded)
        if not exceeded:
            logger.info(
                "aggregation.no_optimization_needed",
                remaining_capacity=thresholds.daily_max - usage.total_consumption,
            )
            return outcome

        candidate = OptimizationRequest(
            optimization_id=generate_optimization_id(date),
            date=date,
            total_consumption=usage.total_consumption,
            threshold=thresholds.daily_max,
            excess_amount=usage.total_consumption - thresholds.daily_max,
            triggered_at=datetime.now(timezone.utc),
        )
        request = await self.usage_repository.claim_optimization_trigger(
            date, reading_id, candidate
        )
        if request is None:
            logger.info(
                "aggregation.optimization_already_triggered",
                date=date,
                total_consumption=usage.total_consumption,
            )
            return outcome

        await self.event_publisher.publish_optimization_required(request)
        logger.info(
            "aggregation.optimization_required_emitted",
            optimization_id=request.optimization_id,
            total_consumption=request.total_consumption,
            threshold=request.threshold,
            excess_amount=request.excess_amount,
        )
        outcome.request = request
        return outcome

    async def _load_thresholds(self) -> Thresholds:
        preferences = await self.preferences_repository.get()
        if preferences is None:
            logger.debug("aggregation.thresholds_defaulted")
            return self.default_thresholds
        return preferences.thresholds
