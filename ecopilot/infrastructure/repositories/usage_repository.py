"""
Infrastructure Repository - Daily Usage MongoDB Implementation

Both writes here are single-document atomic operations, so concurrent
workers aggregating the same day never lose a reading and never claim the
same day's breach twice. Each reading id is recorded on the day, which
makes a redelivered reading a no-op for the aggregate.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from ecopilot.domain.entities.optimization import OptimizationRequest
from ecopilot.domain.entities.usage import DailyUsage
from ecopilot.domain.repositories.usage_repository import IUsageRepository
from ecopilot.infrastructure.database.mongo_database import (
    DAILY_USAGE,
    OPTIMIZATION_TRIGGERS,
    MongoDatabase,
)

logger = structlog.get_logger(__name__)


class UsageRepository(IUsageRepository):
    """MongoDB implementation of the daily usage repository."""

    def __init__(self, database: MongoDatabase):
        self.database = database

    async def get_by_date(self, date: str) -> Optional[DailyUsage]:
        try:
            document = await self.database.find_one(DAILY_USAGE, {"date": date})
        except PyMongoError as e:
            logger.error("Failed to get daily usage", date=date, error=str(e))
            raise
        return self._from_document(document) if document else None

    async def append_reading(
        self, date: str, value: float, reading_id: str
    ) -> DailyUsage:
        collection = self.database.get_collection(DAILY_USAGE)
        try:
            try:
                document = self._upsert_reading(collection, date, value, reading_id)
            except DuplicateKeyError:
                # the filter missed an existing day: either this reading is
                # already applied or another writer created the day first
                document = collection.find_one(
                    {"date": date, "reading_ids": reading_id}, {"_id": 0}
                )
                if document is not None:
                    logger.info(
                        "usage.reading_already_applied",
                        date=date,
                        reading_id=reading_id,
                    )
                else:
                    document = self._upsert_reading(collection, date, value, reading_id)
        except PyMongoError as e:
            logger.error("Failed to append reading", date=date, error=str(e))
            raise
        return self._from_document(document)

    @staticmethod
    def _upsert_reading(
        collection: Collection, date: str, value: float, reading_id: str
    ) -> Dict[str, Any]:
        return collection.find_one_and_update(
            {"date": date, "reading_ids": {"$ne": reading_id}},
            {
                "$push": {"readings": value, "reading_ids": reading_id},
                "$inc": {"total_consumption": value, "reading_count": 1},
                "$max": {"peak_usage": value},
                "$set": {"updated_at": datetime.now(timezone.utc)},
                "$setOnInsert": {"date": date},
            },
            upsert=True,
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def claim_optimization_trigger(
        self, date: str, reading_id: str, request: OptimizationRequest
    ) -> Optional[OptimizationRequest]:
        collection = self.database.get_collection(OPTIMIZATION_TRIGGERS)
        try:
            result = collection.update_one(
                {"date": date},
                {
                    "$setOnInsert": {
                        "date": date,
                        "reading_id": reading_id,
                        "triggered_at": datetime.now(timezone.utc),
                        "request": self._request_document(request),
                    }
                },
                upsert=True,
            )
            if result.upserted_id is not None:
                return request
        except DuplicateKeyError:
            # lost the upsert race on the unique date index
            pass
        except PyMongoError as e:
            logger.error("Failed to claim optimization trigger", date=date, error=str(e))
            raise

        document = await self.database.find_one(OPTIMIZATION_TRIGGERS, {"date": date})
        if document is None or document.get("reading_id") != reading_id:
            return None
        logger.info(
            "usage.optimization_trigger_reclaimed",
            date=date,
            reading_id=reading_id,
        )
        return self._request_from_document(document["request"])

    async def is_optimization_triggered(self, date: str) -> bool:
        document = await self.database.find_one(OPTIMIZATION_TRIGGERS, {"date": date})
        return document is not None

    @staticmethod
    def _from_document(document: Dict[str, Any]) -> DailyUsage:
        usage = DailyUsage(
            date=document["date"],
            readings=[float(v) for v in document.get("readings", [])],
        )
        usage.recompute()
        return usage

    @staticmethod
    def _request_document(request: OptimizationRequest) -> Dict[str, Any]:
        return {
            "optimization_id": request.optimization_id,
            "date": request.date,
            "total_consumption": request.total_consumption,
            "threshold": request.threshold,
            "excess_amount": request.excess_amount,
            "triggered_at": request.triggered_at,
        }

    @staticmethod
    def _request_from_document(document: Dict[str, Any]) -> OptimizationRequest:
        return OptimizationRequest(
            optimization_id=document["optimization_id"],
            date=document["date"],
            total_consumption=float(document["total_consumption"]),
            threshold=float(document["threshold"]),
            excess_amount=float(document["excess_amount"]),
            triggered_at=document["triggered_at"],
        )
