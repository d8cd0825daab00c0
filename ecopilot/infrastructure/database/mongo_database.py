"""
MongoDB Database - Infrastructure Layer

This module provides the MongoDB client shared by the repositories. It owns
the connection and the index set; the unique indexes are what make the
per-day guard and optimization creation safe under concurrent workers.
"""

from typing import Any, Dict, Optional

import pymongo
import pymongo.errors
import structlog
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = structlog.get_logger(__name__)

DAILY_USAGE = "daily_usage"
OPTIMIZATION_TRIGGERS = "optimization_triggers"
OPTIMIZATIONS = "optimizations"
PREFERENCES = "preferences"
SENSORS = "sensors"
RAW_READINGS = "raw_readings"


class MongoDatabase:
    """MongoDB database client."""

    def __init__(
        self,
        mongo_uri: str,
        db_name: str,
        client: Optional[MongoClient] = None,
    ):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
            client: Pre-built client, used instead of connecting to ``mongo_uri``
        """
        self.client: MongoClient = client if client is not None else MongoClient(
            mongo_uri, tz_aware=True
        )
        self.db: Database = self.client[db_name]

    def get_collection(self, collection_name: str) -> Collection:
        return self.db[collection_name]

    async def find_one(
        self, collection_name: str, query: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        return self.db[collection_name].find_one(query, {"_id": 0})

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    async def create_indexes(self) -> None:
        """
        Create all necessary indexes for the application.
        This is an async method to be called during application startup.
        """
        specs = [
            (DAILY_USAGE, "date", "date_unique_idx", True),
            (OPTIMIZATION_TRIGGERS, "date", "trigger_date_unique_idx", True),
            (OPTIMIZATIONS, "id", "optimization_id_unique_idx", True),
            (OPTIMIZATIONS, "status", "status_idx", False),
            (PREFERENCES, "key", "preferences_key_unique_idx", True),
            (SENSORS, "sensor_id", "sensor_id_unique_idx", True),
        ]
        for collection_name, field, name, unique in specs:
            try:
                self.db[collection_name].create_index(field, name=name, unique=unique)
            except pymongo.errors.OperationFailure as e:
                logger.warning(
                    "mongo.index.create_failed",
                    collection=collection_name,
                    index=name,
                    error=str(e),
                )

        try:
            self.db[RAW_READINGS].create_index(
                [("sensor_id", pymongo.ASCENDING), ("timestamp", pymongo.DESCENDING)],
                name="sensor_timestamp_idx",
                background=True,
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning(
                "mongo.index.create_failed",
                collection=RAW_READINGS,
                index="sensor_timestamp_idx",
                error=str(e),
            )
