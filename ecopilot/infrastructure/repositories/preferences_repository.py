"""
Infrastructure Repository - User Preferences MongoDB Implementation

The system serves a single household, so preferences live in one document.
"""

from typing import Optional

from pymongo.errors import PyMongoError
import structlog

from ecopilot.domain.entities.usage import (
    AutomationLevel,
    CostSensitivity,
    Thresholds,
    UserPreferences,
)
from ecopilot.domain.repositories.preferences_repository import IPreferencesRepository
from ecopilot.infrastructure.database.mongo_database import PREFERENCES, MongoDatabase

logger = structlog.get_logger(__name__)

PREFERENCES_KEY = "default"


class PreferencesRepository(IPreferencesRepository):
    def __init__(self, database: MongoDatabase):
        self.database = database

    async def get(self) -> Optional[UserPreferences]:
        document = await self.database.find_one(PREFERENCES, {"key": PREFERENCES_KEY})
        if not document:
            return None
        thresholds = document.get("thresholds") or {}
        return UserPreferences(
            thresholds=Thresholds(
                daily_max=thresholds.get("daily_max", Thresholds().daily_max),
                peak_hour_limit=thresholds.get(
                    "peak_hour_limit", Thresholds().peak_hour_limit
                ),
            ),
            cost_sensitivity=CostSensitivity(
                document.get("cost_sensitivity", CostSensitivity.MEDIUM.value)
            ),
            automation_level=AutomationLevel(
                document.get("automation_level", AutomationLevel.SUGGESTED.value)
            ),
            updated_at=document.get("updated_at"),
        )

    async def save(self, preferences: UserPreferences) -> UserPreferences:
        collection = self.database.get_collection(PREFERENCES)
        document = {
            "key": PREFERENCES_KEY,
            "thresholds": {
                "daily_max": preferences.thresholds.daily_max,
                "peak_hour_limit": preferences.thresholds.peak_hour_limit,
            },
            "cost_sensitivity": preferences.cost_sensitivity.value,
            "automation_level": preferences.automation_level.value,
            "updated_at": preferences.updated_at,
        }
        try:
            collection.replace_one({"key": PREFERENCES_KEY}, document, upsert=True)
        except PyMongoError as e:
            logger.error("Failed to save preferences", error=str(e))
            raise
        return preferences
