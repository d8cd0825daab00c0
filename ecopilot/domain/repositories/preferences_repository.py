"""
Domain Repository Interface - User Preferences
"""

from abc import ABC, abstractmethod
from typing import Optional

from ecopilot.domain.entities.usage import UserPreferences


class IPreferencesRepository(ABC):
    @abstractmethod
    async def get(self) -> Optional[UserPreferences]:
        """Get stored preferences, None when never configured."""
        pass

    @abstractmethod
    async def save(self, preferences: UserPreferences) -> UserPreferences:
        pass
