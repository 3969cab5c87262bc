"""
Admin settings repository.

Data access layer for the single admin_settings row.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.config.business_constants import ADMIN_SETTINGS_ID
from minefund.models.admin_settings import AdminSettings
from minefund.repositories.base import BaseRepository


class AdminSettingsRepository(BaseRepository[AdminSettings]):
    """Admin settings repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize admin settings repository."""
        super().__init__(AdminSettings, session)

    async def get_settings(self) -> AdminSettings | None:
        """
        Get the settings row.

        Returns:
            Settings or None if the row was never seeded
        """
        return await self.get_by_id(ADMIN_SETTINGS_ID)

    async def update_settings(self, **data: Any) -> AdminSettings | None:
        """
        Update the settings row.

        Args:
            **data: Column values to set

        Returns:
            Updated settings or None if the row does not exist
        """
        return await self.update(ADMIN_SETTINGS_ID, for_update=True, **data)

    async def create_default(self) -> AdminSettings:
        """Create the settings row with column defaults."""
        return await self.create(id=ADMIN_SETTINGS_ID)
