"""
Settings service.

Reads and edits the single admin_settings row.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.admin_settings import AdminSettings
from minefund.repositories.admin_settings_repository import (
    AdminSettingsRepository,
)
from minefund.schemas import AdminSettingsUpdate
from minefund.services.base_service import BaseService, transaction
from minefund.services.referral.rate_policy import CommissionRatePolicy
from minefund.utils.exceptions import SettingsNotFoundError


class SettingsService(BaseService):
    """Admin settings management."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize settings service."""
        super().__init__(session)
        self.settings_repo = AdminSettingsRepository(session)

    async def get_settings(self) -> AdminSettings:
        """
        Get the settings row.

        Raises:
            SettingsNotFoundError: If the row was never seeded
        """
        settings = await self.settings_repo.get_settings()
        if settings is None:
            raise SettingsNotFoundError("Admin settings are not configured")
        return settings

    async def get_rate_policy(self) -> CommissionRatePolicy:
        """Snapshot of the current commission rates."""
        return CommissionRatePolicy.from_settings(
            await self.settings_repo.get_settings()
        )

    @transaction
    async def update_settings(self, data: AdminSettingsUpdate) -> AdminSettings:
        """
        Apply a validated partial update.

        Args:
            data: Validated update payload

        Returns:
            Updated settings

        Raises:
            ValueError: If one window bound would cross the stored other bound
        """
        columns = data.to_columns()
        if not columns:
            return await self.get_settings()

        if ("withdrawal_start_time" in columns) != ("withdrawal_end_time" in columns):
            current = await self.get_settings()
            start = columns.get("withdrawal_start_time", current.withdrawal_start_time)
            end = columns.get("withdrawal_end_time", current.withdrawal_end_time)
            if start >= end:
                raise ValueError(
                    f"Withdrawal window {start}-{end} would never open"
                )

        settings = await self.settings_repo.update_settings(**columns)
        if settings is None:
            raise SettingsNotFoundError("Admin settings are not configured")

        self.logger.info(
            "Admin settings updated",
            extra={"fields": sorted(columns)},
        )
        return settings

    @transaction
    async def ensure_defaults(self) -> AdminSettings:
        """Create the settings row with defaults if it does not exist."""
        settings = await self.settings_repo.get_settings()
        if settings is not None:
            return settings

        settings = await self.settings_repo.create_default()
        self.logger.info("Admin settings seeded with defaults")
        return settings
