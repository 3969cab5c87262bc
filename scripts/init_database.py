#!/usr/bin/env python3
"""Initialize database tables and seed the admin settings row."""

import asyncio
import sys

from loguru import logger

from minefund.config.database import async_session_maker, engine
from minefund.models import Base
from minefund.services.settings_service import SettingsService

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all database tables and the default settings row."""
    logger.info("Connecting to database...")

    async with engine.begin() as conn:
        logger.info("Creating tables (checkfirst=True)...")
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    async with async_session_maker() as session:
        settings = await SettingsService(session).ensure_defaults()
        logger.info(
            f"Admin settings ready: L1={settings.referral_l1_percent}% "
            f"L2={settings.referral_l2_percent}% L3={settings.referral_l3_percent}%"
        )

    await engine.dispose()
    logger.success("Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())
