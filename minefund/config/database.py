"""
Database engine and session factory.

All services receive an AsyncSession created here; dramatiq workers use
jobs.async_runner.create_local_session instead.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from minefund.config.settings import settings

engine = create_async_engine(
    settings.async_database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
