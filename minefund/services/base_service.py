"""
Base service class.

Every minefund service owns one AsyncSession and a logger bound with its
name. Writing operations are wrapped in `transaction`; batch operations
are wrapped in `log_operation`.
"""

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.utils.exceptions import MinefundError

T = TypeVar("T")


class BaseService:
    """Service with a session and a bound logger."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback current transaction."""
        await self.session.rollback()


def transaction(func: Callable[..., T]) -> Callable[..., T]:
    """
    Run a service method as one unit of work.

    Commits on success. On any exception the session is rolled back and
    the exception re-raised. Business rule violations (MinefundError) are
    logged as warnings; anything else is logged as an error with the
    traceback. Ledger updates and commission walks made by the method share
    its commit.

    Usage:
        @transaction
        async def approve_deposit(self, deposit_id: int):
            ...
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        try:
            result = await func(self, *args, **kwargs)
            await self.commit()
            return result
        except MinefundError as e:
            await self.rollback()
            self.logger.warning(
                f"Rolled back {func.__name__}: {type(e).__name__}",
                extra={"function": func.__name__, "error": str(e)},
            )
            raise
        except Exception as e:
            await self.rollback()
            self.logger.opt(exception=e).error(
                f"Transaction failed in {func.__name__}",
                extra={
                    "function": func.__name__,
                    "error_type": type(e).__name__,
                },
            )
            raise

    return wrapper


def log_operation(func: Callable[..., T]) -> Callable[..., T]:
    """Log start, completion and duration of a service method."""
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        started = time.monotonic()
        self.logger.info(f"Starting {func.__name__}")

        try:
            result = await func(self, *args, **kwargs)
        except Exception as e:
            self.logger.error(
                f"Failed {func.__name__}",
                extra={
                    "duration_seconds": round(time.monotonic() - started, 3),
                    "error": str(e),
                },
            )
            raise

        self.logger.info(
            f"Completed {func.__name__}",
            extra={"duration_seconds": round(time.monotonic() - started, 3)},
        )
        return result

    return wrapper
