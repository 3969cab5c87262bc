"""
Investment settlement task.

Completes investments whose plan period has ended: collects their
remaining days, pays the earning commissions, releases the locked
earnings and returns capital.
"""

import dramatiq
from loguru import logger

from jobs.async_runner import create_local_session, run_async
from minefund.services.investment_service import (
    InvestmentService,
    SettlementSummary,
)


@dramatiq.actor(max_retries=3, time_limit=300_000)  # 5 min
def settle_expired_investments() -> None:
    """Settle all expired active investments."""
    logger.info("Starting expired investment settlement...")

    summary = run_async(_settle_expired_investments_async())

    logger.info(
        f"Expired investment settlement complete: "
        f"{len(summary.settled)} settled, {len(summary.failed)} failed"
    )


async def _settle_expired_investments_async() -> SettlementSummary:
    async with create_local_session() as session:
        service = InvestmentService(session)
        return await service.complete_expired_investments()
