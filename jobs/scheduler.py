"""
Periodic task scheduler.

Enqueues the dramatiq settlement actor on a fixed interval; the actor
itself runs in the dramatiq workers. Start with:

    python -m jobs.scheduler
"""

import asyncio

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from minefund.config.settings import settings
from minefund.utils.datetime_utils import utc_now

SETTLEMENT_JOB_ID = "settle_expired_investments"

# Running scheduler, set by main()
scheduler_instance: AsyncIOScheduler | None = None


def enqueue_settlement() -> None:
    """Send one settlement message to the workers."""
    from jobs.tasks.investment_settlement import settle_expired_investments

    settle_expired_investments.send()
    logger.info("Enqueued expired investment settlement")


def create_scheduler(
    interval_minutes: int | None = None,
) -> AsyncIOScheduler:
    """
    Build the scheduler with the settlement job.

    The first run fires at start-up so investments that expired while the
    scheduler was down are settled without waiting a full interval.

    Args:
        interval_minutes: Override for settings.settlement_interval_minutes
    """
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        enqueue_settlement,
        "interval",
        minutes=interval_minutes or settings.settlement_interval_minutes,
        id=SETTLEMENT_JOB_ID,
        name="Expired investment settlement",
        next_run_time=utc_now(),
        coalesce=True,
        max_instances=1,
        replace_existing=True,
    )
    return scheduler


async def main() -> None:
    """Run the scheduler until cancelled."""
    global scheduler_instance

    # Binds actors to the Redis broker before the task module is imported
    import jobs.broker  # noqa: F401

    scheduler_instance = create_scheduler()
    scheduler_instance.start()
    logger.info(
        f"Scheduler started: settlement every "
        f"{settings.settlement_interval_minutes} min"
    )

    try:
        await asyncio.Event().wait()
    finally:
        if scheduler_instance.running:
            scheduler_instance.shutdown(wait=False)
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
