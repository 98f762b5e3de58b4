"""TopGames — Scheduler Jobs.

Optional APScheduler daily job that refreshes the games table from the store
charts at the configured hour.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.engine import Engine
from sqlmodel import Session

from topgames.config import Settings
from topgames.connectors.stores.client import StoreFeedClient
from topgames.ingest.pipeline import run_populate
from topgames.core.logging import get_logger

logger = get_logger("scheduler")


async def daily_populate_job(engine: Engine, settings: Settings):
    """Run the populate pipeline against the live feeds."""
    logger.info("Scheduled populate starting...")
    client = StoreFeedClient(settings)
    try:
        with Session(engine) as session:
            result = await run_populate(session, client, settings.source_limit)
        logger.info(
            f"Scheduled populate complete: {result.count} games",
            extra={"count": result.count},
        )
    except Exception as e:
        logger.error(f"Scheduled populate failed: {e}")
    finally:
        await client.close()


def start_scheduler(engine: Engine, settings: Settings) -> AsyncIOScheduler | None:
    """Configure and start the scheduler. Returns None when disabled."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return None

    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        daily_populate_job,
        "cron",
        hour=settings.populate_hour,
        minute=0,
        kwargs={"engine": engine, "settings": settings},
        id="daily_populate",
        replace_existing=True,
        misfire_grace_time=3600,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Daily populate at {settings.populate_hour}:00 UTC")
    return scheduler


def stop_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    """Shutdown the scheduler gracefully."""
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
