"""
APScheduler job for the desktop collector's periodic sync.

Every `sync_interval_seconds` the collector uploads whatever its observers
appended to the local activity log. A failed pass is logged and simply
retried on the next tick.
"""
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from chronos.collector.client import SyncError
from chronos.config import get_settings

logger = logging.getLogger(__name__)


def build_scheduler(service, interval_seconds: Optional[int] = None) -> AsyncIOScheduler:
    """
    Create and configure the APScheduler.

    Args:
        service: CollectorService to run on each tick.
        interval_seconds: Override for the configured sync interval.

    Returns:
        Configured AsyncIOScheduler (not yet started).
    """
    settings = get_settings()
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        _collector_sync,
        trigger="interval",
        seconds=interval_seconds or settings.sync_interval_seconds,
        id="collector_sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        kwargs={"service": service},
    )

    return scheduler


async def _collector_sync(service) -> None:
    """Interval job: one sync pass. Never raises."""
    try:
        await service.sync_once()
    except SyncError as exc:
        logger.error("Sync error: %s", exc)
    except Exception:
        logger.exception("Unexpected failure during collector sync")
