"""
Desktop collector entrypoint.

The API runs separately under uvicorn.

Usage:
    python -m chronos setup         # one-time: paste the sync token
    python -m chronos sync          # upload pending log entries once
    python -m chronos collect       # periodic sync every SYNC_INTERVAL_SECONDS
    python -m chronos               # same as collect
    uvicorn chronos.api.main:app --host 0.0.0.0 --port 8000  # starts API
"""
import asyncio
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def _run_setup() -> None:
    from chronos.scripts.setup import run_setup
    run_setup()


def _build_service():
    from chronos.collector.activity_log import ActivityLog
    from chronos.collector.client import SyncClient
    from chronos.collector.credentials import NoTokenError, TokenStore
    from chronos.collector.service import LOG_FILE_NAME, STATE_FILE_NAME, CollectorService
    from chronos.config import get_settings

    settings = get_settings()
    try:
        token = TokenStore(settings.collector_dir).load()
    except NoTokenError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    client = SyncClient(settings.server_url, token, timeout=settings.sync_timeout_seconds)
    return CollectorService(
        log=ActivityLog(settings.collector_dir / LOG_FILE_NAME),
        client=client,
        state_path=settings.collector_dir / STATE_FILE_NAME,
    )


async def _run_sync_once() -> None:
    from chronos.collector.client import SyncError

    service = _build_service()
    try:
        result = await service.sync_once()
    except SyncError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    logger.info("Sent %d entries, server saved %d", result.sent, result.saved)


async def _run_collector() -> None:
    from chronos.config import get_settings
    from chronos.scheduler.jobs import build_scheduler

    settings = get_settings()
    service = _build_service()

    scheduler = build_scheduler(service)
    scheduler.start()
    logger.info(
        "Chronos collector running (sync every %ds to %s)",
        settings.sync_interval_seconds,
        settings.server_url,
    )

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Shutting down...")
    finally:
        scheduler.shutdown()
        logger.info("Goodbye.")


if __name__ == "__main__":
    command = sys.argv[1] if len(sys.argv) > 1 else "collect"
    if command == "setup":
        _run_setup()
    elif command == "sync":
        asyncio.run(_run_sync_once())
    elif command == "collect":
        asyncio.run(_run_collector())
    else:
        print(__doc__)
        sys.exit(2)
