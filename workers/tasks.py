from .celery_app import celery
import asyncio
import logging

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from app.core.config import settings
from app.notifications.runtime import start_notification_worker, stop_notification_worker
from app.services.mux.client import mux_client_from_settings
from app.services.videos import processing_asset_ids, sync_assets

logger = logging.getLogger("workers")


async def _refresh(asset_ids: list[str] | None = None) -> dict:
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    Session = async_sessionmaker(engine, expire_on_commit=False)
    mux = mux_client_from_settings()
    worker = start_notification_worker()
    try:
        async with Session() as session:
            if asset_ids is None:
                asset_ids = await processing_asset_ids(session, settings.POLL_BATCH_SIZE)
            statuses = await sync_assets(session, mux, asset_ids)
        await worker.drain()
    finally:
        stop_notification_worker()
        await mux.aclose()
        await engine.dispose()
    return statuses


@celery.task(name="tasks.refresh_asset_status")
def refresh_asset_status(asset_id: str) -> dict:
    """Poll Mux for a single asset and update its upload rows."""
    statuses = asyncio.run(_refresh([asset_id]))
    return {"ok": statuses.get(asset_id) != "error", "status": statuses.get(asset_id)}


@celery.task(name="tasks.refresh_processing_assets")
def refresh_processing_assets() -> dict:
    statuses = asyncio.run(_refresh())
    logger.info("workers: refreshed %d processing assets", len(statuses))
    return {"ok": True, "statuses": statuses}
