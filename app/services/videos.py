from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.models import (
    STATUS_FAILED,
    STATUS_PROCESSING,
    STATUS_READY,
    UPLOAD_MODELS,
    MasterclassVideoUpload,
    VideoUpload,
)
from app.services.mux.client import MuxClient, MuxError
from app.services.notifications.service import NotificationService

logger = logging.getLogger("uvicorn.error")

UploadModel = Type[VideoUpload] | Type[MasterclassVideoUpload]


@dataclass
class ReadyResult:
    updated: int = 0
    user_ids: List[str] = field(default_factory=list)


def first_playback_id(asset: Dict[str, Any] | None) -> Optional[str]:
    if not isinstance(asset, dict):
        return None
    playback_ids = asset.get("playback_ids")
    if not isinstance(playback_ids, list) or not playback_ids or not isinstance(playback_ids[0], dict):
        return None
    playback_id = playback_ids[0].get("id")
    return str(playback_id) if playback_id else None



async def record_submission(
    session: AsyncSession,
    model: UploadModel,
    *,
    user_id: str,
    filename: str,
    b2_url: str,
    asset_id: str,
):
    upload = model(
        user_id=user_id,
        filename=filename,
        b2_url=b2_url,
        asset_id=asset_id,
        status=STATUS_PROCESSING,
    )
    session.add(upload)
    await session.commit()
    return upload


async def mark_asset_ready(session: AsyncSession, asset_id: str, playback_id: str) -> ReadyResult:
    """Set every upload row for ``asset_id`` to ready.

    ``user_ids`` lists the owners of rows that were not ready before, so a
    redelivered webhook does not notify twice.
    """
    result = ReadyResult()
    for model in UPLOAD_MODELS:
        pending = await session.execute(
            select(model.user_id).where(model.asset_id == asset_id, model.status != STATUS_READY)
        )
        result.user_ids.extend(pending.scalars().all())
        res = await session.execute(
            update(model)
            .where(model.asset_id == asset_id)
            .values(status=STATUS_READY, playback_id=playback_id, updated_at=func.now())
        )
        result.updated += res.rowcount or 0
    await session.commit()
    return result


async def mark_asset_failed(session: AsyncSession, asset_id: str) -> int:
    updated = 0
    for model in UPLOAD_MODELS:
        res = await session.execute(
            update(model)
            .where(model.asset_id == asset_id, model.status == STATUS_PROCESSING)
            .values(status=STATUS_FAILED, updated_at=func.now())
        )
        updated += res.rowcount or 0
    await session.commit()
    return updated


async def find_upload(session: AsyncSession, asset_id: str):
    for model in UPLOAD_MODELS:
        res = await session.execute(
            select(model).where(model.asset_id == asset_id).order_by(model.created_at.desc()).limit(1)
        )
        upload = res.scalar_one_or_none()
        if upload is not None:
            return upload
    return None


async def processing_asset_ids(session: AsyncSession, limit: int) -> List[str]:
    asset_ids: List[str] = []
    for model in UPLOAD_MODELS:
        res = await session.execute(
            select(model.asset_id)
            .where(model.status == STATUS_PROCESSING, model.asset_id.is_not(None))
            .order_by(model.created_at)
            .limit(limit)
        )
        for asset_id in res.scalars().all():
            if asset_id not in asset_ids:
                asset_ids.append(asset_id)
    return asset_ids[:limit]


def notify_ready(
    user_ids: List[str],
    asset_id: str,
    playback_id: str,
    service: NotificationService | None = None,
) -> int:
    if not user_ids:
        return 0
    try:
        service = service or NotificationService()
    except ValueError as e:
        logger.warning("videos: notifications unavailable: %s", e)
        return 0
    sent = 0
    for user_id in dict.fromkeys(user_ids):
        try:
            service.send(service.video_ready(user_id, asset_id, playback_id))
            sent += 1
        except Exception as e:
            logger.warning("videos: ready notification for %s failed: %s", user_id, e)
    return sent


async def complete_asset(
    session: AsyncSession,
    asset_id: str,
    playback_id: str,
    service: NotificationService | None = None,
) -> ReadyResult:
    result = await mark_asset_ready(session, asset_id, playback_id)
    if result.updated == 0:
        logger.warning("videos: no upload rows for asset %s", asset_id)
    notify_ready(result.user_ids, asset_id, playback_id, service)
    return result


async def sync_asset_status(
    session: AsyncSession,
    mux: MuxClient,
    asset_id: str,
    service: NotificationService | None = None,
) -> str:
    """Poll Mux for one asset and apply the result to the upload rows."""
    body = await mux.get_asset(asset_id)
    asset = body.get("data") or {}
    status = asset.get("status") or STATUS_PROCESSING
    if status == "ready":
        playback_id = first_playback_id(asset)
        if not playback_id:
            logger.warning("videos: asset %s ready without playback id", asset_id)
            return STATUS_PROCESSING
        await complete_asset(session, asset_id, playback_id, service)
        return STATUS_READY
    if status == "errored":
        await mark_asset_failed(session, asset_id)
        return STATUS_FAILED
    return STATUS_PROCESSING


async def sync_assets(
    session: AsyncSession,
    mux: MuxClient,
    asset_ids: List[str],
    service: NotificationService | None = None,
) -> Dict[str, str]:
    """Poll each asset in turn; one failing asset does not stop the batch."""
    statuses: Dict[str, str] = {}
    for asset_id in asset_ids:
        try:
            statuses[asset_id] = await sync_asset_status(session, mux, asset_id, service)
        except MuxError as e:
            logger.warning("videos: status poll for %s failed: %s", asset_id, e)
            statuses[asset_id] = "error"
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("videos: status update for %s failed: %s", asset_id, e)
            statuses[asset_id] = "error"
    return statuses
