from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.schemas.videos import MuxWebhookIn, MuxWebhookOut
from app.services.videos import complete_asset, first_playback_id

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = logging.getLogger("uvicorn.error")

ASSET_READY = "video.asset.ready"


@router.post("/mux", response_model=MuxWebhookOut, response_model_exclude_none=True)
async def mux_webhook(
    body: MuxWebhookIn,
    session: AsyncSession = Depends(get_session),
):
    if body.type != ASSET_READY:
        return MuxWebhookOut(status=f"ignored event type: {body.type}")

    asset = body.data if isinstance(body.data, dict) else None
    if asset is None:
        raise HTTPException(status_code=400, detail="Missing asset data")
    asset_id = str(asset["id"]) if asset.get("id") else None
    if not asset_id:
        raise HTTPException(status_code=400, detail="Missing asset ID")
    playback_id = first_playback_id(asset)
    if not playback_id:
        raise HTTPException(status_code=400, detail="Missing playback ID")

    try:
        await complete_asset(session, asset_id, playback_id)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("webhook: database update failed for asset %s: %s", asset_id, e)
        raise HTTPException(status_code=500, detail=str(e)) from e

    logger.info("webhook: video asset %s is ready with playback id %s", asset_id, playback_id)
    return MuxWebhookOut(status="success", asset_id=asset_id, playback_id=playback_id)
