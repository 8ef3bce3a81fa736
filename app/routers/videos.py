from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_session
from app.models.models import MasterclassVideoUpload, VideoUpload
from app.schemas.videos import MuxResponse, ProcessVideoIn, VideoStatusOut
from app.services.mux.client import MuxClient, MuxError, get_mux_client
from app.services.videos import UploadModel, find_upload, record_submission
from app.storage.b2 import PublicUrlError, public_object_url
from workers.tasks import refresh_asset_status

router = APIRouter(tags=["videos"])
logger = logging.getLogger("uvicorn.error")


async def _submit_video(
    model: UploadModel,
    body: ProcessVideoIn,
    session: AsyncSession,
    mux: MuxClient,
) -> MuxResponse:
    if not body.filename or not body.user_id:
        raise HTTPException(status_code=400, detail="Missing filename or userId")

    try:
        b2_url = public_object_url(body.filename)
    except PublicUrlError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        mux_data = await mux.create_asset(b2_url)
    except MuxError as e:
        logger.error("videos: mux asset creation failed for %s: %s", body.filename, e)
        raise HTTPException(status_code=500, detail=str(e)) from e
    asset = mux_data.get("data") if isinstance(mux_data, dict) else None
    asset_id = asset.get("id") if isinstance(asset, dict) else None
    if not asset_id:
        raise HTTPException(status_code=500, detail="Failed to create Mux asset")

    try:
        await record_submission(
            session,
            model,
            user_id=body.user_id,
            filename=body.filename,
            b2_url=b2_url,
            asset_id=asset_id,
        )
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("videos: insert into %s failed: %s", model.__tablename__, e)
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        refresh_asset_status.apply_async(args=[asset_id], countdown=settings.POLL_COUNTDOWN_S, queue="videos")
    except Exception as e:
        # webhook delivery still completes the upload
        logger.warning("videos: could not schedule status poll for %s: %s", asset_id, e)
    return mux_data


@router.post("/videos/process")
async def process_video(
    body: ProcessVideoIn,
    session: AsyncSession = Depends(get_session),
    mux: MuxClient = Depends(get_mux_client),
):
    return await _submit_video(VideoUpload, body, session, mux)


@router.post("/masterclass-videos/process")
async def process_masterclass_video(
    body: ProcessVideoIn,
    session: AsyncSession = Depends(get_session),
    mux: MuxClient = Depends(get_mux_client),
):
    return await _submit_video(MasterclassVideoUpload, body, session, mux)


@router.get("/videos/{asset_id}/status", response_model=VideoStatusOut)
async def video_status(asset_id: str, session: AsyncSession = Depends(get_session)):
    upload = await find_upload(session, asset_id)
    if upload is None:
        raise HTTPException(status_code=404, detail="upload_not_found")
    return VideoStatusOut(asset_id=asset_id, status=upload.status, playback_id=upload.playback_id)
