from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from app.schemas.videos import SignedUploadIn, SignedUploadOut, UploadOut
from app.storage.b2 import PublicUrlError, get_storage, presign_put, public_object_url, put_object

router = APIRouter(prefix="/uploads", tags=["uploads"])
logger = logging.getLogger("uvicorn.error")


@router.post("", response_model=UploadOut)
async def upload_file(
    file: UploadFile | None = File(None),
    filename: str | None = Form(None),
    content_type: str | None = Form(None, alias="contentType"),
    s3: Any = Depends(get_storage),
):
    if file is None or not filename:
        raise HTTPException(status_code=400, detail="Missing file or filename")

    data = await file.read()
    try:
        await run_in_threadpool(put_object, s3, filename, data, content_type)
    except (ClientError, BotoCoreError) as e:
        logger.error("uploads: put_object failed for %s: %s", filename, e)
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        public_url = public_object_url(filename)
    except PublicUrlError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    logger.info("uploads: stored %s (%d bytes)", filename, len(data))
    return UploadOut(public_url=public_url, filename=filename)


@router.post("/signed-url", response_model=SignedUploadOut)
async def signed_upload_url(body: SignedUploadIn, s3: Any = Depends(get_storage)):
    if not body.filename:
        raise HTTPException(status_code=400, detail="Missing filename")
    try:
        url = await run_in_threadpool(presign_put, s3, body.filename, body.content_type)
    except (ClientError, BotoCoreError) as e:
        logger.error("uploads: presign failed for %s: %s", body.filename, e)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return SignedUploadOut(signed_url=url)
