import logging
import re
from typing import Any

import boto3
from botocore.client import Config

from app.core.config import settings

logger = logging.getLogger("uvicorn.error")

FALLBACK_PUBLIC_BASE = "https://s3.eu-central-003.backblazeb2.com"
DEFAULT_CONTENT_TYPE = "video/mp4"


class PublicUrlError(RuntimeError):
    def __init__(self, message: str = "Failed to construct valid public URL. Configuration may be incomplete.") -> None:
        super().__init__(message)


def b2_client():
    return boto3.client(
        "s3",
        endpoint_url=settings.B2_S3_ENDPOINT or None,
        aws_access_key_id=settings.B2_KEY_ID or None,
        aws_secret_access_key=settings.B2_APPLICATION_KEY or None,
        region_name=settings.B2_REGION,
        config=Config(signature_version="s3v4"),
    )


def get_storage():
    """FastAPI dependency; overridden in tests."""
    return b2_client()


def public_base_url() -> str:
    explicit = settings.B2_PUBLIC_URL.strip()
    if explicit:
        return explicit.rstrip("/")
    if settings.B2_BUCKET_NAME and settings.B2_S3_ENDPOINT:
        domain = re.sub(r"^https?://", "", settings.B2_S3_ENDPOINT.strip()).rstrip("/")
        return f"https://{domain}"
    logger.error("b2: B2_PUBLIC_URL and endpoint unavailable, using %s", FALLBACK_PUBLIC_BASE)
    return FALLBACK_PUBLIC_BASE


def public_object_url(key: str) -> str:
    bucket = settings.B2_BUCKET_NAME
    if not bucket or not key:
        logger.error("b2: cannot build public url bucket=%r key=%r", bucket, key)
        raise PublicUrlError()
    return f"{public_base_url()}/{bucket}/{key}"


def put_object(s3: Any, key: str, body: bytes, content_type: str | None = None) -> None:
    s3.put_object(
        Bucket=settings.B2_BUCKET_NAME,
        Key=key,
        Body=body,
        ContentType=content_type or DEFAULT_CONTENT_TYPE,
    )


def presign_put(s3: Any, key: str, content_type: str | None = None, expires: int | None = None) -> str:
    return s3.generate_presigned_url(
        "put_object",
        Params={
            "Bucket": settings.B2_BUCKET_NAME,
            "Key": key,
            "ContentType": content_type or DEFAULT_CONTENT_TYPE,
        },
        ExpiresIn=expires or settings.B2_SIGNED_URL_TTL_S,
    )
