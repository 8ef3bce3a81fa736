from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class MuxWebhookIn(BaseModel):
    """Mux event envelope; ``data`` is read leniently by the route."""

    model_config = ConfigDict(extra="allow")
    type: Any = None
    data: Any = None


class MuxWebhookOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    status: str
    asset_id: Optional[str] = Field(default=None, alias="assetId")
    playback_id: Optional[str] = Field(default=None, alias="playbackId")


class ProcessVideoIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    filename: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")


class SignedUploadIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    filename: Optional[str] = None
    content_type: Optional[str] = Field(default=None, alias="contentType")


class SignedUploadOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    signed_url: str = Field(alias="signedUrl")


class UploadOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    success: bool = True
    public_url: str = Field(alias="publicUrl")
    filename: str


class VideoStatusOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    asset_id: str = Field(alias="assetId")
    status: str
    playback_id: Optional[str] = Field(default=None, alias="playbackId")


MuxResponse = Dict[str, Any]
