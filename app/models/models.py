from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, Uuid
from sqlalchemy.sql import func
import uuid
from datetime import datetime
from app.core.db import Base


STATUS_PROCESSING = "processing"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


class UploadColumns:
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(Text, index=True)
    filename: Mapped[str] = mapped_column(Text)
    b2_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    asset_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    playback_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    status: Mapped[str] = mapped_column(String(32), default=STATUS_PROCESSING)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class VideoUpload(UploadColumns, Base):
    __tablename__ = "video_uploads"


class MasterclassVideoUpload(UploadColumns, Base):
    __tablename__ = "masterclass_video_uploads"


UPLOAD_MODELS = (VideoUpload, MasterclassVideoUpload)
