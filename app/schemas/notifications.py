from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class NotificationPayload(BaseModel):
    """Push message body as sent to the browser worker.

    Fields are extracted best effort: scalars are read as text, values of
    an unusable type become None so the display default applies. Display
    defaults are applied when the payload is turned into a show request.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    body: Optional[str] = None
    icon: Optional[str] = None
    badge: Optional[str] = None
    tag: Optional[str] = None
    require_interaction: Optional[bool] = Field(default=None, alias="requireInteraction")
    data: Optional[Dict[str, Any]] = None

    @field_validator("title", "body", "icon", "badge", "tag", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        # falsy values fall back to the default
        if not value:
            return None
        if isinstance(value, bool):
            return "true"
        if isinstance(value, (str, int, float)):
            return str(value)
        return None

    @field_validator("require_interaction", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> Optional[bool]:
        if value is None:
            return None
        return bool(value)

    @field_validator("data", mode="before")
    @classmethod
    def _mapping(cls, value: Any) -> Optional[Dict[str, Any]]:
        return value if isinstance(value, dict) else None
